"""
Pipeline runner — folder of claim listings -> loss development triangle.

  1. Enumerate files (lexical order, so reruns over unchanged inputs are reproducible)
  2. Load each file to the required columns (independent per file)
  3. Merge successfully loaded tables in file order
  4. Validate the merged table (logged, not blocking)
  5. Derive maturity and pivot into a Triangle

A file missing a required column is skipped and reported unless the config says
on_schema_error="raise". A negative maturity always propagates to the caller.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Union

import pandas as pd

from core.config import TriangleConfig
from data_prep.loader import LoadFailure, list_claim_files, load_claim_files
from data_prep.merger import merge_claims
from data_prep.validators import ValidationResult, validate_claims
from triangle.builder import Triangle, build_claims_triangle

logger = logging.getLogger(__name__)

Source = Union[str, Path, Sequence[Union[str, Path]]]


@dataclass
class PipelineResult:
    triangle: Triangle
    merged: pd.DataFrame
    rows_per_file: Dict[str, int] = field(default_factory=dict)
    failures: List[LoadFailure] = field(default_factory=list)
    validation: ValidationResult = field(default_factory=ValidationResult)

    @property
    def n_files(self) -> int:
        return len(self.rows_per_file) + len(self.failures)

    def load_report(self) -> pd.DataFrame:
        """One row per input file: name, status, rows contributed, error."""
        rows = [
            {"file": Path(p).name, "status": "loaded", "rows": n, "error": ""}
            for p, n in self.rows_per_file.items()
        ]
        rows += [
            {"file": Path(f.path).name, "status": "skipped", "rows": 0, "error": f.message}
            for f in self.failures
        ]
        report = pd.DataFrame(rows, columns=["file", "status", "rows", "error"])
        return report.sort_values("file", kind="stable").reset_index(drop=True)


def _resolve_paths(source: Source, config: TriangleConfig) -> List[Path]:
    if isinstance(source, (str, Path)):
        p = Path(source)
        if p.is_dir():
            return list_claim_files(p, config.file_patterns)
        if not p.exists():
            raise FileNotFoundError(f"Claim file or directory not found: {p}")
        return [p]
    paths = [Path(s) for s in source]
    seen = set()
    for p in paths:
        key = p.resolve()
        if key in seen:
            raise ValueError(f"Claim file listed more than once: {p}")
        seen.add(key)
    return paths


def run_pipeline(source: Source, config: Optional[TriangleConfig] = None) -> PipelineResult:
    """
    Build a triangle from a claim directory (or an explicit list of files).

    Parameters
    ----------
    source : path or sequence of paths
        A directory is enumerated with `config.file_patterns`; explicit paths are used in the order given.
    config : TriangleConfig, optional
        Defaults to file_year / accident_year / paid, summed, 12 months per year.

    Returns
    -------
    PipelineResult with the triangle, merged table, per-file row counts, skipped files and validation.
    """
    cfg = config or TriangleConfig()
    paths = _resolve_paths(source, cfg)
    logger.info("Loading %d claim file(s)", len(paths))

    tables, failures = load_claim_files(
        paths,
        cfg.required_columns,
        on_error=cfg.on_schema_error,
        max_workers=cfg.max_workers,
        sheet_name=cfg.sheet_name,
        year_columns=cfg.development_source_columns,
        numeric_columns=(cfg.value_column,),
    )
    failed = {f.path for f in failures}
    loaded = [p for p in paths if str(p) not in failed]
    rows_per_file = {str(p): len(t) for p, t in zip(loaded, tables)}

    merged = merge_claims(tables, cfg.required_columns)

    validation = validate_claims(merged, cfg)
    for msg in validation.errors:
        logger.error("Validation: %s", msg)
    for msg in validation.warnings:
        logger.warning("Validation: %s", msg)

    triangle = build_claims_triangle(merged, cfg)
    logger.info(
        "Built %r from %d rows (%d file(s) loaded, %d skipped)",
        triangle, len(merged), len(loaded), len(failures),
    )
    return PipelineResult(
        triangle=triangle,
        merged=merged,
        rows_per_file=rows_per_file,
        failures=failures,
        validation=validation,
    )
