"""
Data quality validation for merged claim tables before they are triangulated.

Catches problems early:
- Missing or non-integral period years
- Evaluation year before accident year
- Missing or negative values
- Exact duplicate rows
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

import pandas as pd

from core.config import TriangleConfig
from core.utils import is_integral

# How many offending (origin, evaluation) pairs to quote in a message.
_MAX_PAIRS_SHOWN = 5


@dataclass
class ValidationResult:
    """Findings for one merged claim table; errors block a trustworthy triangle, warnings do not."""
    n_rows: int = 0
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.errors

    @property
    def has_warnings(self) -> bool:
        return bool(self.warnings)

    def summary(self) -> str:
        if not self.errors and not self.warnings:
            return f"{self.n_rows:,} claim rows checked, no issues."
        lines = [f"{self.n_rows:,} claim rows checked:"]
        lines += [f"  error: {e}" for e in self.errors]
        lines += [f"  warning: {w}" for w in self.warnings]
        return "\n".join(lines)


def validate_claims(
    claims: pd.DataFrame,
    config: Optional[TriangleConfig] = None,
) -> ValidationResult:
    """
    Run all validation checks on a merged claim table.
    Returns a ValidationResult with errors (blocking) and warnings (informational).
    """
    cfg = config or TriangleConfig()
    result = ValidationResult(n_rows=len(claims))
    eval_col, origin_col = cfg.development_source_columns

    # --- Schema checks ---
    missing = [c for c in cfg.required_columns if c not in claims.columns]
    if missing:
        result.errors.append(f"Missing required columns: {missing}")
        return result  # can't continue without columns

    n = len(claims)
    if n == 0:
        result.warnings.append("Claim table is empty (0 rows).")
        return result

    # --- Period years ---
    years = {}
    for col in dict.fromkeys([origin_col, eval_col, cfg.origin_column]):
        vals = pd.to_numeric(claims[col], errors="coerce")
        n_null = int(vals.isna().sum())
        n_frac = int((vals.notna() & ~is_integral(vals)).sum())
        if n_null > 0:
            result.errors.append(f"{n_null} rows have null/unparseable {col}.")
        if n_frac > 0:
            result.errors.append(f"{n_frac} rows have non-integral {col}.")
        years[col] = vals

    backwards = years[eval_col] < years[origin_col]
    n_back = int(backwards.sum())
    if n_back > 0:
        pairs = (
            pd.DataFrame({origin_col: years[origin_col], eval_col: years[eval_col]})[backwards]
            .drop_duplicates()
            .head(_MAX_PAIRS_SHOWN)
        )
        shown = [(int(a), int(b)) for a, b in pairs.itertuples(index=False)]
        result.errors.append(
            f"{n_back} rows have {eval_col} before {origin_col} "
            f"(({origin_col}, {eval_col}) e.g. {shown})."
        )

    # --- Values ---
    vals = pd.to_numeric(claims[cfg.value_column], errors="coerce")
    n_null = int(vals.isna().sum())
    n_neg = int((vals < 0).sum())
    if n_null > 0:
        result.warnings.append(f"{n_null} rows have null/unparseable {cfg.value_column}.")
    if n_neg > 0:
        result.warnings.append(f"{n_neg} rows have negative {cfg.value_column}.")

    # --- Duplicates ---
    n_dup = int(claims.loc[:, list(cfg.required_columns)].duplicated().sum())
    if n_dup > 0:
        result.warnings.append(
            f"{n_dup} rows duplicate another row exactly; they are aggregated, not dropped."
        )

    return result
