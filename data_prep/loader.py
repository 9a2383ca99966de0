"""
Claim listing loader — reads one spreadsheet per call and restricts it to the required columns.

Source files are heterogeneous: each carries its own extra columns and header spelling.
Headers are normalized and aliased first, then the required subset is selected.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Sequence, Tuple, Union

import pandas as pd

from core.schema import CLAIM_COLUMNS, YEAR_COLUMNS, SchemaError
from core.utils import is_integral, normalize_header

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]

DEFAULT_PATTERNS: Tuple[str, ...] = ("*.xlsx", "*.xls", "*.csv")

# Keys are normalized headers (see core.utils.normalize_header).
_COLUMN_ALIASES: Dict[str, str] = {
    # origin
    "ay": "accident_year",
    "acc_year": "accident_year",
    "accident_yr": "accident_year",
    "accidentyear": "accident_year",
    "loss_year": "accident_year",
    # evaluation
    "fy": "file_year",
    "fileyear": "file_year",
    "eval_year": "file_year",
    "evaluation_year": "file_year",
    "valuation_year": "file_year",
    "as_of_year": "file_year",
    # value
    "paid_loss": "paid",
    "paid_losses": "paid",
    "paid_amount": "paid",
    "paid_to_date": "paid",
    "cumulative_paid": "paid",
}


@dataclass(frozen=True)
class LoadFailure:
    """A file that was skipped because it could not be reduced to the required columns."""
    path: str
    error: SchemaError

    @property
    def message(self) -> str:
        return str(self.error)


def canonical_name(name) -> str:
    """Header as the loader sees it: normalized, then aliased. 'Paid Loss' -> 'paid'."""
    key = normalize_header(name)
    return _COLUMN_ALIASES.get(key, key)


def canonicalize_columns(df: pd.DataFrame) -> pd.DataFrame:
    """Return a copy with headers normalized, aliases applied and duplicates coalesced."""
    ren = {c: canonical_name(c) for c in df.columns}
    out = df.rename(columns=ren).copy()

    # "Paid" and "Paid Loss" in the same sheet both map to "paid": take first non-null.
    if out.columns.duplicated().any():
        new_cols: List[str] = []
        parts: List[pd.Series] = []
        seen: set[str] = set()
        cols = list(out.columns)
        for name in cols:
            if name in seen:
                continue
            idxs = [i for i, c in enumerate(cols) if c == name]
            s = out.iloc[:, idxs[0]]
            for j in idxs[1:]:
                s = s.combine_first(out.iloc[:, j])
            new_cols.append(name)
            parts.append(s)
            seen.add(name)
        out = pd.concat(parts, axis=1)
        out.columns = new_cols

    return out


def read_claims_file(path: PathLike, *, sheet_name: Union[str, int] = 0) -> pd.DataFrame:
    """Read a raw claim listing. Spreadsheets use the given sheet; CSVs are read whole."""
    p = Path(path)
    suffix = p.suffix.lower()
    if suffix in (".xlsx", ".xlsm"):
        return pd.read_excel(p, sheet_name=sheet_name, engine="openpyxl")
    if suffix == ".xls":
        return pd.read_excel(p, sheet_name=sheet_name, engine="xlrd")
    if suffix == ".csv":
        return pd.read_csv(p, low_memory=False)
    raise ValueError(f"Unsupported claim file format: {p.suffix!r} ({p.name})")


def _coerce_types(
    df: pd.DataFrame,
    *,
    year_columns: Iterable[str],
    numeric_columns: Iterable[str],
    source: str,
) -> pd.DataFrame:
    out = df.copy()
    for col in [c for c in numeric_columns if c in out.columns]:
        before = int(out[col].isna().sum())
        out[col] = pd.to_numeric(out[col], errors="coerce").astype(float)
        coerced = int(out[col].isna().sum()) - before
        if coerced > 0:
            logger.warning("%s: %d non-numeric %s values read as missing", source, coerced, col)
    for col in [c for c in year_columns if c in out.columns]:
        years = pd.to_numeric(out[col], errors="coerce")
        # Non-integral years stay float so the validator can report them.
        if (is_integral(years) | years.isna()).all():
            out[col] = years.astype("Int64")
        else:
            out[col] = years.astype(float)
    return out


def load_claims(
    path: PathLike,
    columns: Sequence[str] = CLAIM_COLUMNS,
    *,
    sheet_name: Union[str, int] = 0,
    year_columns: Iterable[str] = YEAR_COLUMNS,
    numeric_columns: Iterable[str] = ("paid",),
) -> pd.DataFrame:
    """
    Load one claim listing restricted to exactly `columns`, in source row order.

    Requested names are matched the same way as file headers, so "Incurred" finds an
    "incurred" or "Incurred" column. The result uses the names exactly as requested.

    Raises
    ------
    SchemaError
        If any of `columns` is absent from the file (after header normalization).
    """
    source = Path(path).name
    raw = read_claims_file(path, sheet_name=sheet_name)
    df = canonicalize_columns(raw)
    wanted = {c: canonical_name(c) for c in columns}
    missing = [c for c, key in wanted.items() if key not in df.columns]
    if missing:
        raise SchemaError(missing, source=source)
    out = df.loc[:, list(wanted.values())].reset_index(drop=True)
    out.columns = list(wanted)
    out = _coerce_types(out, year_columns=year_columns, numeric_columns=numeric_columns, source=source)
    logger.debug("Loaded %s: %d rows (%d source columns)", source, len(out), raw.shape[1])
    return out


def list_claim_files(directory: PathLike, patterns: Iterable[str] = DEFAULT_PATTERNS) -> List[Path]:
    """Files in `directory` matching any pattern, sorted lexically by name."""
    d = Path(directory)
    if not d.is_dir():
        raise FileNotFoundError(f"Claim directory not found: {d}")
    found = {p for pat in patterns for p in d.glob(pat) if p.is_file()}
    # Office lock files (~$book.xlsx) share the suffix of the real workbook
    return sorted((p for p in found if not p.name.startswith("~$")), key=lambda p: p.name)


def load_claim_files(
    paths: Sequence[PathLike],
    columns: Sequence[str] = CLAIM_COLUMNS,
    *,
    on_error: str = "skip",
    max_workers: int = 1,
    sheet_name: Union[str, int] = 0,
    year_columns: Iterable[str] = YEAR_COLUMNS,
    numeric_columns: Iterable[str] = ("paid",),
) -> Tuple[List[pd.DataFrame], List[LoadFailure]]:
    """
    Load every path independently, keeping the input order.

    Parameters
    ----------
    on_error : str
        "skip" logs a SchemaError and records a LoadFailure; "raise" propagates it.
    max_workers : int
        Values above 1 read files on a thread pool. Output order is unchanged.

    Returns
    -------
    (tables, failures)
    tables: one DataFrame per successfully loaded file, in input order
    failures: one LoadFailure per skipped file
    """
    if on_error not in ("skip", "raise"):
        raise ValueError(f"on_error must be 'skip' or 'raise', got {on_error!r}")
    year_columns = tuple(year_columns)
    numeric_columns = tuple(numeric_columns)

    def _load_one(path: PathLike) -> Tuple[Optional[pd.DataFrame], Optional[LoadFailure]]:
        try:
            table = load_claims(
                path,
                columns,
                sheet_name=sheet_name,
                year_columns=year_columns,
                numeric_columns=numeric_columns,
            )
        except SchemaError as e:
            if on_error == "raise":
                raise
            logger.warning("Skipping %s: %s", Path(path).name, e)
            return None, LoadFailure(path=str(path), error=e)
        return table, None

    if max_workers > 1 and len(paths) > 1:
        with ThreadPoolExecutor(max_workers=max_workers) as pool:
            outcomes = list(pool.map(_load_one, paths))
    else:
        outcomes = [_load_one(p) for p in paths]

    tables = [t for t, _ in outcomes if t is not None]
    failures = [f for _, f in outcomes if f is not None]
    return tables, failures
