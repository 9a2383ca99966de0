"""
Merge per-file claim tables into one table.
"""

from __future__ import annotations

from typing import List, Sequence

import pandas as pd

from core.schema import CLAIM_COLUMNS
from core.utils import require_columns


def empty_claims_table(columns: Sequence[str] = CLAIM_COLUMNS) -> pd.DataFrame:
    """Zero-row table with the required columns defined."""
    return pd.DataFrame({c: pd.Series(dtype="object") for c in columns})


def merge_claims(tables: Sequence[pd.DataFrame], columns: Sequence[str] = CLAIM_COLUMNS) -> pd.DataFrame:
    """
    Row-wise concatenation of `tables` in the order supplied.

    Each table is reduced to `columns`; extra columns are ignored. Rows keep their
    per-file order and the result gets a fresh RangeIndex. No deduplication.
    Inputs are not modified. An empty sequence gives a zero-row table with `columns`.

    Raises
    ------
    SchemaError
        If a table lacks one of `columns`.
    """
    if len(tables) == 0:
        return empty_claims_table(columns)

    parts: List[pd.DataFrame] = []
    for t in tables:
        require_columns(t, columns)
        parts.append(t.loc[:, list(columns)])

    return pd.concat(parts, ignore_index=True)
