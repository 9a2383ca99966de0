"""
Development-axis derivation for claim listings.

A listing evaluated in `file_year` reports claims from `accident_year`;
the age of that observation is (file_year - accident_year) periods, expressed in months.
"""

from __future__ import annotations

from typing import List, Tuple

import numpy as np
import pandas as pd

from core.schema import MATURITY_COLUMN
from core.utils import require_columns


class MaturityError(ValueError):
    """Maturity came out negative or undefined for some rows."""

    def __init__(self, pairs: List[Tuple], *, origin_column: str, evaluation_column: str):
        self.pairs = pairs
        super().__init__(
            f"Invalid maturity for {len(pairs)} ({origin_column}, {evaluation_column}) "
            f"pair(s): {pairs}. {evaluation_column} must be present and not before {origin_column}."
        )


def _as_plain(v):
    if pd.isna(v):
        return None
    f = float(v)
    return int(f) if f.is_integer() else f


def derive_maturity(
    df: pd.DataFrame,
    *,
    origin_column: str = "accident_year",
    evaluation_column: str = "file_year",
    months_per_period: int = 12,
    output_column: str = MATURITY_COLUMN,
) -> pd.DataFrame:
    """
    Return a copy of `df` with `output_column = (evaluation - origin) * months_per_period`.

    Raises
    ------
    MaturityError
        If any row yields a negative or non-finite maturity. The error lists each
        offending (origin, evaluation) pair once, in first-seen order.
    """
    require_columns(df, [origin_column, evaluation_column])
    origin = pd.to_numeric(df[origin_column], errors="coerce").astype(float)
    evaluation = pd.to_numeric(df[evaluation_column], errors="coerce").astype(float)
    maturity = (evaluation - origin) * months_per_period

    bad = ~np.isfinite(maturity.to_numpy()) | (maturity.to_numpy() < 0)
    if bad.any():
        offending = (
            pd.DataFrame({"o": df[origin_column], "e": df[evaluation_column]})[bad]
            .drop_duplicates()
        )
        pairs = [(_as_plain(o), _as_plain(e)) for o, e in offending.itertuples(index=False)]
        raise MaturityError(pairs, origin_column=origin_column, evaluation_column=evaluation_column)

    out = df.copy()
    # Whole months for whole-period inputs; fractional inputs keep their fraction.
    if (maturity % 1 == 0).all():
        out[output_column] = maturity.astype("int64")
    else:
        out[output_column] = maturity
    return out
