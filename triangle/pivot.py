"""
Generic two-axis aggregation: records -> {(row, column): value}.

Nothing here knows about accident years or maturities; the triangle builder
chooses which columns play the row and column roles.
"""

from __future__ import annotations

from typing import Callable, Dict, Hashable, Tuple, Union

import numpy as np
import pandas as pd

from core.utils import require_columns

Cell = Tuple[Hashable, Hashable]
AggFunc = Union[str, Callable]


def _plain(key):
    # numpy scalars -> python scalars so cell keys compare and hash predictably
    return key.item() if isinstance(key, np.generic) else key


def aggregate_cells(
    df: pd.DataFrame,
    *,
    row_column: str,
    column_column: str,
    value_column: str,
    aggfunc: AggFunc = "sum",
) -> Dict[Cell, float]:
    """
    Group records by (row, column) and combine each group's values with `aggfunc`.

    Parameters
    ----------
    aggfunc : str or callable
        Any pandas groupby aggregation name ("sum", "mean", "max", "count", ...)
        or a callable taking a Series of values. "sum" counts a group whose
        values are all missing as absent rather than zero.

    Returns
    -------
    Dict with exactly one entry per (row, column) cell present in the data.
    Rows with a missing row or column key do not contribute.
    """
    require_columns(df, [row_column, column_column, value_column])
    if len(df) == 0:
        return {}

    values = pd.to_numeric(df[value_column], errors="coerce").astype(float)
    grouped = values.groupby([df[row_column], df[column_column]], sort=True, dropna=True)

    if isinstance(aggfunc, str) and aggfunc == "sum":
        agg = grouped.sum(min_count=1)
    else:
        agg = grouped.agg(aggfunc)

    agg = agg.dropna()
    return {(_plain(r), _plain(c)): float(v) for (r, c), v in agg.items()}


def cells_to_frame(
    cells: Dict[Cell, float],
    *,
    row_name: str = "origin",
    column_name: str = "development",
) -> pd.DataFrame:
    """
    Dense matrix of `cells`: rows and columns sorted ascending, absent cells NaN.
    """
    if not cells:
        frame = pd.DataFrame(dtype=float)
        frame.index.name = row_name
        frame.columns.name = column_name
        return frame

    rows = sorted({r for r, _ in cells})
    cols = sorted({c for _, c in cells})
    frame = pd.DataFrame(np.nan, index=pd.Index(rows, name=row_name), columns=pd.Index(cols, name=column_name))
    for (r, c), v in cells.items():
        frame.at[r, c] = v
    return frame
