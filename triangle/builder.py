"""
Loss development triangle — origin period x development age, one aggregated value per cell.

Cells with no contributing records are absent: `value()` returns None and the
materialized matrix holds NaN, so an observed zero is never confused with a
not-yet-developed cell.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Hashable, List, Optional, Union

import pandas as pd

from core.config import TriangleConfig
from core.utils import require_columns

from .development import derive_maturity
from .pivot import AggFunc, Cell, aggregate_cells, cells_to_frame


@dataclass(frozen=True)
class Triangle:
    """Immutable (origin, development) -> value mapping with matrix views."""
    cells: Dict[Cell, float] = field(default_factory=dict)
    origin_name: str = "accident_year"
    development_name: str = "maturity"
    value_name: str = "paid"

    def __post_init__(self) -> None:
        # own copy, so later edits to the caller's dict cannot reach the triangle
        object.__setattr__(self, "cells", dict(self.cells))

    def __hash__(self) -> int:
        names = (self.origin_name, self.development_name, self.value_name)
        return hash((frozenset(self.cells.items()), names))

    def __len__(self) -> int:
        return len(self.cells)

    def __repr__(self) -> str:
        return (
            f"Triangle({self.value_name}: {len(self.origins)} {self.origin_name} x "
            f"{len(self.developments)} {self.development_name}, {len(self.cells)} cells)"
        )

    @property
    def origins(self) -> List[Hashable]:
        return sorted({o for o, _ in self.cells})

    @property
    def developments(self) -> List[Hashable]:
        return sorted({d for _, d in self.cells})

    def value(self, origin: Hashable, development: Hashable) -> Optional[float]:
        """Aggregated value of a cell, or None when no record contributed to it."""
        return self.cells.get((origin, development))

    def is_observed(self, origin: Hashable, development: Hashable) -> bool:
        return (origin, development) in self.cells

    def to_frame(self) -> pd.DataFrame:
        """Dense matrix: sorted origins as rows, sorted developments as columns, NaN when absent."""
        return cells_to_frame(self.cells, row_name=self.origin_name, column_name=self.development_name)

    def _with_cells(self, cells: Dict[Cell, float]) -> "Triangle":
        return Triangle(
            cells=cells,
            origin_name=self.origin_name,
            development_name=self.development_name,
            value_name=self.value_name,
        )

    def to_incremental(self) -> "Triangle":
        """
        Cumulative -> incremental along each origin row.
        Each observed cell minus the previous observed cell in the same row; the first stays as is.
        """
        out: Dict[Cell, float] = {}
        for origin in self.origins:
            prev = None
            for dev in self.developments:
                v = self.cells.get((origin, dev))
                if v is None:
                    continue
                out[(origin, dev)] = v if prev is None else v - prev
                prev = v
        return self._with_cells(out)

    def to_cumulative(self) -> "Triangle":
        """Incremental -> cumulative: running sum over observed cells in each origin row."""
        out: Dict[Cell, float] = {}
        for origin in self.origins:
            running = 0.0
            for dev in self.developments:
                v = self.cells.get((origin, dev))
                if v is None:
                    continue
                running += v
                out[(origin, dev)] = running
        return self._with_cells(out)

    def latest_diagonal(self) -> pd.Series:
        """Value at the greatest observed development age of each origin."""
        latest = {}
        for (origin, dev), v in self.cells.items():
            if origin not in latest or dev > latest[origin][0]:
                latest[origin] = (dev, v)
        s = pd.Series(
            {o: latest[o][1] for o in sorted(latest)}, dtype=float, name=self.value_name
        )
        s.index.name = self.origin_name
        return s


def build_triangle(
    records: pd.DataFrame,
    *,
    origin_column: str,
    development_column: str,
    value_column: str,
    aggfunc: AggFunc = "sum",
) -> Triangle:
    """
    Pivot records into a Triangle. The development column must already exist.

    Records sharing an (origin, development) pair are combined with `aggfunc`.
    """
    require_columns(records, [origin_column, development_column, value_column])
    cells = aggregate_cells(
        records,
        row_column=origin_column,
        column_column=development_column,
        value_column=value_column,
        aggfunc=aggfunc,
    )
    return Triangle(
        cells=cells,
        origin_name=origin_column,
        development_name=development_column,
        value_name=value_column,
    )


def build_claims_triangle(claims: pd.DataFrame, config: Optional[TriangleConfig] = None) -> Triangle:
    """
    Claim listings -> triangle: derive maturity from (evaluation - origin) years, then pivot.

    Raises
    ------
    MaturityError
        If an evaluation year precedes its accident year or either is missing.
    """
    cfg = config or TriangleConfig()
    eval_col, origin_col = cfg.development_source_columns
    with_age = derive_maturity(
        claims,
        origin_column=origin_col,
        evaluation_column=eval_col,
        months_per_period=cfg.months_per_period,
        output_column=cfg.development_column,
    )
    return build_triangle(
        with_age,
        origin_column=cfg.origin_column,
        development_column=cfg.development_column,
        value_column=cfg.value_column,
        aggfunc=cfg.aggregation_function,
    )


def export_triangle(triangle: Triangle, path: Union[str, Path]) -> Path:
    """Write the triangle matrix to .xlsx or .csv. Absent cells are left empty."""
    p = Path(path)
    frame = triangle.to_frame()
    suffix = p.suffix.lower()
    if suffix == ".xlsx":
        frame.to_excel(p, sheet_name="triangle", engine="openpyxl")
    elif suffix == ".csv":
        frame.to_csv(p)
    else:
        raise ValueError(f"Unsupported export format: {p.suffix!r} (use .xlsx or .csv)")
    return p
