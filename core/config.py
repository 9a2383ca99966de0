"""
Triangle run configuration.
One frozen object carries every recognized option through loader, merger and triangulator.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Literal, Tuple, Union

from .schema import CLAIM_COLUMNS, MATURITY_COLUMN

AggFunc = Union[str, Callable]


@dataclass(frozen=True)
class TriangleConfig:
    required_columns: Tuple[str, ...] = CLAIM_COLUMNS

    # axes
    origin_column: str = "accident_year"
    # (evaluation column, origin column) used to derive the development axis
    development_source_columns: Tuple[str, str] = ("file_year", "accident_year")
    development_column: str = MATURITY_COLUMN
    months_per_period: int = 12

    # cell values
    value_column: str = "paid"
    aggregation_function: AggFunc = "sum"

    # input handling
    file_patterns: Tuple[str, ...] = ("*.xlsx", "*.xls", "*.csv")
    sheet_name: Union[str, int] = 0
    on_schema_error: Literal["skip", "raise"] = "skip"
    max_workers: int = 1

    def __post_init__(self) -> None:
        if len(self.development_source_columns) != 2:
            raise ValueError("development_source_columns must name (evaluation, origin) columns.")
        needed = {self.origin_column, self.value_column, *self.development_source_columns}
        absent = sorted(needed - set(self.required_columns))
        if absent:
            raise ValueError(f"Columns used by the triangle must be in required_columns: {absent}")
        if self.on_schema_error not in ("skip", "raise"):
            raise ValueError(f"on_schema_error must be 'skip' or 'raise', got {self.on_schema_error!r}")
        if self.months_per_period <= 0:
            raise ValueError("months_per_period must be positive.")
        if self.max_workers < 1:
            raise ValueError("max_workers must be >= 1.")

    @property
    def evaluation_column(self) -> str:
        return self.development_source_columns[0]
