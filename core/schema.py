from __future__ import annotations

from typing import Iterable, Optional, Tuple

# Columns every claim listing must provide. Anything else in a source file is dropped.
CLAIM_COLUMNS: Tuple[str, ...] = (
    "file_year",
    "accident_year",
    "paid",
)

# Integer period columns (coerced to nullable Int64 on load).
YEAR_COLUMNS: Tuple[str, ...] = ("file_year", "accident_year")

# Default name of the derived development-axis column.
MATURITY_COLUMN = "maturity"


class SchemaError(ValueError):
    """A table is missing one or more required columns."""

    def __init__(self, missing: Iterable[str], source: Optional[str] = None):
        self.missing = list(missing)
        self.source = source
        where = f" in {source}" if source else ""
        super().__init__(f"Missing required columns{where}: {self.missing}")
