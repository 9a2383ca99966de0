"""
Core package — schema definitions, configuration and shared helpers.
No business logic lives here.
"""

from .schema import CLAIM_COLUMNS, MATURITY_COLUMN, YEAR_COLUMNS, SchemaError
from .config import TriangleConfig
from .utils import require_columns, normalize_header

__all__ = [
    "CLAIM_COLUMNS",
    "MATURITY_COLUMN",
    "YEAR_COLUMNS",
    "SchemaError",
    "TriangleConfig",
    "require_columns",
    "normalize_header",
]
