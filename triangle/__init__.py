"""
Triangle construction — development-axis derivation and two-axis aggregation.
"""

from .development import MaturityError, derive_maturity
from .pivot import aggregate_cells, cells_to_frame
from .builder import Triangle, build_claims_triangle, build_triangle, export_triangle

__all__ = [
    "MaturityError",
    "derive_maturity",
    "aggregate_cells",
    "cells_to_frame",
    "Triangle",
    "build_claims_triangle",
    "build_triangle",
    "export_triangle",
]
