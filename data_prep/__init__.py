"""
Data preparation — loading and merging claim listings, plus validation.
"""

from .loader import (
    LoadFailure,
    canonical_name,
    canonicalize_columns,
    list_claim_files,
    load_claim_files,
    load_claims,
    read_claims_file,
)
from .merger import empty_claims_table, merge_claims
from .validators import ValidationResult, validate_claims

__all__ = [
    "LoadFailure",
    "canonical_name",
    "canonicalize_columns",
    "list_claim_files",
    "load_claim_files",
    "load_claims",
    "read_claims_file",
    "empty_claims_table",
    "merge_claims",
    "ValidationResult",
    "validate_claims",
]
