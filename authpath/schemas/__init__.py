"""
Module 01 - Schemas & Canonicalization

Error taxonomy, canonical JSON for commitments, and report models.
"""

from .errors import (
    ErrorCodes,
    MerkleError,
    MarshalError,
    AuthPathException,
    TreeFullException,
    MarshalException,
    CircuitException,
    CanonicalizationException,
    ConfigException,
)

from .canonical import (
    canonicalize_value,
    dumps_canonical,
)

from .reports import (
    AuthPathReport,
    BundleSummary,
    WitnessReport,
)

__all__ = [
    # Errors
    "ErrorCodes",
    "MerkleError",
    "MarshalError",
    "AuthPathException",
    "TreeFullException",
    "MarshalException",
    "CircuitException",
    "CanonicalizationException",
    "ConfigException",
    # Canonical
    "canonicalize_value",
    "dumps_canonical",
    # Reports
    "AuthPathReport",
    "BundleSummary",
    "WitnessReport",
]
