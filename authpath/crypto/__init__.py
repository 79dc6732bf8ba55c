"""
Core cryptographic utilities.

Module 01 provides the digest capability used by the Merkle accumulator.
"""
from .hashing import (
    sha256,
    sha512,
    HashAlgorithm,
    SHA256,
    SHA512,
    HASH_ALGORITHMS,
    get_hash_algorithm,
    hash_canonical,
    to_hex,
    from_hex,
)

__all__ = [
    "sha256",
    "sha512",
    "HashAlgorithm",
    "SHA256",
    "SHA512",
    "HASH_ALGORITHMS",
    "get_hash_algorithm",
    "hash_canonical",
    "to_hex",
    "from_hex",
]
