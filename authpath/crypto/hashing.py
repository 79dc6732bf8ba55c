"""
Module 01 - Hashing Utilities
Digest capability for the Merkle accumulator.

This module provides:
- SHA-256 / SHA-512 hashing for raw bytes
- HashAlgorithm: the opaque two-input digest mixer plus its ZERO digest
- Word digests (an integer placed in the first digest word)
- Canonical hashing for objects (via dumps_canonical)
- Hex encoding/decoding with 0x prefix

Security/Determinism Notes:
- Parent digests are H(left || right); the mixer never reorders inputs
- ZERO is the all-zero digest and stands for a not-yet-populated subtree
- All operations are deterministic
"""
from __future__ import annotations

import hashlib
from dataclasses import dataclass
from typing import Any, Callable

from authpath.schemas.canonical import dumps_canonical
from authpath.schemas.errors import ConfigException


def sha256(data: bytes) -> bytes:
    """
    Compute SHA-256 hash of raw bytes.

    Args:
        data: Raw bytes to hash

    Returns:
        32-byte SHA-256 digest

    Example:
        >>> sha256(b"hello").hex()
        '2cf24dba5fb0a30e26e83b2ac5b9e29e1b161e5c1fa7425e73043362938b9824'
    """
    return hashlib.sha256(data).digest()


def sha512(data: bytes) -> bytes:
    """Compute SHA-512 hash of raw bytes (64-byte digest)."""
    return hashlib.sha512(data).digest()


@dataclass(frozen=True)
class HashAlgorithm:
    """
    A fixed-width digest type with its two-input mixing operation.

    The digest is viewed as eight big-endian words, which is how a
    compression function built for circuits consumes it. A "word digest"
    carries a small integer in its first word and zeros elsewhere.

    Attributes:
        name: Algorithm name ("sha256" or "sha512")
        digest_size: Digest length in bytes
        word_size: Length of one digest word in bytes
        hash_fn: Raw bytes -> digest
    """
    name: str
    digest_size: int
    word_size: int
    hash_fn: Callable[[bytes], bytes]

    def zero(self) -> bytes:
        """Placeholder digest for subtrees that hold no leaves yet."""
        return bytes(self.digest_size)

    def mix(self, left: bytes, right: bytes) -> bytes:
        """Parent digest: H(left || right)."""
        return self.hash_fn(left + right)

    def word_digest(self, value: int) -> bytes:
        """
        Digest whose first word is `value`, remaining words zero.

        Args:
            value: Non-negative integer that fits in one word

        Returns:
            Digest of `digest_size` bytes

        Raises:
            ValueError: If value is negative or too large for one word
        """
        if value < 0 or value >= 1 << (8 * self.word_size):
            raise ValueError(
                f"Value {value} does not fit in a {self.word_size}-byte word"
            )
        return value.to_bytes(self.word_size, "big") + bytes(
            self.digest_size - self.word_size
        )

    def is_digest(self, value: Any) -> bool:
        """True when value is a concrete digest of this algorithm's size."""
        return isinstance(value, bytes) and len(value) == self.digest_size


SHA256 = HashAlgorithm(name="sha256", digest_size=32, word_size=4, hash_fn=sha256)
SHA512 = HashAlgorithm(name="sha512", digest_size=64, word_size=8, hash_fn=sha512)

HASH_ALGORITHMS: dict[str, HashAlgorithm] = {
    SHA256.name: SHA256,
    SHA512.name: SHA512,
}


def get_hash_algorithm(name: str) -> HashAlgorithm:
    """
    Look up a hash algorithm by name.

    Raises:
        ConfigException: If the name is not a supported algorithm
    """
    try:
        return HASH_ALGORITHMS[name.lower()]
    except KeyError:
        raise ConfigException(
            message=f"Unsupported hash algorithm: {name}",
            details={"supported": sorted(HASH_ALGORITHMS)},
        ) from None


def hash_canonical(obj: Any, algorithm: HashAlgorithm = SHA256) -> bytes:
    """
    Hash an object using canonical JSON serialization.

    This is the standard way to turn a structured record into a leaf
    commitment: the object is serialized to canonical JSON (deterministic),
    then the UTF-8 encoded bytes are hashed.

    Rule: leaf = H(dumps_canonical(obj).encode("utf-8"))

    Args:
        obj: Any object that can be canonically serialized
        algorithm: Hash algorithm that sizes the commitment

    Returns:
        Digest of the canonical JSON

    Raises:
        CanonicalizationException: If object cannot be canonically serialized
    """
    canonical_json = dumps_canonical(obj)
    return algorithm.hash_fn(canonical_json.encode("utf-8"))


def to_hex(data: bytes) -> str:
    """
    Convert bytes to hexadecimal string with 0x prefix.

    Example:
        >>> to_hex(bytes.fromhex("deadbeef"))
        '0xdeadbeef'
    """
    return "0x" + data.hex()


def from_hex(hex_string: str) -> bytes:
    """
    Convert hexadecimal string (with 0x prefix) to bytes.

    Args:
        hex_string: Hex string with 0x prefix

    Returns:
        Decoded bytes

    Raises:
        ValueError: If string doesn't start with 0x, has odd length,
                   or contains invalid hex characters
    """
    if not hex_string.startswith("0x"):
        raise ValueError(
            f"Hex string must start with '0x' prefix, got: {hex_string[:10]}..."
        )

    hex_content = hex_string[2:]

    if len(hex_content) % 2 != 0:
        raise ValueError(
            f"Hex string must have even length after 0x prefix, "
            f"got length {len(hex_content)}"
        )

    try:
        return bytes.fromhex(hex_content)
    except ValueError as e:
        raise ValueError(f"Invalid hex characters in string: {e}") from e


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
