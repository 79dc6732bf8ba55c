"""
Module 02 - Realizations
Value domains the authentication-path algorithm runs over.

The update algorithm in auth_path.py is written once against the
Realization interface below. Two implementations exist:
- ConcreteRealization: digests are bytes, bits are ints (plain evaluation)
- SymbolicRealization (authpath.circuit.realization): digests and bits are
  variables bound in a CircuitContext; every operation appends constraints

A realization never branches on a bit's value inside select().
"""
from __future__ import annotations

from typing import Any, Protocol

from authpath.crypto.hashing import SHA256, HashAlgorithm


class Realization(Protocol):
    """Digest/bit capability consumed by AuthenticationPath."""

    hasher: HashAlgorithm
    symbolic: bool

    def zero(self) -> Any:
        """Placeholder digest for empty subtrees."""
        ...

    def digest(self, value: bytes) -> Any:
        """Bring a concrete digest into this realization."""
        ...

    def bit(self, value: int) -> Any:
        """Bring a concrete child bit into this realization."""
        ...

    def mix(self, left: Any, right: Any) -> Any:
        """Two-input compression: parent of (left, right)."""
        ...

    def select(self, cond: Any, a: Any, b: Any) -> Any:
        """a if cond else b, without control flow on cond."""
        ...


class ConcreteRealization:
    """Plain evaluation over bytes digests and 0/1 ints."""

    symbolic = False

    def __init__(self, hasher: HashAlgorithm = SHA256) -> None:
        self.hasher = hasher

    def zero(self) -> bytes:
        return self.hasher.zero()

    def digest(self, value: bytes) -> bytes:
        if not self.hasher.is_digest(value):
            raise ValueError(
                f"Expected a {self.hasher.digest_size}-byte digest, got {value!r}"
            )
        return value

    def bit(self, value: int) -> int:
        return 1 if value else 0

    def mix(self, left: bytes, right: bytes) -> bytes:
        return self.hasher.mix(left, right)

    def select(self, cond: int, a: bytes, b: bytes) -> bytes:
        return a if cond else b

    def __eq__(self, other: object) -> bool:
        return isinstance(other, ConcreteRealization) and other.hasher == self.hasher

    def __hash__(self) -> int:
        return hash((ConcreteRealization, self.hasher.name))

    def __repr__(self) -> str:
        return f"ConcreteRealization({self.hasher.name})"


__all__ = [
    "Realization",
    "ConcreteRealization",
]
