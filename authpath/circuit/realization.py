"""
Module 03 - Symbolic Realization
Runs the authentication-path algorithm over circuit-bound variables.
"""
from __future__ import annotations

from authpath.circuit.context import BitVar, CircuitContext, DigestVar
from authpath.crypto.hashing import HashAlgorithm


class SymbolicRealization:
    """Realization whose digests and bits live in a CircuitContext."""

    symbolic = True

    def __init__(self, context: CircuitContext) -> None:
        self.context = context
        self._zero: DigestVar | None = None

    @property
    def hasher(self) -> HashAlgorithm:
        return self.context.hasher

    def zero(self) -> DigestVar:
        # one shared constant per context
        if self._zero is None:
            self._zero = self.context.constant_digest(self.hasher.zero())
        return self._zero

    def digest(self, value: bytes) -> DigestVar:
        return self.context.bind_digest(value)

    def bit(self, value: int) -> BitVar:
        return self.context.bind_bit(value)

    def mix(self, left: DigestVar, right: DigestVar) -> DigestVar:
        return self.context.mix(left, right)

    def select(self, cond: BitVar, a: DigestVar, b: DigestVar) -> DigestVar:
        return self.context.select(cond, a, b)

    def __repr__(self) -> str:
        return f"SymbolicRealization({self.context!r})"


__all__ = [
    "SymbolicRealization",
]
