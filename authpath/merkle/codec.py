"""
Module 02 - Persistence Codec
Whitespace/newline-delimited text format for paths, trees and bundles.

Layout (each object also exposes marshal_out / marshal_in):

    AuthenticationPath:  <depth>\\n <root_path vector> <siblings vector> <child bit per line>
    Tree:                <is_full:0|1>\\n <AuthenticationPath>
    Bundle:              <Tree> <tree_size>\\n <auth_leaf vector> <auth_path[0]> <auth_path[1]> ...

A digest vector is "<count>\\n" followed by one 0x-prefixed hex digest per
line. Reading never raises on malformed input: the TokenReader records the
first failure as a MarshalError and every later read returns None, the
way a failed input stream stays failed.
"""
from __future__ import annotations

import io
from typing import Any, Sequence, TextIO

from authpath.crypto.hashing import HashAlgorithm, from_hex, to_hex
from authpath.schemas.errors import MarshalError


class TokenReader:
    """
    Sequential reader over whitespace-separated tokens.

    Example:
        >>> reader = TokenReader("2\\n1 0")
        >>> reader.read_int("depth"), reader.read_bit(), reader.read_bit()
        (2, 1, 0)
    """

    def __init__(self, text: str) -> None:
        self._tokens: list[str] = text.split()
        self._pos = 0
        self.error: MarshalError | None = None

    @classmethod
    def from_stream(cls, stream: TextIO) -> "TokenReader":
        return cls(stream.read())

    @property
    def failed(self) -> bool:
        return self.error is not None

    @property
    def exhausted(self) -> bool:
        """True when every token has been consumed."""
        return self._pos >= len(self._tokens)

    @property
    def position(self) -> int:
        return self._pos

    def fail(self, expected: str, actual: str | None = None, message: str | None = None) -> None:
        """Record a failure; only the first one is kept."""
        if self.error is None:
            self.error = MarshalError(
                message=message or f"Expected {expected}, got {actual if actual is not None else 'end of input'}",
                token_index=self._pos,
                expected=expected,
                actual=actual,
            )

    def _next(self, expected: str) -> str | None:
        if self.failed:
            return None
        if self.exhausted:
            self.fail(expected)
            return None
        token = self._tokens[self._pos]
        self._pos += 1
        return token

    def expect_end(self) -> bool:
        """Fail unless every token has been consumed."""
        if self.failed:
            return False
        if not self.exhausted:
            self.fail(
                "end of input",
                self._tokens[self._pos],
                message=f"Unexpected trailing data at token {self._pos}: {self._tokens[self._pos]!r}",
            )
            return False
        return True

    def read_int(self, expected: str = "integer") -> int | None:
        """Read a non-negative decimal integer."""
        token = self._next(expected)
        if token is None:
            return None
        if not token.isdigit():
            self._pos -= 1
            self.fail(expected, token)
            return None
        return int(token)

    def read_bit(self, expected: str = "child bit") -> int | None:
        token = self._next(expected)
        if token is None:
            return None
        if token not in ("0", "1"):
            self._pos -= 1
            self.fail(f"{expected} (0 or 1)", token)
            return None
        return int(token)

    def read_digest(self, hasher: HashAlgorithm, expected: str = "digest") -> bytes | None:
        token = self._next(expected)
        if token is None:
            return None
        try:
            value = from_hex(token)
        except ValueError:
            value = None
        if value is None or not hasher.is_digest(value):
            self._pos -= 1
            self.fail(f"{expected} ({hasher.digest_size}-byte hex)", token)
            return None
        return value

    def read_digest_vector(
        self,
        hasher: HashAlgorithm,
        length: int | None = None,
        expected: str = "digest vector",
    ) -> list[bytes] | None:
        """
        Read "<count>" followed by count digests.

        Args:
            hasher: Sizes the digests
            length: Required count, or None to accept any count
            expected: Label used in the error record
        """
        count = self.read_int(f"{expected} length")
        if count is None:
            return None
        if length is not None and count != length:
            self._pos -= 1
            self.fail(
                f"{expected} length {length}",
                str(count),
                message=f"Inconsistent {expected} length: expected {length}, got {count}",
            )
            return None
        values: list[bytes] = []
        for _ in range(count):
            value = self.read_digest(hasher, expected)
            if value is None:
                return None
            values.append(value)
        return values


def write_digest_vector(stream: TextIO, digests: Sequence[bytes]) -> None:
    stream.write(f"{len(digests)}\n")
    for digest in digests:
        stream.write(f"{to_hex(digest)}\n")


def dumps(obj: Any) -> str:
    """Serialize any object exposing marshal_out(stream) to text."""
    buffer = io.StringIO()
    obj.marshal_out(buffer)
    return buffer.getvalue()


__all__ = [
    "TokenReader",
    "write_digest_vector",
    "dumps",
]
