"""
Module 02 - Authentication Path
Per-leaf (root_path, sibling, child_bit) triples and their incremental update.

Indexing is bottom-up: index 0 is the leaf level, index depth-1 is the
level just below the root, so root_path[depth-1] is the tree root.

child_bits is a little-endian counter: its integer value is the leaf's
position among the 2^depth slots, and bit i is 1 when the path passes
through a right child at level i.

The update algorithm runs over any Realization. With the concrete
realization it also patches a batch of previously retained paths of the
same tree in the same bottom-up pass; that batch is always concrete.
"""
from __future__ import annotations

import logging
from typing import Any, Sequence, TextIO

from authpath.crypto.hashing import SHA256
from authpath.merkle.codec import TokenReader, write_digest_vector
from authpath.merkle.realization import ConcreteRealization, Realization
from authpath.schemas.errors import CircuitException


logger = logging.getLogger(__name__)


def match_msb(bits: Sequence[int], other: Sequence[int]) -> int:
    """
    Count leading bits two paths share, scanning from the root end.

    A result of k means both leaves have the same ancestor k levels below
    the root and diverge immediately under it.
    """
    count = 0
    for a, b in zip(reversed(bits), reversed(other)):
        if a != b:
            break
        count += 1
    return count


class AuthenticationPath:
    """
    Authentication path from a leaf of a binary Merkle tree to its root.

    Args:
        depth: Number of levels between the leaves and the root
        realization: Digest/bit domain (concrete SHA-256 by default)
    """

    def __init__(self, depth: int = 0, realization: Realization | None = None) -> None:
        if depth < 0:
            raise ValueError(f"Path depth must be non-negative, got {depth}")
        self._realization: Realization = realization or ConcreteRealization(SHA256)
        self._depth = depth
        zero = self._realization.zero() if depth else None
        # first update initializes root path digests
        self._root_path: list[Any] = [zero] * depth
        self._siblings: list[Any] = [zero] * depth
        self._child_bits: list[Any] = [self._realization.bit(0) for _ in range(depth)]
        self._leaf: Any = None

    @classmethod
    def bind(cls, other: "AuthenticationPath", realization: Realization) -> "AuthenticationPath":
        """
        Copy a concrete path into another realization.

        Every sibling digest and child bit is bound as a fresh value of the
        target realization; the root path is left for the first update.
        """
        path = cls.__new__(cls)
        path._realization = realization
        path._depth = other.depth
        path._root_path = [None] * other.depth
        path._siblings = [realization.digest(a) for a in other.siblings]
        path._child_bits = [realization.bit(a) for a in other.child_bits]
        path._leaf = None
        return path

    @classmethod
    def from_components(
        cls,
        root_path: Sequence[Any],
        siblings: Sequence[Any],
        child_bits: Sequence[int],
        realization: Realization | None = None,
    ) -> "AuthenticationPath":
        """
        Build a concrete path from explicit vectors.

        Raises:
            ValueError: If the vectors differ in length or hold bad values
        """
        if not len(root_path) == len(siblings) == len(child_bits):
            raise ValueError(
                "root_path, siblings and child_bits must have equal length, got "
                f"{len(root_path)}, {len(siblings)}, {len(child_bits)}"
            )
        realization = realization or ConcreteRealization(SHA256)
        path = cls(0, realization)
        path._depth = len(siblings)
        path._root_path = [realization.digest(a) for a in root_path]
        path._siblings = [realization.digest(a) for a in siblings]
        path._child_bits = [realization.bit(a) for a in child_bits]
        return path

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    @property
    def depth(self) -> int:
        return self._depth

    @property
    def realization(self) -> Realization:
        return self._realization

    @property
    def root_hash(self) -> Any:
        """Tree root as seen from this path; a depth-0 tree's root is its leaf."""
        if self._depth == 0:
            return self._leaf
        return self._root_path[-1]

    @property
    def root_path(self) -> tuple[Any, ...]:
        return tuple(self._root_path)

    @property
    def siblings(self) -> tuple[Any, ...]:
        return tuple(self._siblings)

    @property
    def child_bits(self) -> tuple[Any, ...]:
        return tuple(self._child_bits)

    @property
    def leaf_index(self) -> int:
        """Integer value of the child-bit counter."""
        self._require_concrete("leaf_index")
        return sum(bit << i for i, bit in enumerate(self._child_bits))

    def copy(self) -> "AuthenticationPath":
        path = AuthenticationPath.__new__(AuthenticationPath)
        path._realization = self._realization
        path._depth = self._depth
        path._root_path = list(self._root_path)
        path._siblings = list(self._siblings)
        path._child_bits = list(self._child_bits)
        path._leaf = self._leaf
        return path

    def _require_concrete(self, operation: str) -> None:
        if self._realization.symbolic:
            raise CircuitException(
                message=f"{operation} would branch on circuit-bound child bits",
                details={"operation": operation},
            )

    # ------------------------------------------------------------------
    # Update algorithm
    # ------------------------------------------------------------------

    def update_path(self, leaf: Any, old_paths: Sequence["AuthenticationPath"] = ()) -> None:
        """
        Recompute digests from `leaf` up to the root.

        Retained paths in `old_paths` belong to earlier leaves of the same
        tree. They are patched in place during the same ascent: levels at or
        above the shared ancestor take the new digest as their root path,
        and the level right under it takes the new subtree root as sibling.

        Args:
            leaf: Newly inserted leaf digest
            old_paths: Retained paths of the same tree to patch

        Raises:
            CircuitException: If a symbolic path is asked to patch old paths
        """
        if old_paths:
            self._require_concrete("patching retained paths")

        r = self._realization

        # root path overlap
        overlap = [match_msb(self._child_bits, other._child_bits) for other in old_paths]

        self._leaf = leaf
        dig = leaf

        # ascend tree from leaf to root
        for i in range(self._depth):
            is_right_child = self._child_bits[i]
            left = r.select(is_right_child, self._siblings[i], dig)
            right = r.select(is_right_child, dig, self._siblings[i])

            dig = r.mix(left, right)
            self._root_path[i] = dig

            # path length from root to node with the new digest
            path_len = self._depth - 1 - i

            for other, shared in zip(old_paths, overlap):
                if path_len <= shared:
                    other._root_path[i] = dig
                elif path_len == shared + 1:
                    other._siblings[i + 1] = dig

        for other, shared in zip(old_paths, overlap):
            if shared == self._depth - 1:
                # differ in last bit only, leaf must be right sibling
                other._siblings[0] = leaf

        if old_paths:
            logger.debug(f"Patched {len(old_paths)} retained paths at depth {self._depth}")

    def leaf_sibling(self, leaf: Any) -> None:
        """Just-added leaf becomes the left sibling of the next leaf."""
        self._siblings[0] = leaf

    def hash_sibling(self, index: int) -> None:
        """
        Open a new branch at level `index`.

        The root of the just-completed left subtree becomes the sibling at
        `index`; everything below restarts from ZERO placeholders.
        """
        if not 0 < index < self._depth:
            raise ValueError(f"Sibling index must be in [1, {self._depth}), got {index}")
        self._siblings[index] = self._root_path[index - 1]

        zero = self._realization.zero()
        for i in range(index):
            self._siblings[i] = zero

    def inc_child_bits(self) -> int:
        """
        Increment the child-bit counter.

        Returns:
            Index of the bit that flipped 0 -> 1, or -1 when every bit was
            already 1 and the counter wrapped to zero (tree just filled)
        """
        self._require_concrete("inc_child_bits")

        for i in range(self._depth):
            if self._child_bits[i] == 0:
                self._child_bits[i] = 1
                return i
            # bit is one, increment to zero and carry
            self._child_bits[i] = 0

        return -1

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def marshal_out(self, stream: TextIO) -> None:
        self._require_concrete("marshal_out")
        stream.write(f"{self._depth}\n")
        write_digest_vector(stream, self._root_path)
        write_digest_vector(stream, self._siblings)
        for bit in self._child_bits:
            stream.write(f"{bit}\n")

    def marshal_in(self, reader: TokenReader) -> bool:
        """
        Read a path written by marshal_out.

        On failure returns False, leaves depth 0 (the invalid sentinel) with
        empty vectors, and the reason is on reader.error.
        """
        self._require_concrete("marshal_in")
        hasher = self._realization.hasher

        # depth 0 is the invalid flag
        self._depth = 0
        self._root_path, self._siblings, self._child_bits = [], [], []
        self._leaf = None

        length = reader.read_int("path depth")
        if length is None:
            return False
        if length == 0:
            reader.fail("non-zero path depth", "0")
            return False

        root_path = reader.read_digest_vector(hasher, length, "root path")
        if root_path is None:
            return False

        siblings = reader.read_digest_vector(hasher, length, "siblings")
        if siblings is None:
            return False

        child_bits: list[int] = []
        for _ in range(length):
            bit = reader.read_bit()
            if bit is None:
                return False
            child_bits.append(bit)

        self._root_path = root_path
        self._siblings = siblings
        self._child_bits = child_bits
        self._depth = length
        return True

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, AuthenticationPath):
            return NotImplemented
        return (
            self._depth == other._depth
            and self._root_path == other._root_path
            and self._siblings == other._siblings
            and self._child_bits == other._child_bits
        )

    def __repr__(self) -> str:
        kind = "symbolic" if self._realization.symbolic else "concrete"
        return f"AuthenticationPath(depth={self._depth}, {kind})"


__all__ = [
    "AuthenticationPath",
    "match_msb",
]
