"""
Module 02 - Merkle Tree (binary, append-only)

The tree keeps a single authentication path: the frontier, i.e. the path
template for the next leaf to be inserted. Inserting a leaf is two steps
driven by the owner (see MerkleBundle.add_leaf):

1. update_path(leaf, retained)  - digests up to the root, patching retained paths
2. update_siblings(leaf)        - advance the counter, rewire frontier siblings

The counter increment decides step 2: carry stopping at bit 0 means the
new leaf is the left sibling of the next one; stopping at bit k > 0 means
a new branch opens at level k; wrapping means the tree is full.
"""
from __future__ import annotations

import logging
from typing import Sequence, TextIO

from authpath.crypto.hashing import SHA256, HashAlgorithm
from authpath.merkle.auth_path import AuthenticationPath
from authpath.merkle.codec import TokenReader
from authpath.merkle.realization import ConcreteRealization
from authpath.schemas.errors import TreeFullException


logger = logging.getLogger(__name__)


class MerkleTree:
    """
    Binary Merkle tree of fixed depth holding up to 2^depth leaves.

    Args:
        depth: Levels between leaves and root
        hasher: Digest mixer for interior nodes
    """

    def __init__(self, depth: int, hasher: HashAlgorithm = SHA256) -> None:
        self._hasher = hasher
        self._is_full = False
        self._auth_path = AuthenticationPath(depth, ConcreteRealization(hasher))

    @classmethod
    def sentinel(cls, hasher: HashAlgorithm = SHA256) -> "MerkleTree":
        """Unusable tree (full, depth 0), the state of a failed read."""
        tree = cls(0, hasher)
        tree._is_full = True
        return tree

    @property
    def depth(self) -> int:
        return self._auth_path.depth

    @property
    def hasher(self) -> HashAlgorithm:
        return self._hasher

    @property
    def capacity(self) -> int:
        return 1 << self.depth

    @property
    def is_full(self) -> bool:
        """True when the number of occupied leaves is 2^depth."""
        return self._is_full

    @property
    def auth_path(self) -> AuthenticationPath:
        """The frontier path (read it, do not mutate it)."""
        return self._auth_path

    @property
    def root_hash(self) -> bytes | None:
        return self._auth_path.root_hash

    def _reject_if_full(self) -> None:
        if self._is_full:
            raise TreeFullException(
                message=f"Merkle tree of depth {self.depth} is full",
                capacity=self.capacity,
            )

    def update_path(self, leaf: bytes, old_paths: Sequence[AuthenticationPath] = ()) -> None:
        """Update digests along the frontier back to the root."""
        self._reject_if_full()
        self._auth_path.update_path(leaf, old_paths)

    def update_siblings(self, leaf: bytes) -> None:
        """Prepare the frontier for the next leaf."""
        self._reject_if_full()

        # counter for next leaf element
        first_bit = self._auth_path.inc_child_bits()

        if first_bit == -1:
            self._is_full = True
            logger.info(f"Merkle tree of depth {self.depth} is full ({self.capacity} leaves)")
        elif first_bit == 0:
            # next leaf is right child
            self._auth_path.leaf_sibling(leaf)
        else:
            # left sibling of new branch in tree
            self._auth_path.hash_sibling(first_bit)

    def marshal_out(self, stream: TextIO) -> None:
        stream.write(f"{int(self._is_full)}\n")
        self._auth_path.marshal_out(stream)

    def marshal_in(self, reader: TokenReader) -> bool:
        """Read a tree; on failure it is left full (the invalid flag)."""
        self._is_full = True

        full = reader.read_bit("tree full flag")
        if full is None:
            return False

        if not self._auth_path.marshal_in(reader):
            return False

        self._is_full = bool(full)
        return True

    def __repr__(self) -> str:
        return f"MerkleTree(depth={self.depth}, hash={self._hasher.name}, full={self._is_full})"


__all__ = [
    "MerkleTree",
]
