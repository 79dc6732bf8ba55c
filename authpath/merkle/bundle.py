"""
Module 02 - Merkle Bundle
A Merkle tree plus the authentication paths a caller keeps witnessed.

Every insertion patches all retained paths so each stays consistent with
the current root. Retained entries live until auth_garbage_collect drops
them; there is no implicit eviction.

Usage:
    from authpath.merkle import MerkleBundle

    bundle = MerkleBundle(depth=4)
    bundle.add_leaf(commitment)                  # keep its path
    bundle.add_leaf(other, keep_path=False)      # only extend the tree
    path = bundle.find_path(commitment)
    assert path.root_hash == bundle.root_hash
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Collection, TextIO

from authpath.crypto.hashing import SHA256, HashAlgorithm
from authpath.merkle.auth_path import AuthenticationPath
from authpath.merkle.codec import TokenReader, dumps, write_digest_vector
from authpath.merkle.tree import MerkleTree
from authpath.schemas.errors import MarshalError, MarshalException, TreeFullException


logger = logging.getLogger(__name__)


class MerkleBundle:
    """
    Merkle tree with retained authentication paths.

    Args:
        depth: Tree depth (capacity 2^depth)
        hasher: Digest mixer
    """

    def __init__(self, depth: int, hasher: HashAlgorithm = SHA256) -> None:
        self._tree = MerkleTree(depth, hasher)
        self._tree_size = 0
        self._auth_leaf: list[bytes] = []
        self._auth_path: list[AuthenticationPath] = []

    @property
    def hasher(self) -> HashAlgorithm:
        return self._tree.hasher

    @property
    def depth(self) -> int:
        return self._tree.depth

    @property
    def tree(self) -> MerkleTree:
        return self._tree

    @property
    def is_full(self) -> bool:
        return self._tree.is_full

    @property
    def tree_size(self) -> int:
        return self._tree_size

    @property
    def root_hash(self) -> bytes | None:
        """Current root; ZERO (None for depth 0) before the first insertion."""
        return self._tree.root_hash

    @property
    def auth_leaf(self) -> tuple[bytes, ...]:
        return tuple(self._auth_leaf)

    @property
    def auth_path(self) -> tuple[AuthenticationPath, ...]:
        return tuple(self._auth_path)

    def find_path(self, commitment: bytes) -> AuthenticationPath | None:
        """First retained path for `commitment`, or None."""
        for leaf, path in zip(self._auth_leaf, self._auth_path):
            if leaf == commitment:
                return path
        return None

    def add_leaf(self, commitment: bytes, keep_path: bool = True) -> None:
        """
        Append a commitment to the tree.

        Args:
            commitment: Leaf digest
            keep_path: Retain the leaf and a copy of its path

        Raises:
            TreeFullException: If 2^depth leaves are already in the tree
            ValueError: If commitment is not a digest of this bundle's size
        """
        if self._tree.is_full:
            raise TreeFullException(
                message=f"Cannot add leaf {self._tree_size + 1}: tree of depth {self.depth} is full",
                capacity=self._tree.capacity,
            )
        if not self.hasher.is_digest(commitment):
            raise ValueError(
                f"Commitment must be a {self.hasher.digest_size}-byte digest"
            )

        # siblings and bits must still describe the new leaf's position
        self._tree.update_path(commitment, self._auth_path)

        if keep_path:
            self._auth_leaf.append(commitment)
            self._auth_path.append(self._tree.auth_path.copy())

        self._tree.update_siblings(commitment)

        self._tree_size += 1
        logger.debug(
            f"Added leaf {self._tree_size - 1} (kept={keep_path}, retained={len(self._auth_leaf)})"
        )

    def auth_garbage_collect(self, keep_set: Collection[bytes]) -> int:
        """
        Drop retained entries whose leaf is not in keep_set.

        Relative order of the survivors is preserved.

        Returns:
            Number of entries dropped
        """
        keep_leaf: list[bytes] = []
        keep_path: list[AuthenticationPath] = []

        for leaf, path in zip(self._auth_leaf, self._auth_path):
            if leaf in keep_set:
                keep_leaf.append(leaf)
                keep_path.append(path)

        dropped = len(self._auth_leaf) - len(keep_leaf)
        self._auth_leaf = keep_leaf
        self._auth_path = keep_path

        if dropped:
            logger.info(f"Garbage collected {dropped} retained paths, {len(keep_leaf)} remain")
        return dropped

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def marshal_out(self, stream: TextIO) -> None:
        self._tree.marshal_out(stream)
        stream.write(f"{self._tree_size}\n")
        write_digest_vector(stream, self._auth_leaf)
        for path in self._auth_path:
            path.marshal_out(stream)

    def marshal_in(self, reader: TokenReader) -> bool:
        """
        Read a bundle written by marshal_out.

        Nothing read is applied unless the whole bundle parses; on failure
        the bundle is left as a sentinel (full depth-0 tree, nothing
        retained) and reader.error says why.
        """
        hasher = self.hasher
        tree = MerkleTree(0, hasher)
        self._tree = MerkleTree.sentinel(hasher)
        self._tree_size = 0
        self._auth_leaf = []
        self._auth_path = []

        if not tree.marshal_in(reader):
            return self._marshal_failed(reader)

        tree_size = reader.read_int("tree size")
        if tree_size is None:
            return self._marshal_failed(reader)
        if tree_size > tree.capacity:
            reader.fail(
                f"tree size at most {tree.capacity}",
                str(tree_size),
                message=f"Tree size {tree_size} exceeds capacity {tree.capacity}",
            )
            return self._marshal_failed(reader)

        auth_leaf = reader.read_digest_vector(hasher, expected="retained leaves")
        if auth_leaf is None:
            return self._marshal_failed(reader)
        if len(auth_leaf) > tree_size:
            reader.fail(
                f"at most {tree_size} retained leaves",
                str(len(auth_leaf)),
                message=f"{len(auth_leaf)} retained leaves but only {tree_size} in the tree",
            )
            return self._marshal_failed(reader)

        # size must agree with the frontier counter and the full flag
        frontier_index = tree.auth_path.leaf_index
        if tree.is_full != (tree_size == tree.capacity) or frontier_index != tree_size % tree.capacity:
            reader.fail(
                f"tree size consistent with frontier leaf {frontier_index} (full={tree.is_full})",
                str(tree_size),
                message=(
                    f"Tree size {tree_size} contradicts the frontier "
                    f"(next leaf {frontier_index}, full={tree.is_full})"
                ),
            )
            return self._marshal_failed(reader)

        auth_path: list[AuthenticationPath] = []
        for _ in auth_leaf:
            path = AuthenticationPath(0, tree.auth_path.realization)
            if not path.marshal_in(reader):
                return self._marshal_failed(reader)
            if path.depth != tree.depth:
                reader.fail(
                    f"retained path depth {tree.depth}",
                    str(path.depth),
                    message=f"Retained path depth {path.depth} does not match tree depth {tree.depth}",
                )
                return self._marshal_failed(reader)
            auth_path.append(path)

        self._tree = tree
        self._tree_size = tree_size
        self._auth_leaf = auth_leaf
        self._auth_path = auth_path
        return True

    def _marshal_failed(self, reader: TokenReader) -> bool:
        logger.warning(f"Failed to read Merkle bundle: {reader.error.message if reader.error else 'unknown'}")
        return False

    @classmethod
    def loads(cls, text: str, hasher: HashAlgorithm = SHA256) -> tuple["MerkleBundle | None", MarshalError | None]:
        """
        Parse a bundle from text.

        Returns:
            (bundle, None) on success, (None, error) on malformed input or
            trailing data after the bundle
        """
        bundle = cls(0, hasher)
        reader = TokenReader(text)
        if not bundle.marshal_in(reader):
            return None, reader.error
        if not reader.expect_end():
            bundle._marshal_failed(reader)
            return None, reader.error
        return bundle, None

    def dumps(self) -> str:
        return dumps(self)

    def __repr__(self) -> str:
        return (
            f"MerkleBundle(depth={self.depth}, size={self._tree_size}, "
            f"retained={len(self._auth_leaf)}, full={self.is_full})"
        )


def write_bundle_file(bundle: MerkleBundle, path: str | Path) -> None:
    """Persist a bundle to a text file."""
    path = Path(path)
    with open(path, "w") as f:
        bundle.marshal_out(f)
    logger.debug(f"Wrote bundle state to {path}")


def read_bundle_file(path: str | Path, hasher: HashAlgorithm = SHA256) -> MerkleBundle:
    """
    Load a bundle from a text file.

    Raises:
        FileNotFoundError: If the file does not exist
        MarshalException: If the contents are malformed
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Bundle state file not found: {path}")

    bundle, error = MerkleBundle.loads(path.read_text(), hasher)
    if bundle is None:
        message = error.message if error else "malformed bundle state"
        raise MarshalException(message=f"{path}: {message}", error=error)
    return bundle


__all__ = [
    "MerkleBundle",
    "write_bundle_file",
    "read_bundle_file",
]
