"""
Module 02 - Root Recomputation
Recompute a root from a leaf and an authentication path, and build the
reference root of a partially filled tree from scratch.

These functions do not use the incremental machinery; they are the
independent check that the patched paths are right.
"""
from __future__ import annotations

from typing import Sequence

from authpath.crypto.hashing import SHA256, HashAlgorithm
from authpath.merkle.auth_path import AuthenticationPath


def compute_root(
    leaf: bytes,
    siblings: Sequence[bytes],
    child_bits: Sequence[int],
    hasher: HashAlgorithm = SHA256,
) -> bytes:
    """
    Recompute the root bottom-up.

    At each level the running digest is the right child when the child
    bit is 1 and the left child otherwise.

    Args:
        leaf: Leaf digest
        siblings: Sibling digests, leaf level first
        child_bits: Child bits, leaf level first
        hasher: Digest mixer

    Returns:
        The recomputed root (the leaf itself for depth 0)
    """
    if len(siblings) != len(child_bits):
        raise ValueError(
            f"siblings and child_bits differ in length: {len(siblings)} != {len(child_bits)}"
        )

    dig = leaf
    for sibling, bit in zip(siblings, child_bits):
        if bit:
            dig = hasher.mix(sibling, dig)
        else:
            dig = hasher.mix(dig, sibling)
    return dig


def verify_auth_path(
    leaf: bytes,
    path: AuthenticationPath,
    root: bytes,
    hasher: HashAlgorithm = SHA256,
) -> bool:
    """
    Check that `leaf` with `path` recomputes to `root`.

    Returns:
        True if the recomputed root equals `root`
    """
    return compute_root(leaf, path.siblings, path.child_bits, hasher) == root


def reference_root(
    leaves: Sequence[bytes],
    depth: int,
    hasher: HashAlgorithm = SHA256,
) -> bytes:
    """
    Root of a depth-`depth` tree holding `leaves` left to right.

    A subtree holding no leaves counts as ZERO (it is not hashed), which
    is what the incremental tree produces.

    Raises:
        ValueError: If leaves is empty or exceeds 2^depth
    """
    if not leaves:
        raise ValueError("Cannot compute the root of an empty tree")
    if len(leaves) > 1 << depth:
        raise ValueError(f"{len(leaves)} leaves exceed capacity {1 << depth}")

    level = list(leaves)
    for _ in range(depth):
        if len(level) % 2 == 1:
            level.append(hasher.zero())
        level = [hasher.mix(level[i], level[i + 1]) for i in range(0, len(level), 2)]
    return level[0]


__all__ = [
    "compute_root",
    "verify_auth_path",
    "reference_root",
]
