"""
Common factories for authpath tests.
"""

from typing import Iterable

from authpath.crypto.hashing import SHA256, HashAlgorithm
from authpath.merkle import AuthenticationPath, MerkleBundle


def leaf(i: int, hasher: HashAlgorithm = SHA256) -> bytes:
    """Leaf i: the word digest carrying i."""
    return hasher.word_digest(i)


def make_bundle(
    depth: int,
    count: int,
    keep: Iterable[int] | None = None,
    hasher: HashAlgorithm = SHA256,
) -> MerkleBundle:
    """
    Bundle with leaves 0..count-1 inserted.

    Args:
        keep: Indices whose paths are retained (all when None)
    """
    keep_set = set(range(count)) if keep is None else set(keep)
    bundle = MerkleBundle(depth, hasher)
    for i in range(count):
        bundle.add_leaf(leaf(i, hasher), keep_path=i in keep_set)
    return bundle


def recompute_root(
    leaf_value: bytes,
    path: AuthenticationPath,
    hasher: HashAlgorithm = SHA256,
) -> bytes:
    """Bottom-up recomputation written out with explicit selects."""
    dig = leaf_value
    for sibling, bit in zip(path.siblings, path.child_bits):
        left = sibling if bit else dig
        right = dig if bit else sibling
        dig = hasher.mix(left, right)
    return dig
