"""
Module 02 - Incremental Merkle Tree and Authentication Paths

This module provides:
- AuthenticationPath: per-leaf path with the incremental update algorithm
- MerkleTree: fixed-depth append-only tree driven by a frontier path
- MerkleBundle: tree plus retained, continuously patched paths
- ConcreteRealization / Realization: value domains for the algorithm
- compute_root / verify_auth_path / reference_root: independent checks
- TokenReader / dumps: the text persistence codec

Commitment Rules:
1. Parent digest: H(left || right)
2. Empty subtrees are the ZERO digest (not hashed)
3. A leaf's index is the little-endian value of its child bits
4. A tree of depth D holds exactly 2^D leaves, then rejects insertion

Usage:
    from authpath.crypto import SHA256
    from authpath.merkle import MerkleBundle, verify_auth_path

    bundle = MerkleBundle(depth=2)
    for i in range(4):
        bundle.add_leaf(SHA256.word_digest(i), keep_path=(i == 1))

    leaf, path = bundle.auth_leaf[0], bundle.auth_path[0]
    assert verify_auth_path(leaf, path, bundle.root_hash)
"""
from .realization import (
    Realization,
    ConcreteRealization,
)

from .codec import (
    TokenReader,
    dumps,
)

from .auth_path import (
    AuthenticationPath,
    match_msb,
)

from .tree import MerkleTree

from .bundle import (
    MerkleBundle,
    read_bundle_file,
    write_bundle_file,
)

from .verify import (
    compute_root,
    verify_auth_path,
    reference_root,
)


__all__ = [
    # Realizations
    "Realization",
    "ConcreteRealization",
    # Core types
    "AuthenticationPath",
    "MerkleTree",
    "MerkleBundle",
    # Functions
    "match_msb",
    "compute_root",
    "verify_auth_path",
    "reference_root",
    # Persistence
    "TokenReader",
    "dumps",
    "read_bundle_file",
    "write_bundle_file",
]
