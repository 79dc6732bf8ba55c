"""
Test fixtures package for authpath tests.

This package provides factory functions for creating test objects:
- common.py: leaf digests, pre-filled bundles, an explicit root recomputation

Usage:
    from fixtures import make_bundle, leaf

    def test_something():
        bundle = make_bundle(depth=3, count=5, keep={1, 4})
"""

from .common import (
    leaf,
    make_bundle,
    recompute_root,
)

__all__ = [
    "leaf",
    "make_bundle",
    "recompute_root",
]
