"""
Output helpers shared by CLI commands.
"""

from __future__ import annotations

import json
from typing import Sequence

from pydantic import BaseModel

from authpath.crypto.hashing import to_hex
from authpath.merkle import AuthenticationPath, MerkleBundle
from authpath.schemas.reports import AuthPathReport, BundleSummary


def path_report(leaf: bytes, path: AuthenticationPath) -> AuthPathReport:
    return AuthPathReport(
        leaf=to_hex(leaf),
        leaf_index=path.leaf_index,
        child_bits=list(path.child_bits),
        siblings=[to_hex(s) for s in path.siblings],
        root_path=[to_hex(d) for d in path.root_path],
    )


def bundle_summary(bundle: MerkleBundle) -> BundleSummary:
    root = bundle.root_hash if bundle.tree_size else None
    return BundleSummary(
        depth=bundle.depth,
        hash=bundle.hasher.name,
        tree_size=bundle.tree_size,
        capacity=bundle.tree.capacity,
        is_full=bundle.is_full,
        root=to_hex(root) if root is not None else None,
        retained=[path_report(leaf, path) for leaf, path in zip(bundle.auth_leaf, bundle.auth_path)],
    )


def print_json(model: BaseModel) -> None:
    print(json.dumps(model.model_dump(mode="json"), indent=2))


def bit_string(bits: Sequence[int]) -> str:
    """Child bits root end first, i.e. the leaf index in binary."""
    return "".join(str(b) for b in reversed(bits))


def print_levels(title: str, digests: Sequence[str]) -> None:
    """Print a per-level digest list root end first."""
    print(title)
    for i in range(len(digests) - 1, -1, -1):
        print(f"[{i}] {digests[i]}")


def print_path(report: AuthPathReport) -> None:
    print(f"leaf {report.leaf_index} child bits {bit_string(report.child_bits)}")
    print_levels("root path", report.root_path)
    print_levels("siblings", report.siblings)
