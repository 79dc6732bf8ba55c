"""
Module 01 - Schemas
File: reports.py

Purpose: JSON-friendly views of paths, bundles and membership checks, as
emitted by the CLI with --json. Digests are 0x-prefixed hex strings.
"""

from pydantic import BaseModel, ConfigDict, Field

from .errors import MerkleError


class AuthPathReport(BaseModel):
    """One retained leaf and its authentication path."""

    model_config = ConfigDict(extra="forbid")

    leaf: str = Field(..., description="Leaf digest (0x-prefixed hex)")
    leaf_index: int = Field(..., ge=0, description="Position of the leaf in the tree")
    child_bits: list[int] = Field(
        default_factory=list,
        description="Child bits, leaf level first",
    )
    siblings: list[str] = Field(
        default_factory=list,
        description="Sibling digests, leaf level first",
    )
    root_path: list[str] = Field(
        default_factory=list,
        description="Digests on the way to the root, leaf level first",
    )


class BundleSummary(BaseModel):
    """State of a persisted bundle."""

    model_config = ConfigDict(extra="forbid")

    depth: int = Field(..., ge=0)
    hash: str = Field(..., description="Hash algorithm name")
    tree_size: int = Field(..., ge=0)
    capacity: int = Field(..., ge=1)
    is_full: bool
    root: str | None = Field(default=None, description="Current root (None before any leaf)")
    retained: list[AuthPathReport] = Field(default_factory=list)


class WitnessReport(BaseModel):
    """Outcome of building a membership circuit for one leaf."""

    model_config = ConfigDict(extra="forbid")

    depth: int = Field(..., ge=0)
    hash: str
    path: AuthPathReport
    root: str
    variable_count: int = Field(..., ge=0)
    constraint_count: int = Field(..., ge=0)
    satisfied: bool
    tampered: list[str] = Field(
        default_factory=list,
        description="Witness components modified before binding",
    )
    error: MerkleError | None = Field(
        default=None,
        description="ROOT_MISMATCH when the root assertion does not hold",
    )
