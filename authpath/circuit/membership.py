"""
Module 03 - Membership Circuit
Bind a retained concrete path into a circuit and assert it reaches a
public root.

Circuit layout:
1. public input: the root digest
2. end of public inputs
3. private witness: the leaf, every sibling digest and child bit
4. replay of AuthenticationPath.update_path over the bound values
5. EQUAL(public root, recomputed root)

A root that does not match is not an error here: the circuit is built
anyway and reports satisfied=False, which is exactly the statement a
proof system would refuse to prove.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass

from authpath.circuit.context import CircuitContext, DigestVar
from authpath.circuit.realization import SymbolicRealization
from authpath.crypto.hashing import SHA256, HashAlgorithm
from authpath.merkle.auth_path import AuthenticationPath


logger = logging.getLogger(__name__)


@dataclass
class MembershipCircuit:
    """Result of building a membership circuit."""
    context: CircuitContext
    root: DigestVar
    path: AuthenticationPath
    satisfied: bool

    @property
    def variable_count(self) -> int:
        return self.context.variable_count


def build_membership_circuit(
    leaf: bytes,
    path: AuthenticationPath,
    root: bytes,
    hasher: HashAlgorithm = SHA256,
    context: CircuitContext | None = None,
) -> MembershipCircuit:
    """
    Build the circuit proving `leaf` is under `root` via `path`.

    Args:
        leaf: Concrete leaf digest (private)
        path: Concrete authentication path (private)
        root: Concrete root digest (public)
        hasher: Compression function
        context: Fresh context to build into (created if omitted)

    Returns:
        MembershipCircuit with the context and whether it is satisfied
    """
    ctx = context or CircuitContext(hasher)

    rt = ctx.bind_digest(root)
    ctx.end_input()

    zk_leaf = ctx.bind_digest(leaf)
    zk_path = AuthenticationPath.bind(path, SymbolicRealization(ctx))
    zk_path.update_path(zk_leaf)

    ctx.assert_equal(rt, zk_path.root_hash)

    failed = ctx.unsatisfied()
    if failed:
        logger.info(f"Membership circuit unsatisfied: {len(failed)} constraints fail")
    else:
        logger.debug(f"Membership circuit satisfied with {ctx.variable_count} variables")

    return MembershipCircuit(
        context=ctx,
        root=rt,
        path=zk_path,
        satisfied=not failed,
    )


__all__ = [
    "MembershipCircuit",
    "build_membership_circuit",
]
