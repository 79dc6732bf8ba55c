"""
Module 03 - Symbolic (circuit-bound) realization

This module provides:
- CircuitContext: explicit constraint system + witness assignment
- DigestVar / BitVar: circuit-bound values
- SymbolicRealization: lets AuthenticationPath run over bound values
- build_membership_circuit: bind a path, replay it, assert the public root

Usage:
    from authpath.circuit import build_membership_circuit

    circuit = build_membership_circuit(leaf, path, bundle.root_hash)
    assert circuit.satisfied
"""
from .context import (
    ConstraintKind,
    Constraint,
    Variable,
    DigestVar,
    BitVar,
    CircuitContext,
)

from .realization import SymbolicRealization

from .membership import (
    MembershipCircuit,
    build_membership_circuit,
)


__all__ = [
    "ConstraintKind",
    "Constraint",
    "Variable",
    "DigestVar",
    "BitVar",
    "CircuitContext",
    "SymbolicRealization",
    "MembershipCircuit",
    "build_membership_circuit",
]
