"""
Module 03 - Circuit Context
Explicit constraint-system state for the symbolic realization.

A CircuitContext owns every variable bound during one circuit
construction and the append-only list of constraints relating them. It
replaces process-wide circuit state: each symbolic value carries the
context it was bound in, and values from different contexts never mix.

Constraint kinds:
- BOOLEAN   bit * (bit - 1) == 0
- CONSTANT  var == constant
- MIX       out == H(left || right)          (opaque compression gate)
- SELECT    out == b + cond * (a - b)         (digests read as integers)
- EQUAL     a == b

Witness values are computed while the circuit is built; is_satisfied()
re-evaluates every constraint against them. The select witness is
computed with the same arithmetic as its constraint, so building the
circuit never branches on a bit's value.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Union

from authpath.crypto.hashing import SHA256, HashAlgorithm
from authpath.schemas.errors import CircuitException


logger = logging.getLogger(__name__)

WitnessValue = Union[bytes, int]


class ConstraintKind(str, Enum):
    BOOLEAN = "boolean"
    CONSTANT = "constant"
    MIX = "mix"
    SELECT = "select"
    EQUAL = "equal"


@dataclass(frozen=True)
class Constraint:
    """
    One constraint over variable indices.

    Attributes:
        kind: Constraint kind
        operands: Variable indices; for MIX and SELECT the output is last
        constant: Constant value for CONSTANT constraints
    """
    kind: ConstraintKind
    operands: tuple[int, ...]
    constant: bytes | None = None


@dataclass(frozen=True, eq=False)
class Variable:
    """A value bound in a CircuitContext, identified by its index."""
    context: "CircuitContext"
    index: int

    @property
    def value(self) -> WitnessValue:
        return self.context.value(self)


class DigestVar(Variable):
    """Circuit-bound digest."""


class BitVar(Variable):
    """Circuit-bound boolean."""


class CircuitContext:
    """
    Append-only constraint system with its witness assignment.

    Args:
        hasher: Compression function behind MIX gates
    """

    def __init__(self, hasher: HashAlgorithm = SHA256) -> None:
        self._hasher = hasher
        self._values: list[WitnessValue] = []
        self._constraints: list[Constraint] = []
        self._public_count: int | None = None

    @property
    def hasher(self) -> HashAlgorithm:
        return self._hasher

    @property
    def variable_count(self) -> int:
        return len(self._values)

    @property
    def constraint_count(self) -> int:
        return len(self._constraints)

    @property
    def constraints(self) -> tuple[Constraint, ...]:
        return tuple(self._constraints)

    @property
    def input_ended(self) -> bool:
        return self._public_count is not None

    @property
    def public_input_count(self) -> int:
        return self._public_count or 0

    def public_inputs(self) -> list[WitnessValue]:
        """Values of the variables bound before end_input()."""
        return list(self._values[: self.public_input_count])

    def value(self, var: Variable) -> WitnessValue:
        self._check_owned(var)
        return self._values[var.index]

    # ------------------------------------------------------------------
    # Binding
    # ------------------------------------------------------------------

    def _new_var(self, cls: type[Variable], value: WitnessValue) -> Variable:
        self._values.append(value)
        return cls(self, len(self._values) - 1)

    def bind_digest(self, value: bytes) -> DigestVar:
        """Bind a concrete digest as a fresh variable."""
        if not self._hasher.is_digest(value):
            raise CircuitException(
                message=f"Cannot bind {value!r} as a {self._hasher.digest_size}-byte digest",
            )
        return self._new_var(DigestVar, value)

    def bind_bit(self, value: int) -> BitVar:
        """Bind a concrete bit; a BOOLEAN constraint pins it to 0 or 1."""
        var = self._new_var(BitVar, int(value))
        self._constraints.append(Constraint(ConstraintKind.BOOLEAN, (var.index,)))
        return var

    def constant_digest(self, value: bytes) -> DigestVar:
        """Bind a publicly known digest (e.g. ZERO)."""
        var = self.bind_digest(value)
        self._constraints.append(Constraint(ConstraintKind.CONSTANT, (var.index,), value))
        return var

    def end_input(self) -> None:
        """Mark the end of public input variables."""
        if self._public_count is not None:
            raise CircuitException(
                message="end_input() called twice",
                details={"public_input_count": self._public_count},
            )
        self._public_count = len(self._values)
        logger.debug(f"Circuit public inputs: {self._public_count}")

    # ------------------------------------------------------------------
    # Gates
    # ------------------------------------------------------------------

    def mix(self, left: DigestVar, right: DigestVar) -> DigestVar:
        self._check_digest(left)
        self._check_digest(right)
        out = self._new_var(
            DigestVar, self._hasher.mix(self._values[left.index], self._values[right.index])
        )
        self._constraints.append(
            Constraint(ConstraintKind.MIX, (left.index, right.index, out.index))
        )
        return out

    def select(self, cond: BitVar, a: DigestVar, b: DigestVar) -> DigestVar:
        """a if cond else b, computed as b + cond * (a - b)."""
        if not isinstance(cond, BitVar):
            raise CircuitException(message=f"select() condition must be a BitVar, got {type(cond).__name__}")
        self._check_owned(cond)
        self._check_digest(a)
        self._check_digest(b)
        value = self._select_value(
            self._values[cond.index], self._values[a.index], self._values[b.index]
        )
        out = self._new_var(DigestVar, value)
        self._constraints.append(
            Constraint(ConstraintKind.SELECT, (cond.index, a.index, b.index, out.index))
        )
        return out

    def assert_equal(self, a: Variable, b: Variable) -> None:
        """Constrain two variables of the same kind to be equal."""
        self._check_owned(a)
        self._check_owned(b)
        if type(a) is not type(b):
            raise CircuitException(
                message=f"Cannot equate {type(a).__name__} with {type(b).__name__}",
            )
        self._constraints.append(Constraint(ConstraintKind.EQUAL, (a.index, b.index)))

    def _select_value(self, cond: int, a: bytes, b: bytes) -> bytes:
        size = self._hasher.digest_size
        a_int = int.from_bytes(a, "big")
        b_int = int.from_bytes(b, "big")
        out = (b_int + cond * (a_int - b_int)) % (1 << (8 * size))
        return out.to_bytes(size, "big")

    # ------------------------------------------------------------------
    # Satisfiability
    # ------------------------------------------------------------------

    def _holds(self, constraint: Constraint) -> bool:
        v = [self._values[i] for i in constraint.operands]
        kind = constraint.kind
        if kind is ConstraintKind.BOOLEAN:
            return v[0] * (v[0] - 1) == 0
        if kind is ConstraintKind.CONSTANT:
            return v[0] == constraint.constant
        if kind is ConstraintKind.MIX:
            return self._hasher.mix(v[0], v[1]) == v[2]
        if kind is ConstraintKind.SELECT:
            return self._select_value(v[0], v[1], v[2]) == v[3]
        return v[0] == v[1]

    def unsatisfied(self) -> list[Constraint]:
        """Constraints the current witness violates."""
        return [c for c in self._constraints if not self._holds(c)]

    def is_satisfied(self) -> bool:
        return not self.unsatisfied()

    # ------------------------------------------------------------------
    # Checks
    # ------------------------------------------------------------------

    def _check_owned(self, var: Variable) -> None:
        if not isinstance(var, Variable):
            raise CircuitException(message=f"Expected a circuit variable, got {type(var).__name__}")
        if var.context is not self:
            raise CircuitException(
                message="Variable belongs to a different circuit context",
                details={"index": var.index},
            )

    def _check_digest(self, var: DigestVar) -> None:
        if not isinstance(var, DigestVar):
            raise CircuitException(message=f"Expected a DigestVar, got {type(var).__name__}")
        self._check_owned(var)

    def __repr__(self) -> str:
        return (
            f"CircuitContext(hash={self._hasher.name}, variables={self.variable_count}, "
            f"constraints={self.constraint_count})"
        )


__all__ = [
    "ConstraintKind",
    "Constraint",
    "Variable",
    "DigestVar",
    "BitVar",
    "CircuitContext",
]
