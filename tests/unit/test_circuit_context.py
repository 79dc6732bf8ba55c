"""
Module 03 - Circuit Context Unit Tests
Tests for authpath/circuit/context.py
"""
import pytest

from authpath.circuit import BitVar, CircuitContext, ConstraintKind, DigestVar
from authpath.crypto.hashing import SHA256, SHA512
from authpath.schemas.errors import CircuitException

from fixtures import leaf


class TestBinding:
    """Tests for variable binding."""

    def test_bind_digest(self):
        ctx = CircuitContext()
        var = ctx.bind_digest(leaf(3))

        assert isinstance(var, DigestVar)
        assert var.value == leaf(3)
        assert ctx.variable_count == 1
        assert ctx.constraint_count == 0

    def test_bind_digest_wrong_size(self):
        with pytest.raises(CircuitException, match="32-byte"):
            CircuitContext().bind_digest(b"\x00" * 31)

    def test_bind_bit_adds_boolean_constraint(self):
        ctx = CircuitContext()
        var = ctx.bind_bit(True)

        assert isinstance(var, BitVar)
        assert var.value == 1
        assert ctx.constraints[0].kind is ConstraintKind.BOOLEAN
        assert ctx.is_satisfied()

    def test_non_boolean_bit_unsatisfied(self):
        ctx = CircuitContext()
        ctx.bind_bit(2)

        assert not ctx.is_satisfied()
        assert ctx.unsatisfied()[0].kind is ConstraintKind.BOOLEAN

    def test_constant_digest(self):
        ctx = CircuitContext(SHA512)
        var = ctx.constant_digest(SHA512.zero())

        constraint = ctx.constraints[0]
        assert constraint.kind is ConstraintKind.CONSTANT
        assert constraint.operands == (var.index,)
        assert constraint.constant == SHA512.zero()


class TestPublicInputs:
    """Tests for end_input()."""

    def test_public_inputs_are_bound_before_end(self):
        ctx = CircuitContext()
        ctx.bind_digest(leaf(1))
        ctx.end_input()
        ctx.bind_digest(leaf(2))

        assert ctx.input_ended
        assert ctx.public_input_count == 1
        assert ctx.public_inputs() == [leaf(1)]

    def test_end_input_twice(self):
        ctx = CircuitContext()
        ctx.end_input()
        with pytest.raises(CircuitException, match="twice"):
            ctx.end_input()


class TestGates:
    """Tests for mix, select and assert_equal."""

    def test_mix(self):
        ctx = CircuitContext()
        a, b = ctx.bind_digest(leaf(1)), ctx.bind_digest(leaf(2))
        out = ctx.mix(a, b)

        assert out.value == SHA256.mix(leaf(1), leaf(2))
        assert ctx.constraints[-1].operands == (a.index, b.index, out.index)

    @pytest.mark.parametrize("cond,expected", [(1, 1), (0, 2)])
    def test_select(self, cond, expected):
        ctx = CircuitContext()
        bit = ctx.bind_bit(cond)
        a, b = ctx.bind_digest(leaf(1)), ctx.bind_digest(leaf(2))
        out = ctx.select(bit, a, b)

        assert out.value == leaf(expected)
        assert ctx.constraints[-1].kind is ConstraintKind.SELECT
        assert ctx.is_satisfied()

    def test_select_with_non_boolean_bit_is_arithmetic(self):
        """b + c * (a - b) wraps modulo 2^(8*digest_size)."""
        ctx = CircuitContext()
        bit = ctx.bind_bit(2)
        a, b = ctx.bind_digest(leaf(3)), ctx.bind_digest(leaf(1))
        out = ctx.select(bit, a, b)

        assert out.value == leaf(5)
        # only the boolean constraint fails
        assert [c.kind for c in ctx.unsatisfied()] == [ConstraintKind.BOOLEAN]

    def test_select_requires_bit_condition(self):
        ctx = CircuitContext()
        digest = ctx.bind_digest(leaf(1))
        with pytest.raises(CircuitException, match="BitVar"):
            ctx.select(digest, digest, digest)

    def test_mix_requires_digests(self):
        ctx = CircuitContext()
        bit = ctx.bind_bit(0)
        with pytest.raises(CircuitException, match="DigestVar"):
            ctx.mix(bit, ctx.bind_digest(leaf(0)))

    def test_assert_equal(self):
        ctx = CircuitContext()
        ctx.assert_equal(ctx.bind_digest(leaf(1)), ctx.bind_digest(leaf(1)))
        assert ctx.is_satisfied()

        ctx.assert_equal(ctx.bind_digest(leaf(1)), ctx.bind_digest(leaf(2)))
        assert [c.kind for c in ctx.unsatisfied()] == [ConstraintKind.EQUAL]

    def test_assert_equal_kinds_must_match(self):
        ctx = CircuitContext()
        with pytest.raises(CircuitException, match="Cannot equate"):
            ctx.assert_equal(ctx.bind_digest(leaf(0)), ctx.bind_bit(0))

    def test_foreign_variable_rejected(self):
        ctx, other = CircuitContext(), CircuitContext()
        a = ctx.bind_digest(leaf(1))
        b = other.bind_digest(leaf(2))

        with pytest.raises(CircuitException, match="different circuit context"):
            ctx.mix(a, b)

    def test_plain_values_rejected(self):
        ctx = CircuitContext()
        with pytest.raises(CircuitException):
            ctx.mix(leaf(1), leaf(2))


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
