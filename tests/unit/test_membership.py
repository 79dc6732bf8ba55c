"""
Module 03 - Membership Circuit Unit Tests
Tests for authpath/circuit/membership.py

Required behavior:
1. Correct witness - every retained path satisfies the circuit
2. Tamper detection - altered sibling, child bit, leaf or root fails
3. Replay - the symbolic root path equals the concrete one
4. Size - variable and constraint counts depend on depth only
"""
import pytest

from authpath.circuit import CircuitContext, ConstraintKind, build_membership_circuit
from authpath.crypto.hashing import SHA256, SHA512
from authpath.merkle import AuthenticationPath, MerkleBundle
from authpath.schemas.errors import CircuitException

from fixtures import leaf, make_bundle


def tampered(path, sibling=None, bit=None):
    siblings = list(path.siblings)
    bits = list(path.child_bits)
    if sibling is not None:
        siblings[sibling] = bytes(b ^ 0xFF for b in siblings[sibling])
    if bit is not None:
        bits[bit] ^= 1
    return AuthenticationPath.from_components(path.root_path, siblings, bits, path.realization)


class TestSatisfiedWitness:
    """Tests for correct witnesses."""

    def test_every_leaf_of_full_tree(self, depth3_all_kept):
        root = depth3_all_kept.root_hash
        for cm, path in zip(depth3_all_kept.auth_leaf, depth3_all_kept.auth_path):
            circuit = build_membership_circuit(cm, path, root)
            assert circuit.satisfied, f"leaf {path.leaf_index}"

    def test_partially_filled_tree(self):
        bundle = make_bundle(4, 5)
        for cm, path in zip(bundle.auth_leaf, bundle.auth_path):
            assert build_membership_circuit(cm, path, bundle.root_hash).satisfied

    def test_sha512(self):
        bundle = make_bundle(3, 8, keep={6}, hasher=SHA512)
        circuit = build_membership_circuit(
            bundle.auth_leaf[0], bundle.auth_path[0], bundle.root_hash, SHA512
        )
        assert circuit.satisfied

    def test_symbolic_root_path_matches_concrete(self, depth2_bundle):
        path = depth2_bundle.auth_path[0]
        circuit = build_membership_circuit(leaf(1), path, depth2_bundle.root_hash)

        assert [d.value for d in circuit.path.root_path] == list(path.root_path)
        assert circuit.root.value == depth2_bundle.root_hash

    def test_depth0(self):
        bundle = MerkleBundle(0)
        bundle.add_leaf(leaf(9))
        circuit = build_membership_circuit(leaf(9), bundle.auth_path[0], bundle.root_hash)

        assert circuit.satisfied
        assert circuit.variable_count == 2


class TestTamperedWitness:
    """Tests for witnesses that must not satisfy the circuit."""

    @pytest.mark.parametrize("level", [0, 1, 2])
    def test_tampered_sibling(self, depth3_all_kept, level):
        path = tampered(depth3_all_kept.auth_path[5], sibling=level)
        circuit = build_membership_circuit(leaf(5), path, depth3_all_kept.root_hash)

        assert not circuit.satisfied
        assert [c.kind for c in circuit.context.unsatisfied()] == [ConstraintKind.EQUAL]

    @pytest.mark.parametrize("level", [0, 1, 2])
    def test_flipped_child_bit(self, depth3_all_kept, level):
        path = tampered(depth3_all_kept.auth_path[5], bit=level)
        circuit = build_membership_circuit(leaf(5), path, depth3_all_kept.root_hash)

        assert not circuit.satisfied

    def test_wrong_leaf(self, depth3_all_kept):
        circuit = build_membership_circuit(
            leaf(4), depth3_all_kept.auth_path[5], depth3_all_kept.root_hash
        )
        assert not circuit.satisfied

    def test_wrong_root(self, depth3_all_kept):
        circuit = build_membership_circuit(leaf(5), depth3_all_kept.auth_path[5], SHA256.zero())
        assert not circuit.satisfied


class TestCircuitShape:
    """Tests for the size and layout of the constraint system."""

    @pytest.mark.parametrize("depth", [1, 2, 3, 5])
    def test_counts_depend_on_depth_only(self, depth):
        bundle = make_bundle(depth, 1)
        circuit = build_membership_circuit(leaf(0), bundle.auth_path[0], bundle.root_hash)
        ctx = circuit.context

        # root, leaf, d siblings, d bits, then 2 selects + 1 mix per level
        assert ctx.variable_count == 2 + 5 * depth
        # d booleans, 3d gates, one equality
        assert ctx.constraint_count == 4 * depth + 1

    def test_root_is_only_public_input(self, depth2_bundle):
        circuit = build_membership_circuit(
            leaf(1), depth2_bundle.auth_path[0], depth2_bundle.root_hash
        )
        assert circuit.context.public_input_count == 1
        assert circuit.context.public_inputs() == [depth2_bundle.root_hash]

    def test_context_must_be_fresh(self, depth2_bundle):
        ctx = CircuitContext()
        ctx.end_input()
        with pytest.raises(CircuitException, match="twice"):
            build_membership_circuit(
                leaf(1), depth2_bundle.auth_path[0], depth2_bundle.root_hash, context=ctx
            )


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
