"""
CLI Witness Command

Fill a tree with word-digest leaves (leaf i has value i), keep the path of
one leaf, and check it inside a membership circuit:
- print the leaf's child bits, root path and siblings
- bind the path as circuit witness and replay it
- report the variable count and whether the public root assertion holds

Usage:
    authpath witness -d 4 -i 5 [--hash sha512] [--tamper-sibling N] [--tamper-bit N] [--json]
"""

from __future__ import annotations

import logging
import sys
from argparse import Namespace

from authpath.circuit import build_membership_circuit
from authpath.crypto.hashing import HashAlgorithm, get_hash_algorithm, to_hex
from authpath.merkle import AuthenticationPath, MerkleBundle
from authpath.schemas.errors import ErrorCodes, MerkleError
from authpath.schemas.reports import WitnessReport
from authpath_cli.render import path_report, print_json, print_path


logger = logging.getLogger(__name__)


# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1
EXIT_VERIFICATION_FAILED = 2


def fill_bundle(depth: int, leaf_number: int, hasher: HashAlgorithm) -> MerkleBundle:
    """Insert 2^depth word-digest leaves, keeping only leaf_number's path."""
    bundle = MerkleBundle(depth, hasher)
    while not bundle.is_full:
        keep = leaf_number == bundle.tree_size
        bundle.add_leaf(hasher.word_digest(bundle.tree_size), keep_path=keep)
    return bundle


def tamper_path(
    path: AuthenticationPath,
    sibling: int | None = None,
    bit: int | None = None,
) -> AuthenticationPath:
    """Copy of `path` with one sibling digest and/or one child bit altered."""
    siblings = list(path.siblings)
    child_bits = list(path.child_bits)

    if sibling is not None:
        altered = bytearray(siblings[sibling])
        altered[-1] ^= 0x01
        siblings[sibling] = bytes(altered)
    if bit is not None:
        child_bits[bit] ^= 1

    return AuthenticationPath.from_components(
        path.root_path, siblings, child_bits, path.realization
    )


def witness_cmd(args: Namespace) -> int:
    """Execute the witness command."""
    config = args.cli_config.runtime
    hasher = get_hash_algorithm(args.hash or config.tree.hash)
    depth = config.tree.depth if args.depth is None else args.depth

    if depth < 0:
        print(f"Error: tree depth must be non-negative, got {depth}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    capacity = 1 << depth
    if not 0 <= args.leaf < capacity:
        print(
            f"Error: leaf number {args.leaf} is not less than {capacity}",
            file=sys.stderr,
        )
        return EXIT_RUNTIME_ERROR

    for name, index in (("sibling", args.tamper_sibling), ("bit", args.tamper_bit)):
        if index is not None and not 0 <= index < depth:
            print(f"Error: tamper {name} index {index} outside [0, {depth})", file=sys.stderr)
            return EXIT_RUNTIME_ERROR

    logger.info(f"Filling depth-{depth} tree ({capacity} leaves) with {hasher.name}")
    bundle = fill_bundle(depth, args.leaf, hasher)

    leaf = bundle.auth_leaf[0]
    path = bundle.auth_path[0]

    tampered: list[str] = []
    witness = path
    if args.tamper_sibling is not None or args.tamper_bit is not None:
        witness = tamper_path(path, args.tamper_sibling, args.tamper_bit)
        if args.tamper_sibling is not None:
            tampered.append(f"sibling[{args.tamper_sibling}]")
        if args.tamper_bit is not None:
            tampered.append(f"child_bits[{args.tamper_bit}]")
        logger.info(f"Tampered witness: {', '.join(tampered)}")

    circuit = build_membership_circuit(leaf, witness, bundle.root_hash, hasher)

    report = WitnessReport(
        depth=depth,
        hash=hasher.name,
        path=path_report(leaf, path),
        root=to_hex(bundle.root_hash),
        variable_count=circuit.context.variable_count,
        constraint_count=circuit.context.constraint_count,
        satisfied=circuit.satisfied,
        tampered=tampered,
    )
    if not circuit.satisfied:
        report.error = MerkleError(
            code=ErrorCodes.ROOT_MISMATCH,
            message=f"Recomputed root does not match public root for leaf {args.leaf}",
            details={"unsatisfied": len(circuit.context.unsatisfied())},
        )

    if args.json:
        print_json(report)
    else:
        print_path(report.path)
        print(f"variable count {report.variable_count}")
        print(f"root assertion {'OK' if report.satisfied else 'FAIL'}")

    return EXIT_SUCCESS if circuit.satisfied else EXIT_VERIFICATION_FAILED


__all__ = [
    "fill_bundle",
    "tamper_path",
    "witness_cmd",
]
