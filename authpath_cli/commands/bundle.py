"""
CLI Bundle Commands

Maintain a persistent Merkle bundle in a text state file:
- init: create an empty bundle of a given depth
- add:  append commitments (hex digests, integers or JSON objects)
- gc:   drop retained paths except for the listed commitments
- show: print root, size and retained paths

Usage:
    authpath bundle init --depth 8 [--state FILE] [--force]
    authpath bundle add 0x... 7 [--object] [--no-keep] [--state FILE]
    authpath bundle gc 0x... [--state FILE]
    authpath bundle show [--json] [--state FILE]
"""

from __future__ import annotations

import json
import logging
import sys
from argparse import Namespace
from pathlib import Path

from authpath.crypto.hashing import HashAlgorithm, from_hex, get_hash_algorithm, hash_canonical, to_hex
from authpath.merkle import MerkleBundle, read_bundle_file, write_bundle_file
from authpath_cli.render import bit_string, bundle_summary, print_json


logger = logging.getLogger(__name__)


# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1


def parse_commitment(token: str, hasher: HashAlgorithm, as_object: bool = False) -> bytes:
    """
    Turn a command-line token into a leaf digest.

    - as_object: token is JSON, committed by canonical hash
    - 0x-prefixed: a digest in hex
    - decimal: a word digest

    Raises:
        ValueError: If the token cannot be interpreted
    """
    if as_object:
        return hash_canonical(json.loads(token), hasher)
    if token.startswith("0x"):
        value = from_hex(token)
        if not hasher.is_digest(value):
            raise ValueError(
                f"Digest {token} is {len(value)} bytes, expected {hasher.digest_size}"
            )
        return value
    if token.isdigit():
        return hasher.word_digest(int(token))
    raise ValueError(f"Cannot interpret {token!r} as a commitment (use 0x-hex, an integer or --object)")


def _state_path(args: Namespace) -> Path:
    return Path(args.state or args.cli_config.state_file)


def _hasher(args: Namespace) -> HashAlgorithm:
    return get_hash_algorithm(args.hash or args.cli_config.runtime.tree.hash)


def bundle_init_cmd(args: Namespace) -> int:
    """Create an empty bundle state file."""
    state = _state_path(args)
    if state.exists() and not args.force:
        print(f"Error: state file already exists: {state} (use --force)", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    depth = args.cli_config.runtime.tree.depth if args.depth is None else args.depth
    if depth < 1:
        print(f"Error: persisted bundles need depth >= 1, got {depth}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    bundle = MerkleBundle(depth, _hasher(args))
    write_bundle_file(bundle, state)
    print(f"Created depth-{depth} bundle ({bundle.hasher.name}) at {state}")
    return EXIT_SUCCESS


def bundle_add_cmd(args: Namespace) -> int:
    """Append commitments to the bundle."""
    state = _state_path(args)
    hasher = _hasher(args)
    bundle = read_bundle_file(state, hasher)

    try:
        commitments = [parse_commitment(v, hasher, args.object) for v in args.values]
    except (ValueError, json.JSONDecodeError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    # reject the whole batch rather than saving part of it
    free = bundle.tree.capacity - bundle.tree_size
    if len(commitments) > free:
        print(
            f"Error: {len(commitments)} commitments but only {free} free leaves "
            f"(capacity {bundle.tree.capacity})",
            file=sys.stderr,
        )
        return EXIT_RUNTIME_ERROR

    for cm in commitments:
        bundle.add_leaf(cm, keep_path=not args.no_keep)

    write_bundle_file(bundle, state)

    if args.json:
        print_json(bundle_summary(bundle))
    else:
        for cm in commitments:
            print(f"added {to_hex(cm)}")
        print(f"root {to_hex(bundle.root_hash)} size {bundle.tree_size}")
    return EXIT_SUCCESS


def bundle_gc_cmd(args: Namespace) -> int:
    """Keep retained paths only for the listed commitments."""
    state = _state_path(args)
    hasher = _hasher(args)
    bundle = read_bundle_file(state, hasher)

    try:
        keep = {parse_commitment(v, hasher, args.object) for v in args.values}
    except (ValueError, json.JSONDecodeError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    dropped = bundle.auth_garbage_collect(keep)
    write_bundle_file(bundle, state)
    print(f"dropped {dropped} retained paths, {len(bundle.auth_leaf)} remain")
    return EXIT_SUCCESS


def bundle_show_cmd(args: Namespace) -> int:
    """Print the bundle state."""
    bundle = read_bundle_file(_state_path(args), _hasher(args))
    summary = bundle_summary(bundle)

    if args.json or args.cli_config.default_output_format == "json":
        print_json(summary)
        return EXIT_SUCCESS

    print(f"depth {summary.depth} ({summary.hash}), {summary.tree_size}/{summary.capacity} leaves"
          f"{' [full]' if summary.is_full else ''}")
    print(f"root {summary.root or '(empty)'}")
    for report in summary.retained:
        print(f"  leaf {report.leaf_index} [{bit_string(report.child_bits)}] {report.leaf}")
    return EXIT_SUCCESS


__all__ = [
    "parse_commitment",
    "bundle_init_cmd",
    "bundle_add_cmd",
    "bundle_gc_cmd",
    "bundle_show_cmd",
]
