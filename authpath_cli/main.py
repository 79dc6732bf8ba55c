"""
CLI Main Entry Point

Parses command-line arguments and dispatches to subcommands.

Usage:
    python -m authpath_cli witness -d DEPTH -i LEAF [--hash sha256|sha512] [--json]
    python -m authpath_cli bundle init --depth D [--state FILE]
    python -m authpath_cli bundle add VALUE... [--object] [--no-keep]
    python -m authpath_cli bundle gc VALUE...
    python -m authpath_cli bundle show [--json]
    python -m authpath_cli config --init

Environment Variables:
    AUTHPATH_TREE_DEPTH       Default tree depth (default: 16)
    AUTHPATH_HASH             Hash algorithm: sha256, sha512
    AUTHPATH_STATE_FILE       Bundle state file
    AUTHPATH_LOG_LEVEL        Log level (default: INFO)
    AUTHPATH_LOG_FILE         Log file
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
import traceback
from pathlib import Path
from typing import Sequence

from authpath import __version__
from authpath.crypto.hashing import HASH_ALGORITHMS
from authpath.schemas.errors import AuthPathException
from authpath_cli.commands import bundle, witness
from authpath_cli.config import get_default_config_template, load_config


# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1
EXIT_VERIFICATION_FAILED = 2


def setup_logging(level: str = "INFO", log_file: str | None = None) -> None:
    """Configure logging for the CLI."""
    log_level = getattr(logging, level.upper(), logging.INFO)

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]

    if log_file:
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=log_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        handlers=handlers,
    )


def _add_state_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--state", "-s",
        type=str,
        default=None,
        help="Bundle state file (default: from config)",
    )
    parser.add_argument(
        "--hash",
        type=str,
        choices=sorted(HASH_ALGORITHMS),
        default=None,
        help="Hash algorithm (default: from config)",
    )


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser with all subcommands."""
    parser = argparse.ArgumentParser(
        prog="authpath",
        description="Incremental Merkle authentication paths - build bundles and check membership circuits.",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}"
    )
    parser.add_argument(
        "--config", "-c",
        type=Path,
        default=None,
        help="Path to configuration file (default: ./authpath.json or ~/.config/authpath/config.json)",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Log level (overrides config)",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # --- witness command ---
    witness_parser = subparsers.add_parser(
        "witness",
        help="Fill a tree and check one leaf's path in a membership circuit",
        description="Insert 2^depth leaves (leaf i has value i), keep one path and replay it symbolically.",
    )
    witness_parser.add_argument(
        "--depth", "-d",
        type=int,
        default=None,
        help="Tree depth (default: from config)",
    )
    witness_parser.add_argument(
        "--leaf", "-i",
        type=int,
        required=True,
        help="Leaf number whose path is checked",
    )
    witness_parser.add_argument(
        "--hash",
        type=str,
        choices=sorted(HASH_ALGORITHMS),
        default=None,
        help="Hash algorithm (default: from config)",
    )
    witness_parser.add_argument(
        "--tamper-sibling",
        type=int,
        default=None,
        help="Alter this sibling level before binding (expect FAIL)",
    )
    witness_parser.add_argument(
        "--tamper-bit",
        type=int,
        default=None,
        help="Flip this child bit before binding (expect FAIL)",
    )
    witness_parser.add_argument(
        "--json",
        action="store_true",
        default=False,
        help="Output machine-readable JSON report",
    )
    witness_parser.add_argument(
        "--debug",
        action="store_true",
        default=False,
        help="Print tracebacks on errors",
    )
    witness_parser.set_defaults(func=witness.witness_cmd)

    # --- bundle command ---
    bundle_parser = subparsers.add_parser(
        "bundle",
        help="Maintain a persistent bundle",
        description="Create, extend, garbage collect and inspect a bundle state file.",
    )
    bundle_subparsers = bundle_parser.add_subparsers(dest="bundle_command", help="Bundle operation")

    bundle_init = bundle_subparsers.add_parser("init", help="Create an empty bundle")
    bundle_init.add_argument("--depth", "-d", type=int, default=None, help="Tree depth")
    bundle_init.add_argument("--force", action="store_true", help="Overwrite an existing state file")
    _add_state_args(bundle_init)
    bundle_init.set_defaults(func=bundle.bundle_init_cmd)

    bundle_add = bundle_subparsers.add_parser("add", help="Append commitments")
    bundle_add.add_argument("values", nargs="+", help="0x-hex digests, integers, or JSON with --object")
    bundle_add.add_argument("--object", action="store_true", help="Values are JSON objects to hash canonically")
    bundle_add.add_argument("--no-keep", action="store_true", help="Do not retain authentication paths")
    bundle_add.add_argument("--json", action="store_true", help="JSON output")
    _add_state_args(bundle_add)
    bundle_add.set_defaults(func=bundle.bundle_add_cmd)

    bundle_gc = bundle_subparsers.add_parser("gc", help="Keep paths only for the listed commitments")
    bundle_gc.add_argument("values", nargs="*", help="Commitments to keep")
    bundle_gc.add_argument("--object", action="store_true", help="Values are JSON objects to hash canonically")
    _add_state_args(bundle_gc)
    bundle_gc.set_defaults(func=bundle.bundle_gc_cmd)

    bundle_show = bundle_subparsers.add_parser("show", help="Show root, size and retained paths")
    bundle_show.add_argument("--json", action="store_true", help="JSON output")
    _add_state_args(bundle_show)
    bundle_show.set_defaults(func=bundle.bundle_show_cmd)

    bundle_parser.set_defaults(func=lambda args: bundle_parser.print_help() or EXIT_SUCCESS)

    # --- config command ---
    config_parser = subparsers.add_parser(
        "config",
        help="Manage CLI configuration",
        description="Initialize or display configuration.",
    )
    config_parser.add_argument(
        "--init",
        action="store_true",
        default=False,
        help="Create a template configuration file",
    )
    config_parser.add_argument(
        "--show",
        action="store_true",
        default=False,
        help="Show current configuration",
    )
    config_parser.add_argument(
        "--path",
        type=str,
        default="authpath.json",
        help="Path for config file (default: authpath.json)",
    )
    config_parser.set_defaults(func=config_cmd)

    return parser


def config_cmd(args: argparse.Namespace) -> int:
    """Handle config command."""
    if args.init:
        config_path = Path(args.path)
        if config_path.exists():
            print(f"Error: Config file already exists: {config_path}", file=sys.stderr)
            return EXIT_RUNTIME_ERROR

        config_path.write_text(get_default_config_template())
        print(f"Created configuration file: {config_path}")
        print("\nYou can also use environment variables (AUTHPATH_* prefix).")
        return EXIT_SUCCESS

    if args.show:
        config = args.cli_config
        config_dict = {
            "state_file": config.state_file,
            "default_output_format": config.default_output_format,
            **config.runtime.to_dict(),
        }
        print(json.dumps(config_dict, indent=2))
        return EXIT_SUCCESS

    print("Usage: authpath config [--init|--show]")
    print("  --init  Create a template configuration file")
    print("  --show  Show current configuration")
    return EXIT_SUCCESS


def main(argv: Sequence[str] | None = None) -> int:
    """
    Main entry point for the CLI.

    Args:
        argv: Command-line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code (0=success, 1=error, 2=root assertion failed)
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return EXIT_RUNTIME_ERROR

    try:
        config = load_config(args.config)
    except (OSError, ValueError, AuthPathException) as e:
        print(f"Error loading configuration: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    log_level = args.log_level or config.log_level
    setup_logging(level=log_level, log_file=config.log_file)

    # Attach config to args for commands to use
    args.cli_config = config

    try:
        return args.func(args)
    except KeyboardInterrupt:
        print("\nInterrupted.", file=sys.stderr)
        return EXIT_RUNTIME_ERROR
    except (AuthPathException, OSError, ValueError) as e:
        if getattr(args, "debug", False):
            traceback.print_exc()
        else:
            print(f"Error: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR


if __name__ == "__main__":
    sys.exit(main())
