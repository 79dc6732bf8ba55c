"""
authpath CLI

Command-line interface for the Merkle authentication-path accumulator.

Usage:
    python -m authpath_cli witness -d 4 -i 5
    python -m authpath_cli bundle init --depth 8
    python -m authpath_cli bundle add 0x... 7
    python -m authpath_cli bundle show --json
    python -m authpath_cli config --init
"""

__version__ = "0.1.0"
