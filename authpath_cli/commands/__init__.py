"""
CLI command modules.
"""

from authpath_cli.commands import bundle, witness

__all__ = ["bundle", "witness"]
