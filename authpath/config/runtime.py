"""
Runtime Configuration

Defaults for tree construction and logging, loadable from environment
variables, a YAML file or a dictionary.
"""

from __future__ import annotations

import copy
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

from dotenv import load_dotenv

from authpath.crypto.hashing import HASH_ALGORITHMS, HashAlgorithm, get_hash_algorithm
from authpath.schemas.errors import ConfigException

load_dotenv()


# Deepest tree accepted from configuration
MAX_TREE_DEPTH = 64


@dataclass
class TreeConfig:
    """Configuration for new Merkle trees."""
    depth: int = 16
    hash: str = "sha256"

    def __post_init__(self):
        if isinstance(self.depth, str):
            if not self.depth.isdigit():
                raise ConfigException(
                    message=f"Tree depth must be an integer, got {self.depth!r}",
                    field_path="tree.depth",
                )
            self.depth = int(self.depth)
        if not 0 <= self.depth <= MAX_TREE_DEPTH:
            raise ConfigException(
                message=f"Tree depth must be between 0 and {MAX_TREE_DEPTH}, got {self.depth}",
                field_path="tree.depth",
            )
        self.hash = self.hash.lower()
        if self.hash not in HASH_ALGORITHMS:
            raise ConfigException(
                message=f"Unsupported hash algorithm: {self.hash}",
                field_path="tree.hash",
                details={"supported": sorted(HASH_ALGORITHMS)},
            )

    @property
    def hasher(self) -> HashAlgorithm:
        return get_hash_algorithm(self.hash)


@dataclass
class LoggingConfig:
    """Configuration for log output."""
    level: str = "INFO"
    file: Optional[str] = None


@dataclass
class RuntimeConfig:
    """
    Complete runtime configuration.

    Can be loaded from:
    - Environment variables
    - YAML file
    - Programmatic construction
    """
    tree: TreeConfig = field(default_factory=TreeConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    extra: dict[str, Any] = field(default_factory=dict)

    @staticmethod
    def _get_env_overrides() -> dict[str, Any]:
        """
        Get configuration overrides from environment variables.

        Supported variables:
        - AUTHPATH_TREE_DEPTH: Default tree depth
        - AUTHPATH_HASH: Hash algorithm (sha256, sha512)
        - AUTHPATH_LOG_LEVEL: Log level
        - AUTHPATH_LOG_FILE: Log file path
        """
        overrides: dict[str, Any] = {}

        if os.getenv("AUTHPATH_TREE_DEPTH"):
            overrides.setdefault("tree", {})["depth"] = os.getenv("AUTHPATH_TREE_DEPTH")
        if os.getenv("AUTHPATH_HASH"):
            overrides.setdefault("tree", {})["hash"] = os.getenv("AUTHPATH_HASH")

        if os.getenv("AUTHPATH_LOG_LEVEL"):
            overrides.setdefault("logging", {})["level"] = os.getenv("AUTHPATH_LOG_LEVEL")
        if os.getenv("AUTHPATH_LOG_FILE"):
            overrides.setdefault("logging", {})["file"] = os.getenv("AUTHPATH_LOG_FILE")

        return overrides

    @classmethod
    def from_env(cls) -> "RuntimeConfig":
        """Load configuration purely from environment variables."""
        return cls.from_dict(cls._get_env_overrides())

    @classmethod
    def from_yaml(cls, path: str | Path) -> "RuntimeConfig":
        """Load configuration from a YAML file."""
        import yaml
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        with open(path) as f:
            data = yaml.safe_load(f)

        return cls.from_dict(data or {})

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "RuntimeConfig":
        """Load configuration from a dictionary (supports partial data)."""
        tree_data = data.get("tree", {})
        logging_data = data.get("logging", {})

        try:
            tree = TreeConfig(**tree_data) if tree_data else TreeConfig()
            log = LoggingConfig(**logging_data) if logging_data else LoggingConfig()
        except TypeError as e:
            raise ConfigException(message=f"Invalid configuration: {e}") from e

        return cls(
            tree=tree,
            logging=log,
            extra=data.get("extra", {}),
        )

    def with_env_overrides(self) -> "RuntimeConfig":
        """
        Return a new config with environment variable overrides applied.

        This allows loading from a config file first, then overlaying env vars.
        """
        overrides = self._get_env_overrides()
        if not overrides:
            return self

        new_config = copy.deepcopy(self)

        if "tree" in overrides:
            tree_data = {"depth": new_config.tree.depth, "hash": new_config.tree.hash}
            tree_data.update(overrides["tree"])
            new_config.tree = TreeConfig(**tree_data)

        if "logging" in overrides:
            for key, value in overrides["logging"].items():
                setattr(new_config.logging, key, value)

        return new_config

    def to_dict(self) -> dict[str, Any]:
        """Convert configuration to a dictionary."""
        return {
            "tree": {
                "depth": self.tree.depth,
                "hash": self.tree.hash,
            },
            "logging": {
                "level": self.logging.level,
                "file": self.logging.file,
            },
            "extra": self.extra,
        }


# Global default configuration
_default_config: Optional[RuntimeConfig] = None


def get_default_config() -> RuntimeConfig:
    """Get the default runtime configuration."""
    global _default_config
    if _default_config is None:
        _default_config = RuntimeConfig.from_env()
    return _default_config


def set_default_config(config: RuntimeConfig) -> None:
    """Set the default runtime configuration."""
    global _default_config
    _default_config = config
