"""
CLI Configuration

Configuration management for the authpath CLI.
Supports a JSON configuration file and environment variables.
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from authpath.config.runtime import LoggingConfig, RuntimeConfig, TreeConfig


# Environment variable prefix
ENV_PREFIX = "AUTHPATH_"


@dataclass
class CLIConfig:
    """Main CLI configuration."""

    # Tree defaults and logging
    runtime: RuntimeConfig = field(default_factory=RuntimeConfig)

    # Bundle state used by the bundle subcommands
    state_file: str = "authpath_state.txt"

    # Output
    default_output_format: str = "human"  # "human" or "json"

    @property
    def log_level(self) -> str:
        return self.runtime.logging.level

    @property
    def log_file(self) -> str | None:
        return self.runtime.logging.file


def load_config_from_file(path: Path) -> CLIConfig:
    """Load configuration from a JSON file."""
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    with open(path, "r") as f:
        data: dict[str, Any] = json.load(f)

    tree_data = data.get("tree", {})
    runtime = RuntimeConfig(
        tree=TreeConfig(**tree_data) if tree_data else TreeConfig(),
        logging=LoggingConfig(
            level=data.get("log_level", "INFO"),
            file=data.get("log_file"),
        ),
        extra=data.get("extra", {}),
    )

    config = CLIConfig(runtime=runtime)
    config.state_file = data.get("state_file", config.state_file)
    config.default_output_format = data.get("default_output_format", config.default_output_format)
    return config


def load_config(config_path: Path | None = None) -> CLIConfig:
    """
    Load configuration from file and/or environment.

    Environment variables override file settings.

    Args:
        config_path: Optional path to config file

    Returns:
        Merged configuration
    """
    config = CLIConfig()

    if config_path is not None:
        config = load_config_from_file(config_path)
    else:
        default_paths = [
            Path.cwd() / "authpath.json",
            Path.cwd() / ".authpath.json",
            Path.home() / ".config" / "authpath" / "config.json",
        ]
        for default_path in default_paths:
            if default_path.exists():
                config = load_config_from_file(default_path)
                break

    # Override with environment variables
    config.runtime = config.runtime.with_env_overrides()
    if os.getenv(f"{ENV_PREFIX}STATE_FILE"):
        config.state_file = os.getenv(f"{ENV_PREFIX}STATE_FILE", config.state_file)
    if os.getenv(f"{ENV_PREFIX}OUTPUT_FORMAT"):
        config.default_output_format = os.getenv(f"{ENV_PREFIX}OUTPUT_FORMAT", "human")

    return config


def get_default_config_template() -> str:
    """Get a template configuration file."""
    return """{
  "state_file": "authpath_state.txt",
  "default_output_format": "human",
  "log_level": "INFO",
  "log_file": null,
  "tree": {
    "depth": 16,
    "hash": "sha256"
  }
}
"""
