"""
CLI Configuration

Locates and loads the runtime configuration for the CLI.
Supports a YAML configuration file overlaid with MERKLETREE_* environment
variables.
"""

from __future__ import annotations

from pathlib import Path

import yaml

from merkletree.config import RuntimeConfig


DEFAULT_CONFIG_NAME = "merkletree.yaml"


def default_config_paths() -> list[Path]:
    """Locations searched when no --config is given, in order."""
    return [
        Path.cwd() / DEFAULT_CONFIG_NAME,
        Path.cwd() / f".{DEFAULT_CONFIG_NAME}",
        Path.home() / ".config" / "merkletree" / "config.yaml",
    ]


def load_config(config_path: Path | None = None) -> RuntimeConfig:
    """
    Load configuration from file and/or environment.

    Environment variables override file settings.

    Args:
        config_path: Optional path to a YAML config file

    Returns:
        Merged configuration

    Raises:
        FileNotFoundError: If config_path is given but does not exist
        ConfigurationException: If a value is invalid
    """
    if config_path is not None:
        return RuntimeConfig.from_yaml(config_path).with_env_overrides()

    for default_path in default_config_paths():
        if default_path.exists():
            return RuntimeConfig.from_yaml(default_path).with_env_overrides()

    return RuntimeConfig.from_env()


def get_default_config_template() -> str:
    """Get a template configuration file."""
    return yaml.safe_dump(RuntimeConfig().to_dict(), sort_keys=False)
