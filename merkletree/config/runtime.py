"""
Runtime Configuration

Central configuration for tree construction defaults and logging.
"""

from __future__ import annotations

import copy
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

from dotenv import load_dotenv

from merkletree.crypto.hashing import (
    DEFAULT_HASH_TYPE,
    HashProvider,
    available_hash_providers,
    get_hash_provider,
)
from merkletree.schemas.errors import ConfigurationException

load_dotenv()


ENV_PREFIX = "MERKLETREE_"

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


def _parse_bool(raw: Any, field_path: str) -> bool:
    if isinstance(raw, bool):
        return raw
    value = str(raw).strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise ConfigurationException(
        f"Expected a boolean for {field_path}, got {raw!r}",
        field_path=field_path,
    )


@dataclass
class TreeConfig:
    """
    Options fixed at tree construction.

    Defaults: unsalted, unsorted, BLAKE2b-256.
    """
    salted: bool = False
    sorted: bool = False
    hash_type: str = DEFAULT_HASH_TYPE

    def __post_init__(self):
        self.salted = _parse_bool(self.salted, "tree.salted")
        self.sorted = _parse_bool(self.sorted, "tree.sorted")
        if self.hash_type not in available_hash_providers():
            raise ConfigurationException(
                f"Unknown hash type {self.hash_type!r}, "
                f"expected one of {available_hash_providers()}",
                field_path="tree.hash_type",
            )

    def hash_provider(self) -> HashProvider:
        """Instantiate the configured hash provider."""
        return get_hash_provider(self.hash_type)


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
    log_level: str = "INFO"
    log_file: Optional[str] = None
    extra: dict[str, Any] = field(default_factory=dict)

    @staticmethod
    def _get_env_overrides() -> dict[str, Any]:
        """
        Get configuration overrides from environment variables.

        Supported variables:
        - MERKLETREE_HASH_TYPE: Hash provider name
        - MERKLETREE_SALT: Salt leaves with their index (true/false)
        - MERKLETREE_SORTED: Sort sibling hashes before hashing (true/false)
        - MERKLETREE_LOG_LEVEL: Log level
        - MERKLETREE_LOG_FILE: Optional log file
        """
        overrides: dict[str, Any] = {}

        if os.getenv(f"{ENV_PREFIX}HASH_TYPE"):
            overrides.setdefault("tree", {})["hash_type"] = os.getenv(f"{ENV_PREFIX}HASH_TYPE")
        if os.getenv(f"{ENV_PREFIX}SALT"):
            overrides.setdefault("tree", {})["salted"] = os.getenv(f"{ENV_PREFIX}SALT")
        if os.getenv(f"{ENV_PREFIX}SORTED"):
            overrides.setdefault("tree", {})["sorted"] = os.getenv(f"{ENV_PREFIX}SORTED")

        if os.getenv(f"{ENV_PREFIX}LOG_LEVEL"):
            overrides["log_level"] = os.getenv(f"{ENV_PREFIX}LOG_LEVEL")
        if os.getenv(f"{ENV_PREFIX}LOG_FILE"):
            overrides["log_file"] = os.getenv(f"{ENV_PREFIX}LOG_FILE")

        return overrides

    @classmethod
    def from_env(cls) -> "RuntimeConfig":
        """
        Load configuration purely from environment variables.

        Uses defaults for any values not specified in env vars.
        """
        return cls.from_dict(cls._get_env_overrides())

    @classmethod
    def from_yaml(cls, path: str | Path) -> "RuntimeConfig":
        """Load configuration from a YAML file."""
        import yaml
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        with open(path) as f:
            data = yaml.safe_load(f) or {}

        return cls.from_dict(data)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "RuntimeConfig":
        """Load configuration from a dictionary (supports partial data)."""
        if not isinstance(data, dict):
            raise ConfigurationException(
                f"Configuration must be a mapping, got {type(data).__name__}",
            )
        tree_data = data.get("tree", {}) or {}
        if not isinstance(tree_data, dict):
            raise ConfigurationException(
                f"Tree options must be a mapping, got {type(tree_data).__name__}",
                field_path="tree",
            )
        unknown = set(tree_data) - {"salted", "sorted", "hash_type"}
        if unknown:
            raise ConfigurationException(
                f"Unknown tree options: {sorted(unknown)}",
                field_path="tree",
            )
        tree = TreeConfig(**tree_data) if tree_data else TreeConfig()

        return cls(
            tree=tree,
            log_level=str(data.get("log_level", "INFO")).upper(),
            log_file=data.get("log_file"),
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
            tree_data = {
                "salted": new_config.tree.salted,
                "sorted": new_config.tree.sorted,
                "hash_type": new_config.tree.hash_type,
            }
            tree_data.update(overrides["tree"])
            new_config.tree = TreeConfig(**tree_data)

        if "log_level" in overrides:
            new_config.log_level = overrides["log_level"].upper()
        if "log_file" in overrides:
            new_config.log_file = overrides["log_file"]

        return new_config

    def to_dict(self) -> dict[str, Any]:
        """Convert configuration to a dictionary."""
        return {
            "tree": {
                "salted": self.tree.salted,
                "sorted": self.tree.sorted,
                "hash_type": self.tree.hash_type,
            },
            "log_level": self.log_level,
            "log_file": self.log_file,
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


def set_default_config(config: Optional[RuntimeConfig]) -> None:
    """Set (or with None, reset) the default runtime configuration."""
    global _default_config
    _default_config = config
