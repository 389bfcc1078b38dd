"""
Runtime Configuration Module

Provides configuration loading and management for tree construction.
"""

from .runtime import (
    RuntimeConfig,
    TreeConfig,
    get_default_config,
    set_default_config,
)

__all__ = [
    "RuntimeConfig",
    "TreeConfig",
    "get_default_config",
    "set_default_config",
]
