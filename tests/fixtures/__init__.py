"""
Test fixtures package for Merkle tree tests.

This package provides factory functions for creating test objects:
- trees.py: value lists and trees in every construction mode

Usage:
    from fixtures import make_values, make_tree

    def test_something():
        tree = make_tree(make_values(5), salted=True)
"""

from .trees import (
    FOO_BAR_BAZ,
    FOO_BAR_ROOT_HEX,
    TREE_MODES,
    make_values,
    make_tree,
    make_config,
)

__all__ = [
    "FOO_BAR_BAZ",
    "FOO_BAR_ROOT_HEX",
    "TREE_MODES",
    "make_values",
    "make_tree",
    "make_config",
]
