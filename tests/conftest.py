"""
Pytest configuration and shared fixtures for Merkle tree tests.

This conftest.py:
1. Adds project root to sys.path for imports
2. Provides commonly-used fixtures via pytest's autodiscovery
3. Configures pytest markers and settings
"""

import sys
from pathlib import Path

import pytest

# =============================================================================
# Path Setup - Must happen before any local imports
# =============================================================================

# Get the project root (parent of tests/)
_PROJECT_ROOT = Path(__file__).resolve().parent.parent
_TESTS_ROOT = Path(__file__).resolve().parent

# Add both project root and tests root to sys.path
for _path in [str(_PROJECT_ROOT), str(_TESTS_ROOT)]:
    if _path not in sys.path:
        sys.path.insert(0, _path)

# =============================================================================
# Import fixtures using importlib (more robust for pytest loading)
# =============================================================================

import importlib

_trees = importlib.import_module("fixtures.trees")

make_values = _trees.make_values
make_tree = _trees.make_tree
make_config = _trees.make_config


# =============================================================================
# Pytest Fixtures (autodiscovered by pytest)
# =============================================================================

@pytest.fixture
def foo_bar_baz_tree():
    """Provide the unsalted, unsorted BLAKE2b tree over Foo, Bar, Baz."""
    return make_tree()


@pytest.fixture
def foo_bar_tree():
    """Provide the unsalted, unsorted BLAKE2b tree over Foo, Bar."""
    return make_tree([b"Foo", b"Bar"])


@pytest.fixture
def clean_env(monkeypatch):
    """Remove MERKLETREE_* variables and reset the process-wide config."""
    import os
    from merkletree.config import set_default_config

    for key in list(os.environ):
        if key.startswith("MERKLETREE_"):
            monkeypatch.delenv(key, raising=False)
    set_default_config(None)
    yield monkeypatch
    set_default_config(None)


# =============================================================================
# Pytest Configuration
# =============================================================================

def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )
