"""
CLI command modules.
"""

from merkletree_cli.commands import build, proof, multiproof, render

__all__ = ["build", "proof", "multiproof", "render"]
