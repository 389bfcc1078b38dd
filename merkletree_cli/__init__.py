"""
Merkle Tree CLI

Command-line interface for building trees and producing and checking proofs.

Usage:
    python -m merkletree_cli build values.txt --out tree.json
    python -m merkletree_cli proof tree.json Bar --out proof.json
    python -m merkletree_cli verify proof.json Bar --root 0x...
    python -m merkletree_cli multiproof tree.json Foo Baz --out multi.json
    python -m merkletree_cli verify-multiproof multi.json Foo Baz --root 0x...
    python -m merkletree_cli dot tree.json --proof proof.json
    python -m merkletree_cli config --show
"""

__version__ = "0.1.0"
