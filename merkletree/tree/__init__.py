"""
Merkle Tree, Pollards and Proofs
Array-backed Merkle tree with single-leaf proofs and sparse multiproofs.

This module provides:
- MerkleTree / build_tree: construct a tree over byte values
- MerkleTree.pollard / verify_pollard: top slices of a tree as proof anchors
- Proof / generate_proof / verify_proof: single-leaf proofs
- MultiProof / generate_multiproof / verify_multiproof: multi-leaf proofs
- dot / dot_proof / dot_multiproof: Graphviz rendering

Usage:
    from merkletree.tree import build_tree, generate_proof, verify_proof

    tree = build_tree([b"Foo", b"Bar", b"Baz"])
    proof = generate_proof(tree, b"Bar")
    assert verify_proof(b"Bar", False, proof, [tree.root])
"""
from .merkle_tree import (
    MerkleTree,
    build_tree,
    verify_pollard,
    leaf_salt,
    hash_leaf,
    hash_branch,
    padded_leaf_count,
)

from .merkle_proofs import (
    Proof,
    generate_proof,
    generate_proof_for_index,
    verify_proof,
    MerkleProver,
    MerkleVerifier,
)

from .multiproof import (
    MultiProof,
    generate_multiproof,
    generate_multiproof_for_indices,
    verify_multiproof,
)

from .dot import (
    Formatter,
    TruncatedHexFormatter,
    HexFormatter,
    StringFormatter,
    dot,
    dot_proof,
    dot_multiproof,
)


__all__ = [
    # Tree
    "MerkleTree",
    "build_tree",
    "verify_pollard",
    "leaf_salt",
    "hash_leaf",
    "hash_branch",
    "padded_leaf_count",
    # Single proofs
    "Proof",
    "generate_proof",
    "generate_proof_for_index",
    "verify_proof",
    "MerkleProver",
    "MerkleVerifier",
    # Multiproofs
    "MultiProof",
    "generate_multiproof",
    "generate_multiproof_for_indices",
    "verify_multiproof",
    # Rendering
    "Formatter",
    "TruncatedHexFormatter",
    "HexFormatter",
    "StringFormatter",
    "dot",
    "dot_proof",
    "dot_multiproof",
]
