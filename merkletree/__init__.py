"""
merkletree

Merkle trees over arbitrary byte values, with pollards, single-leaf proofs
and sparse multiproofs, generic over the hash function.
"""
from merkletree.crypto import (
    HashProvider,
    Blake2b,
    Keccak256,
    Sha3_256,
    Sha3_512,
    get_hash_provider,
    default_hash_provider,
)
from merkletree.schemas.errors import (
    MerkleTreeException,
    EmptyInputException,
    DataNotFoundException,
    InvalidPollardHeightException,
    MalformedProofException,
    UnknownHashTypeException,
    TreeEncodingException,
    ConfigurationException,
)
from merkletree.tree import (
    MerkleTree,
    build_tree,
    verify_pollard,
    Proof,
    generate_proof,
    generate_proof_for_index,
    verify_proof,
    MultiProof,
    generate_multiproof,
    generate_multiproof_for_indices,
    verify_multiproof,
    dot,
    dot_proof,
    dot_multiproof,
)

__version__ = "0.1.0"

__all__ = [
    "HashProvider",
    "Blake2b",
    "Keccak256",
    "Sha3_256",
    "Sha3_512",
    "get_hash_provider",
    "default_hash_provider",
    "MerkleTreeException",
    "EmptyInputException",
    "DataNotFoundException",
    "InvalidPollardHeightException",
    "MalformedProofException",
    "UnknownHashTypeException",
    "TreeEncodingException",
    "ConfigurationException",
    "MerkleTree",
    "build_tree",
    "verify_pollard",
    "Proof",
    "generate_proof",
    "generate_proof_for_index",
    "verify_proof",
    "MultiProof",
    "generate_multiproof",
    "generate_multiproof_for_indices",
    "verify_multiproof",
    "dot",
    "dot_proof",
    "dot_multiproof",
]
