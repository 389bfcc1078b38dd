"""
Single-Leaf Proofs
Generation and verification of sibling-hash paths for one leaf.

This module provides:
- Proof: Dataclass representing an inclusion proof for one leaf
- generate_proof: Proof for a value, located by its first occurrence
- generate_proof_for_index: Proof for an explicit leaf position
- verify_proof: Verify a proof against a root or a pollard
- MerkleProver / MerkleVerifier: Class-based convenience wrappers
- payload_flag: Strict boolean options for serialized proofs

A proof generated with pollard height h stops below the pollard: it carries
depth - h sibling digests, and the digest it recomputes must appear in the
last rank of the pollard. Height 0 gives the classic root proof.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Sequence

from merkletree.crypto.hashing import (
    HashProvider,
    default_hash_provider,
    from_hex,
    to_hex,
)
from merkletree.schemas.errors import DataNotFoundException, TreeEncodingException
from merkletree.tree.merkle_tree import MerkleTree, build_tree, hash_branch, hash_leaf


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Proof:
    """
    An inclusion proof for a single leaf.

    The proof does not reference the tree that produced it; it is only
    meaningful against the matching root (or pollard) and hash provider.

    Attributes:
        hashes: Sibling digests from the leaf level upward
        index: 0-based position of the proven value in the tree's data
    """
    hashes: list[bytes] = field(default_factory=list)
    index: int = 0

    def __post_init__(self) -> None:
        """Validate proof structure."""
        if self.index < 0:
            raise ValueError(f"Leaf index must be non-negative, got {self.index}")

    def to_dict(self) -> dict[str, Any]:
        """Serialize with 0x-prefixed hex digests."""
        return {
            "index": self.index,
            "hashes": [to_hex(h) for h in self.hashes],
        }

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> "Proof":
        """Inverse of to_dict()."""
        try:
            return cls(
                hashes=[from_hex(h) for h in payload["hashes"]],
                index=int(payload["index"]),
            )
        except (KeyError, TypeError, ValueError) as e:
            raise TreeEncodingException(f"Invalid proof payload: {e}") from e


def payload_flag(payload: dict[str, Any], key: str, default: bool) -> bool:
    """
    Read a boolean option from a serialized proof.

    Raises:
        TreeEncodingException: If the option is present but not a JSON boolean
    """
    value = payload.get(key, default)
    if not isinstance(value, bool):
        raise TreeEncodingException(
            f"Option {key!r} must be a boolean, got {value!r}",
            details={"field": key},
        )
    return value


def generate_proof(
    tree: MerkleTree,
    value: bytes,
    pollard_height: int = 0,
) -> Proof:
    """
    Generate the proof for a value.

    The value is located by byte equality; if it occurs more than once
    the first occurrence is proven. Use generate_proof_for_index() to prove
    a specific occurrence.

    Args:
        tree: Tree containing the value
        value: Value to prove
        pollard_height: Height of the pollard the proof will be verified
            against (0 for the root)

    Returns:
        Proof for the value

    Raises:
        DataNotFoundException: If value is not in the tree
        InvalidPollardHeightException: If pollard_height exceeds the tree depth
    """
    index = tree.index_of(value)
    if index is None:
        raise DataNotFoundException()
    return generate_proof_for_index(tree, index, pollard_height)


def generate_proof_for_index(
    tree: MerkleTree,
    index: int,
    pollard_height: int = 0,
) -> Proof:
    """
    Generate the proof for the value at a given position.

    Algorithm:
    1. Start at node index + N
    2. While the node lies below the pollard (node > 2^(h+1) - 1):
       - Record its sibling (node ^ 1)
       - Move up: node = node // 2

    Raises:
        DataNotFoundException: If index does not address a value
        InvalidPollardHeightException: If pollard_height exceeds the tree depth
    """
    if index < 0 or index >= len(tree.data):
        raise DataNotFoundException(
            f"Leaf index {index} out of range for {len(tree.data)} values",
            leaf_index=index,
        )
    tree.check_pollard_height(pollard_height)

    boundary = (1 << (pollard_height + 1)) - 1
    hashes: list[bytes] = []
    node = index + tree.leaf_count
    while node > boundary:
        hashes.append(tree.nodes[node ^ 1])
        node //= 2

    logger.debug(
        "Generated proof: index=%d hashes=%d pollard_height=%d",
        index, len(hashes), pollard_height,
    )
    return Proof(hashes=hashes, index=index)


def verify_proof(
    value: bytes,
    salted: bool,
    proof: Proof,
    pollard: Sequence[bytes],
    hash_provider: HashProvider | None = None,
    sorted: bool = False,
) -> bool:
    """
    Verify a proof for a value.

    Only the pollard (or [root]) of the tree is required, not the tree
    itself, so historical trees can be checked without rebuilding them.

    Algorithm:
    1. Hash the value into its leaf digest (salted with proof.index)
    2. Starting at node proof.index + 2^len(hashes), for each sibling:
       - Sorted: hash the smaller digest first
       - Even node: hash(current, sibling); odd node: hash(sibling, current)
       - Move up: node >>= 1
    3. Accept if the result equals an entry in the last rank of the pollard

    Args:
        value: Value being proven
        salted: Whether the tree salts its leaves
        proof: Proof from generate_proof()
        pollard: Pollard of the tree ([root] for a root proof)
        hash_provider: Provider the tree was built with (default BLAKE2b-256)
        sorted: Whether the tree sorts children before hashing

    Returns:
        True if the proof is valid, False otherwise
    """
    if hash_provider is None:
        hash_provider = default_hash_provider()
    if not pollard:
        return False

    current = hash_leaf(hash_provider, value, proof.index, salted)
    node = proof.index + (1 << len(proof.hashes))
    for sibling in proof.hashes:
        if sorted:
            current = hash_branch(hash_provider, current, sibling, True)
        elif node % 2 == 0:
            current = hash_provider.hash(current, sibling)
        else:
            current = hash_provider.hash(sibling, current)
        node >>= 1

    last_rank_start = (len(pollard) + 1) // 2 - 1
    return any(current == entry for entry in pollard[last_rank_start:])


class MerkleProver:
    """
    Convenience class for generating proofs.

    Example:
        >>> tree = build_tree([b"Foo", b"Bar"])
        >>> proof = MerkleProver.prove(tree, b"Bar")
        >>> MerkleVerifier.verify(tree, b"Bar", proof)
        True
    """

    @staticmethod
    def prove(tree: MerkleTree, value: bytes, pollard_height: int = 0) -> Proof:
        """Proof for the first occurrence of value."""
        return generate_proof(tree, value, pollard_height)

    @staticmethod
    def prove_index(tree: MerkleTree, index: int, pollard_height: int = 0) -> Proof:
        """Proof for the value at a given position."""
        return generate_proof_for_index(tree, index, pollard_height)

    @staticmethod
    def compute_root(
        values: Sequence[bytes],
        hash_provider: HashProvider | None = None,
        salted: bool = False,
        sorted: bool = False,
    ) -> bytes:
        """
        Compute the root over values without keeping the tree.

        Raises:
            EmptyInputException: If values is empty
        """
        return build_tree(values, hash_provider, salted=salted, sorted=sorted).root


class MerkleVerifier:
    """Convenience class for verifying proofs."""

    @staticmethod
    def verify(tree: MerkleTree, value: bytes, proof: Proof) -> bool:
        """
        Verify a proof using the settings and pollard of a known tree.

        The pollard height is implied by the number of hashes in the proof.
        """
        height = tree.depth - len(proof.hashes)
        if height < 0:
            return False
        return verify_proof(
            value,
            tree.salted,
            proof,
            tree.pollard(height),
            tree.hash_provider,
            tree.sorted,
        )

    @staticmethod
    def verify_value_in_root(
        value: bytes,
        index: int,
        hashes: list[bytes],
        root: bytes,
        hash_provider: HashProvider | None = None,
        salted: bool = False,
        sorted: bool = False,
    ) -> bool:
        """
        Verify a value against a root using raw proof components.

        Args:
            value: Value being proven
            index: Claimed 0-based position of the value
            hashes: Sibling digests from the leaf level upward
            root: Claimed root digest
            hash_provider: Provider the tree was built with (default BLAKE2b-256)
            salted: Whether the tree salts its leaves
            sorted: Whether the tree sorts children before hashing

        Returns:
            True if the proof is valid, False otherwise
        """
        proof = Proof(hashes=list(hashes), index=index)
        return verify_proof(value, salted, proof, [root], hash_provider, sorted)


__all__ = [
    "Proof",
    "generate_proof",
    "generate_proof_for_index",
    "verify_proof",
    "payload_flag",
    "MerkleProver",
    "MerkleVerifier",
]
