"""
Multiproofs
Compressed proofs of membership for several leaves at once.

Independent single proofs for several leaves repeat every sibling they have
in common and include siblings that are themselves derivable from other
proven leaves. A multiproof keeps only the frontier of digests that cannot be
recomputed from the proven leaves and each other, keyed by node position so
the verifier can place them without any path information.

Generation:
1. Build the single proof for each leaf
2. Union their siblings into {node position: digest}, marking every node on
   each leaf-to-root walk as calculable
3. Drop every entry whose position is calculable

Verification:
1. Insert the proven leaf digests at index + N
2. Walk branch positions from N - 1 down to 1, hashing any node whose two
   children are both known; children always have larger positions than their
   parent, so a single descending pass resolves everything resolvable
3. Compare position 1 with the root
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Sequence

from merkletree.crypto.hashing import (
    HashProvider,
    default_hash_provider,
    from_hex,
    get_hash_provider,
    to_hex,
)
from merkletree.schemas.errors import (
    DataNotFoundException,
    EmptyInputException,
    MalformedProofException,
    MerkleTreeException,
    TreeEncodingException,
)
from merkletree.tree.merkle_proofs import generate_proof_for_index, payload_flag
from merkletree.tree.merkle_tree import MerkleTree, hash_branch, hash_leaf


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MultiProof:
    """
    A proof of membership for several leaves of one tree.

    Only valid for a tree with the same padded leaf count and hash provider.

    Attributes:
        values: Padded leaf count N of the tree
        hashes: Digests that cannot be calculated, keyed by 1-indexed node position
        indices: Proven leaf positions, pairing positionally with the values
            passed to verify()
        salted: Whether the tree salts its leaves
        sorted: Whether the tree sorts children before hashing
        hash_provider: Provider the tree was built with
    """
    values: int
    hashes: dict[int, bytes]
    indices: list[int]
    salted: bool = False
    sorted: bool = False
    hash_provider: HashProvider = field(default_factory=default_hash_provider)

    def __post_init__(self) -> None:
        """Validate proof structure."""
        if self.values < 1 or self.values & (self.values - 1):
            raise MalformedProofException(
                f"Leaf count must be a power of two, got {self.values}",
                details={"values": self.values},
            )
        if not self.indices:
            raise MalformedProofException("no indices specified")
        for index in self.indices:
            if index < 0 or index >= self.values:
                raise MalformedProofException(
                    f"Leaf index {index} out of range for {self.values} leaves",
                    details={"leaf_index": index},
                )
        for position in self.hashes:
            if position < 1 or position >= 2 * self.values:
                raise MalformedProofException(
                    f"Node position {position} out of range for {self.values} leaves",
                    details={"position": position},
                )

    @property
    def hash_count(self) -> int:
        """Number of digests transmitted with the proof."""
        return len(self.hashes)

    def verify(
        self,
        values: Sequence[bytes],
        root: bytes,
        strict: bool = False,
    ) -> bool:
        """
        Verify the proof for the given values against a root.

        The proof itself is not modified, so it can be verified repeatedly.

        Args:
            values: Proven values, in the same order as self.indices
            root: Root of the tree
            strict: Raise instead of returning False when the root cannot
                be recomputed at all (the proof is missing digests)

        Returns:
            True if the values are proven members of the tree with this root

        Raises:
            MalformedProofException: If len(values) != len(self.indices), or
                in strict mode when the root position cannot be resolved
        """
        if len(values) != len(self.indices):
            raise MalformedProofException(
                f"Expected {len(self.indices)} values, got {len(values)}",
                details={"expected": len(self.indices), "actual": len(values)},
            )

        known = dict(self.hashes)
        for value, index in zip(values, self.indices):
            known[index + self.values] = hash_leaf(self.hash_provider, value, index, self.salted)

        for i in range(self.values - 1, 0, -1):
            if i in known:
                continue
            left = known.get(2 * i)
            if left is None:
                continue
            right = known.get(2 * i + 1)
            if right is None:
                continue
            known[i] = hash_branch(self.hash_provider, left, right, self.sorted)

        computed = known.get(1)
        if computed is None:
            if strict:
                raise MalformedProofException(
                    "Proof does not contain enough hashes to reach the root",
                    details={"indices": list(self.indices)},
                )
            return False
        return computed == root

    def to_dict(self) -> dict[str, Any]:
        """Serialize with 0x-prefixed hex digests and the provider name."""
        return {
            "values": self.values,
            "indices": list(self.indices),
            "hashes": {str(k): to_hex(v) for k, v in sorted(self.hashes.items())},
            "salt": self.salted,
            "sorted": self.sorted,
            "hash_type": self.hash_provider.name,
        }

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> "MultiProof":
        """
        Inverse of to_dict().

        Raises:
            UnknownHashTypeException: If the provider name is not registered
            TreeEncodingException: If the payload is structurally invalid
        """
        try:
            hash_provider = get_hash_provider(payload["hash_type"])
            return cls(
                values=int(payload["values"]),
                hashes={int(k): from_hex(v) for k, v in payload["hashes"].items()},
                indices=[int(i) for i in payload["indices"]],
                salted=payload_flag(payload, "salt", False),
                sorted=payload_flag(payload, "sorted", False),
                hash_provider=hash_provider,
            )
        except MerkleTreeException:
            raise
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            raise TreeEncodingException(f"Invalid multiproof payload: {e}") from e


def generate_multiproof(tree: MerkleTree, values: Sequence[bytes]) -> MultiProof:
    """
    Generate a multiproof for several values.

    Each value is located by its first occurrence, as for generate_proof().

    Raises:
        EmptyInputException: If values is empty
        DataNotFoundException: If any value is not in the tree
    """
    indices: list[int] = []
    for value in values:
        index = tree.index_of(value)
        if index is None:
            raise DataNotFoundException()
        indices.append(index)
    return generate_multiproof_for_indices(tree, indices)


def generate_multiproof_for_indices(
    tree: MerkleTree,
    indices: Sequence[int],
) -> MultiProof:
    """
    Generate a multiproof for the values at the given positions.

    Raises:
        EmptyInputException: If indices is empty
        DataNotFoundException: If any index does not address a value
    """
    if len(indices) == 0:
        raise EmptyInputException("multiproof must prove at least 1 piece of data")

    leaf_count = tree.leaf_count
    proofs = [generate_proof_for_index(tree, index, 0) for index in indices]

    hashes: dict[int, bytes] = {}
    calculable: set[int] = set()
    for proof in proofs:
        node = proof.index + leaf_count
        for sibling in proof.hashes:
            hashes[node ^ 1] = sibling
            calculable.add(node)
            node //= 2

    for node in calculable:
        hashes.pop(node, None)

    logger.debug(
        "Generated multiproof: leaves=%d hashes=%d (single proofs total %d)",
        len(proofs), len(hashes), sum(len(p.hashes) for p in proofs),
    )

    return MultiProof(
        values=leaf_count,
        hashes=hashes,
        indices=[proof.index for proof in proofs],
        salted=tree.salted,
        sorted=tree.sorted,
        hash_provider=tree.hash_provider,
    )


def verify_multiproof(
    values: Sequence[bytes],
    salted: bool,
    proof: MultiProof,
    root: bytes,
    hash_provider: HashProvider | None = None,
    sorted: bool = False,
) -> bool:
    """
    Verify a multiproof using caller-supplied tree settings.

    Only the proof's positional data (hashes, indices, leaf count) is used;
    salting, sorting and the provider come from the arguments, as for
    verify_proof().
    """
    if hash_provider is None:
        hash_provider = default_hash_provider()
    replay = MultiProof(
        values=proof.values,
        hashes=proof.hashes,
        indices=proof.indices,
        salted=salted,
        sorted=sorted,
        hash_provider=hash_provider,
    )
    return replay.verify(values, root)


__all__ = [
    "MultiProof",
    "generate_multiproof",
    "generate_multiproof_for_indices",
    "verify_multiproof",
]
