"""
Merkle Tree Implementation
Array-backed binary hash tree with salting, sorted branches and pollards.

This module provides:
- MerkleTree: fully materialised tree over an ordered list of byte values
- build_tree: construct a tree from values and construction options
- verify_pollard: check that a pollard is internally consistent
- Hashing helpers shared by the proof engines (leaf_salt, hash_leaf, hash_branch)

Layout Rules (Hard Contracts):
1. nodes is 1-indexed: nodes[1] is the root, nodes[0] is unused (b"")
2. With N = padded leaf count (next power of two), leaves live at [N, 2N)
   and branches at [1, N)
3. Children of i are 2i and 2i+1, the sibling of i is i ^ 1, the parent i // 2
4. Padding leaves are zero-filled digests of the provider's digest length
   and are never hashed
5. A single value gives N = 1: the root is the leaf digest itself

Salting appends the 4-byte big-endian leaf index (modulo 2^32) to each value
before hashing. Sorting places the smaller digest first when hashing any two
children, and reorders the leaves (together with their values) by digest.
"""
from __future__ import annotations

import logging
from typing import Sequence

from merkletree.crypto.hashing import HashProvider, default_hash_provider
from merkletree.schemas.errors import (
    EmptyInputException,
    InvalidPollardHeightException,
)


logger = logging.getLogger(__name__)


def leaf_salt(index: int) -> bytes:
    """4-byte big-endian encoding of a leaf index, wrapping at 2^32."""
    return (index & 0xFFFFFFFF).to_bytes(4, "big")


def hash_leaf(
    hash_provider: HashProvider,
    value: bytes,
    index: int,
    salted: bool,
) -> bytes:
    """
    Compute the leaf digest for a value at a given leaf position.

    Args:
        hash_provider: Provider used for the digest
        value: Raw value bytes
        index: 0-based leaf position (only used when salted)
        salted: Whether to append leaf_salt(index) to the value

    Returns:
        Leaf digest
    """
    if salted:
        return hash_provider.hash(value, leaf_salt(index))
    return hash_provider.hash(value)


def hash_branch(
    hash_provider: HashProvider,
    left: bytes,
    right: bytes,
    sorted: bool,
) -> bytes:
    """
    Compute the digest of a branch from its two children.

    In sorted mode the lexicographically smaller digest is hashed first,
    otherwise children are hashed in position order.
    """
    if sorted and left > right:
        return hash_provider.hash(right, left)
    return hash_provider.hash(left, right)


def padded_leaf_count(num_values: int) -> int:
    """Smallest power of two >= num_values (1 for a single value)."""
    if num_values <= 1:
        return 1
    return 1 << (num_values - 1).bit_length()


class MerkleTree:
    """
    A fully built Merkle tree.

    Instances are treated as immutable once constructed. Use build_tree()
    (or MerkleTree.build) to create one from values; the constructor only
    wraps an already computed node array, e.g. from an exported tree.

    Attributes:
        data: Values in leaf order (reordered by digest in sorted mode)
        nodes: 1-indexed node array of length 2N
        salted: Whether leaves were salted with their index
        sorted: Whether branch children were sorted before hashing
        hash_provider: Provider used for every digest in the tree
    """

    def __init__(
        self,
        data: Sequence[bytes],
        nodes: Sequence[bytes],
        *,
        hash_provider: HashProvider,
        salted: bool = False,
        sorted: bool = False,
    ) -> None:
        if not data:
            raise EmptyInputException()
        self.data: list[bytes] = list(data)
        self.nodes: list[bytes] = list(nodes)
        self.salted = salted
        self.sorted = sorted
        self.hash_provider = hash_provider

    @classmethod
    def build(
        cls,
        values: Sequence[bytes],
        hash_provider: HashProvider | None = None,
        *,
        salted: bool = False,
        sorted: bool = False,
    ) -> "MerkleTree":
        """Alias for build_tree()."""
        return build_tree(values, hash_provider, salted=salted, sorted=sorted)

    @classmethod
    def from_config(cls, values: Sequence[bytes], config=None) -> "MerkleTree":
        """
        Build a tree using a TreeConfig.

        Args:
            values: Values to commit to
            config: TreeConfig; defaults to the process-wide runtime config

        Returns:
            Built MerkleTree
        """
        if config is None:
            from merkletree.config.runtime import get_default_config
            config = get_default_config().tree
        return build_tree(
            values,
            config.hash_provider(),
            salted=config.salted,
            sorted=config.sorted,
        )

    @property
    def root(self) -> bytes:
        """Root digest of the tree."""
        return self.nodes[1]

    @property
    def leaf_count(self) -> int:
        """Padded leaf count N (a power of two)."""
        return len(self.nodes) // 2

    @property
    def depth(self) -> int:
        """Number of branch levels above the leaves (log2 N)."""
        return self.leaf_count.bit_length() - 1

    def leaf(self, index: int) -> bytes:
        """Leaf digest at 0-based position index (padding leaves included)."""
        if index < 0 or index >= self.leaf_count:
            raise IndexError(
                f"Leaf index {index} out of range for {self.leaf_count} leaves"
            )
        return self.nodes[self.leaf_count + index]

    def index_of(self, value: bytes) -> int | None:
        """0-based position of the first occurrence of value, or None."""
        for i, item in enumerate(self.data):
            if item == value:
                return i
        return None

    def check_pollard_height(self, height: int) -> None:
        """
        Ensure a pollard height lies within the tree.

        Raises:
            InvalidPollardHeightException: If height < 0 or height > depth
        """
        if height < 0 or height > self.depth:
            raise InvalidPollardHeightException(
                f"Pollard height {height} out of range for tree of depth {self.depth}",
                height=height,
                depth=self.depth,
            )

    def pollard(self, height: int) -> list[bytes]:
        """
        Return the root plus all branches down to the given height.

        Height 0 returns [root], height 1 the root and its two children,
        height 2 additionally their four children, and so on.

        Raises:
            InvalidPollardHeightException: If height is outside 0..depth
        """
        self.check_pollard_height(height)
        return self.nodes[1 : 1 << (height + 1)]

    def __len__(self) -> int:
        return len(self.data)

    def __str__(self) -> str:
        return self.root.hex()

    def __repr__(self) -> str:
        return (
            f"MerkleTree(values={len(self.data)}, leaves={self.leaf_count}, "
            f"hash={self.hash_provider.name}, salted={self.salted}, "
            f"sorted={self.sorted}, root={self.root.hex()})"
        )


def build_tree(
    values: Sequence[bytes],
    hash_provider: HashProvider | None = None,
    *,
    salted: bool = False,
    sorted: bool = False,
) -> MerkleTree:
    """
    Build a Merkle tree from an ordered sequence of values.

    Algorithm:
    1. N = next power of two >= len(values)
    2. Hash values into leaves [N, N + len(values)), salted if requested
    3. In sorted mode, reorder (value, leaf) pairs by leaf digest
    4. Zero-fill padding leaves [N + len(values), 2N)
    5. Hash branches from N - 1 down to 1

    When both salted and sorted, values are ordered by their unsalted digest
    and then salted with their final position, so every leaf stays provable
    by its position. The sort order therefore refers to unsalted digests: the
    stored salted leaves need not be in ascending order.

    Args:
        values: Non-empty sequence of byte values; duplicates are allowed
        hash_provider: Provider for every digest (default BLAKE2b-256)
        salted: Salt each leaf with its 4-byte big-endian index
        sorted: Sort sibling digests before hashing and leaves by digest

    Returns:
        Built MerkleTree

    Raises:
        EmptyInputException: If values is empty
    """
    if len(values) == 0:
        raise EmptyInputException()
    if hash_provider is None:
        hash_provider = default_hash_provider()

    data = [bytes(value) for value in values]
    leaf_count = padded_leaf_count(len(data))
    nodes: list[bytes] = [b""] * (2 * leaf_count)

    if sorted:
        pairs = [(hash_provider.hash(value), value) for value in data]
        pairs.sort(key=lambda pair: pair[0])
        data = [value for _, value in pairs]
        leaves = [
            digest if not salted else hash_leaf(hash_provider, value, i, True)
            for i, (digest, value) in enumerate(pairs)
        ]
    else:
        leaves = [
            hash_leaf(hash_provider, value, i, salted)
            for i, value in enumerate(data)
        ]

    nodes[leaf_count : leaf_count + len(leaves)] = leaves
    empty = bytes(hash_provider.digest_length)
    for i in range(leaf_count + len(leaves), 2 * leaf_count):
        nodes[i] = empty

    for i in range(leaf_count - 1, 0, -1):
        nodes[i] = hash_branch(hash_provider, nodes[2 * i], nodes[2 * i + 1], sorted)

    logger.debug(
        "Built tree: values=%d leaves=%d hash=%s salted=%s sorted=%s",
        len(data), leaf_count, hash_provider.name, salted, sorted,
    )

    return MerkleTree(
        data,
        nodes,
        hash_provider=hash_provider,
        salted=salted,
        sorted=sorted,
    )


def verify_pollard(
    pollard: Sequence[bytes],
    hash_provider: HashProvider | None = None,
    sorted: bool = False,
) -> bool:
    """
    Verify that the branches in a pollard hash up to its root.

    The pollard is 0-indexed here: the children of entry i are entries
    2i + 1 and 2i + 2.

    Args:
        pollard: Pollard as returned by MerkleTree.pollard()
        hash_provider: Provider the tree was built with (default BLAKE2b-256)
        sorted: Whether the tree sorts children before hashing

    Returns:
        True if every internal entry matches its children
    """
    if hash_provider is None:
        hash_provider = default_hash_provider()
    size = len(pollard)
    if size == 0 or (size + 1) & size:
        return False
    if size == 1:
        return True
    for i in range(size // 2 - 1, -1, -1):
        expected = hash_branch(hash_provider, pollard[2 * i + 1], pollard[2 * i + 2], sorted)
        if pollard[i] != expected:
            return False
    return True


__all__ = [
    "MerkleTree",
    "build_tree",
    "verify_pollard",
    "leaf_salt",
    "hash_leaf",
    "hash_branch",
    "padded_leaf_count",
]
