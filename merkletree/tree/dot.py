"""
Graphviz DOT rendering of trees, proofs and multiproofs.

Colours:
- values being proven: red (#ff4040)
- digests supplied by a proof: green (#00ff00)
- root, or the pollard a proof is checked against: blue (#8080ff)

Render with e.g. `dot -Tsvg tree.dot > tree.svg`.
"""
from __future__ import annotations

from typing import Optional, Protocol

from merkletree.tree.merkle_proofs import Proof
from merkletree.tree.merkle_tree import MerkleTree, leaf_salt
from merkletree.tree.multiproof import MultiProof


VALUE_STYLE = ' style=filled fillcolor="#ff4040"'
PROOF_STYLE = ' style=filled fillcolor="#00ff00"'
ROOT_STYLE = ' style=filled fillcolor="#8080ff"'


class Formatter(Protocol):
    """Turns a value or digest into a node label."""

    def format(self, data: bytes) -> str:
        ...


class TruncatedHexFormatter:
    """First and last two bytes in hex, e.g. "466f…6f6f". The default."""

    def format(self, data: bytes) -> str:
        return f"{data[:2].hex():>4}…{data[-2:].hex():>4}"


class HexFormatter:
    """Full lowercase hex."""

    def format(self, data: bytes) -> str:
        return data.hex()


class StringFormatter:
    """UTF-8 text, for human-readable values."""

    def format(self, data: bytes) -> str:
        return data.decode("utf-8", errors="replace")


def dot(
    tree: MerkleTree,
    leaf_formatter: Optional[Formatter] = None,
    branch_formatter: Optional[Formatter] = None,
) -> str:
    """Render the whole tree."""
    return _render(tree, set(), set(), set(), leaf_formatter, branch_formatter)


def dot_proof(
    tree: MerkleTree,
    proof: Optional[Proof],
    leaf_formatter: Optional[Formatter] = None,
    branch_formatter: Optional[Formatter] = None,
) -> str:
    """Render the tree highlighting a single proof and its pollard."""
    if proof is None:
        return dot(tree, leaf_formatter, branch_formatter)

    value_indices = {proof.index}
    proof_indices: set[int] = set()
    node = proof.index + tree.leaf_count
    for _ in proof.hashes:
        proof_indices.add(node ^ 1)
        node //= 2

    pollard_height = tree.depth - len(proof.hashes)
    root_indices = set(range(1, 1 << (pollard_height + 1)))

    return _render(tree, root_indices, value_indices, proof_indices, leaf_formatter, branch_formatter)


def dot_multiproof(
    tree: MerkleTree,
    multiproof: Optional[MultiProof],
    leaf_formatter: Optional[Formatter] = None,
    branch_formatter: Optional[Formatter] = None,
) -> str:
    """Render the tree highlighting the values and digests of a multiproof."""
    if multiproof is None:
        return dot(tree, leaf_formatter, branch_formatter)

    return _render(
        tree,
        {1},
        set(multiproof.indices),
        set(multiproof.hashes),
        leaf_formatter,
        branch_formatter,
    )


def _render(
    tree: MerkleTree,
    root_indices: set[int],
    value_indices: set[int],
    proof_indices: set[int],
    leaf_formatter: Optional[Formatter],
    branch_formatter: Optional[Formatter],
) -> str:
    lf = leaf_formatter or TruncatedHexFormatter()
    bf = branch_formatter or TruncatedHexFormatter()

    out: list[str] = [
        "digraph MerkleTree {",
        "rankdir = TB;",
        'node [shape=rectangle margin="0.2,0.2"];',
    ]
    rank: list[str] = ["{rank=same"]
    data_len = len(tree.data)
    offset = tree.leaf_count

    for i in range(offset):
        position = offset + i
        if i < data_len:
            label = lf.format(tree.data[i])
            out.append(f'"{label}" [shape=oval')
            if i in value_indices:
                out.append(VALUE_STYLE)
            out.append("];")
            if tree.salted:
                out.append(f'"{label}"->{position} [label="+{leaf_salt(i).hex()}"];')
            else:
                out.append(f'"{label}"->{position};')
            digest = tree.nodes[position]
        else:
            digest = bytes(len(tree.root))

        rank.append(f";{position}")
        out.append(f'{position} [label="{bf.format(digest)}"')
        if position in proof_indices:
            out.append(PROOF_STYLE)
        elif position in root_indices:
            out.append(ROOT_STYLE)
        out.append("];")
        if i > 0:
            out.append(f"{position - 1}->{position} [style=invisible arrowhead=none];")
        if data_len > 1:
            out.append(f"{position}->{position // 2};")

    rank.append("};")
    out.extend(rank)

    for position in range(offset - 1, 0, -1):
        out.append(f'{position} [label="{bf.format(tree.nodes[position])}"')
        if position in root_indices:
            out.append(ROOT_STYLE)
        elif position in proof_indices:
            out.append(PROOF_STYLE)
        out.append("];")
        if position > 1:
            out.append(f"{position}->{position // 2};")

    out.append("}")
    return "".join(out)


__all__ = [
    "Formatter",
    "TruncatedHexFormatter",
    "HexFormatter",
    "StringFormatter",
    "dot",
    "dot_proof",
    "dot_multiproof",
]
