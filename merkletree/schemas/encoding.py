"""
Schemas - Tree Encoding
File: encoding.py

Purpose: JSON export/import of a built tree.

Wire format (byte arrays as standard base64):
    {
        "salt": false,
        "sorted": false,
        "hash_type": "blake2b",
        "data": ["Rm9v", ...],
        "nodes": [null, "...", ...]
    }

nodes[0] is unused by the tree layout and is exported as null. Importing
never re-hashes unless asked to, so a tree exported by one process is
reproduced exactly by another.
"""

from __future__ import annotations

import base64
import binascii
import logging
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from merkletree.crypto.hashing import HashProvider, get_hash_provider
from merkletree.schemas.errors import TreeEncodingException
from merkletree.tree.merkle_tree import MerkleTree, build_tree, padded_leaf_count


logger = logging.getLogger(__name__)


def _b64encode(data: bytes) -> str:
    return base64.b64encode(data).decode("ascii")


def _b64decode(text: str) -> bytes:
    return base64.b64decode(text.encode("ascii"), validate=True)


class TreeExport(BaseModel):
    """Serialized form of a MerkleTree."""

    model_config = ConfigDict(extra="forbid")

    salt: bool = Field(default=False, description="Whether leaves are salted with their index")
    sorted: bool = Field(default=False, description="Whether branch children are sorted before hashing")
    hash_type: str = Field(..., min_length=1, description="Registry name of the hash provider")
    data: list[str] = Field(..., min_length=1, description="Values in leaf order, base64")
    nodes: list[str | None] = Field(..., description="1-indexed node array, base64")

    @field_validator("data")
    @classmethod
    def validate_data_base64(cls, v: list[str]) -> list[str]:
        """Ensure every value is valid base64."""
        for item in v:
            try:
                _b64decode(item)
            except (binascii.Error, ValueError) as e:
                raise ValueError(f"invalid base64 value: {e}") from e
        return v

    @field_validator("nodes")
    @classmethod
    def validate_nodes_base64(cls, v: list[str | None]) -> list[str | None]:
        """Ensure every node after nodes[0] is valid base64."""
        for item in v[1:]:
            if item is None:
                raise ValueError("only nodes[0] may be null")
            try:
                _b64decode(item)
            except (binascii.Error, ValueError) as e:
                raise ValueError(f"invalid base64 node: {e}") from e
        return v

    @model_validator(mode="after")
    def validate_node_count(self) -> "TreeExport":
        """Ensure nodes has 2N entries for the padded leaf count N."""
        expected = 2 * padded_leaf_count(len(self.data))
        if len(self.nodes) != expected:
            raise ValueError(
                f"expected {expected} nodes for {len(self.data)} values, got {len(self.nodes)}"
            )
        return self


def to_export(tree: MerkleTree) -> TreeExport:
    """Build the export model for a tree."""
    return TreeExport(
        salt=tree.salted,
        sorted=tree.sorted,
        hash_type=tree.hash_provider.name,
        data=[_b64encode(value) for value in tree.data],
        nodes=[None] + [_b64encode(node) for node in tree.nodes[1:]],
    )


def export_tree(tree: MerkleTree) -> dict[str, Any]:
    """Export a tree as a JSON-compatible dict."""
    return to_export(tree).model_dump(mode="json")


def dumps_tree(tree: MerkleTree, indent: int | None = None) -> str:
    """Export a tree as a JSON string."""
    return to_export(tree).model_dump_json(indent=indent)


def import_tree(
    payload: dict[str, Any] | TreeExport,
    hash_provider: HashProvider | None = None,
    verify: bool = False,
) -> MerkleTree:
    """
    Import a previously exported tree.

    Args:
        payload: Exported dict (or TreeExport)
        hash_provider: Provider instance to use; must carry the recorded name.
            Resolved from the registry when omitted.
        verify: Rebuild the tree from its values and require identical nodes

    Returns:
        The reconstructed MerkleTree

    Raises:
        UnknownHashTypeException: If the recorded provider name is not registered
        TreeEncodingException: If the payload is invalid, the supplied provider
            does not match, or verification fails
    """
    if isinstance(payload, TreeExport):
        export = payload
    else:
        try:
            export = TreeExport.model_validate(payload)
        except ValidationError as e:
            raise TreeEncodingException(
                "Invalid tree export",
                details={"errors": e.errors(include_url=False)},
            ) from e

    if hash_provider is None:
        hash_provider = get_hash_provider(export.hash_type)
    elif hash_provider.name != export.hash_type:
        raise TreeEncodingException(
            f"Tree was exported with {export.hash_type!r}, "
            f"cannot import with {hash_provider.name!r}",
            details={"expected": export.hash_type, "actual": hash_provider.name},
        )

    data = [_b64decode(item) for item in export.data]
    nodes = [b""] + [_b64decode(item) for item in export.nodes[1:]]
    for position, node in enumerate(nodes[1:], start=1):
        if len(node) != hash_provider.digest_length:
            raise TreeEncodingException(
                f"Node {position} has length {len(node)}, "
                f"expected {hash_provider.digest_length}",
                details={"position": position},
            )

    tree = MerkleTree(
        data,
        nodes,
        hash_provider=hash_provider,
        salted=export.salt,
        sorted=export.sorted,
    )

    if verify:
        rebuilt = build_tree(data, hash_provider, salted=export.salt, sorted=export.sorted)
        if rebuilt.nodes != tree.nodes or rebuilt.data != tree.data:
            raise TreeEncodingException(
                "Imported nodes do not match a rebuild of the imported values",
                details={"root": tree.root.hex(), "rebuilt_root": rebuilt.root.hex()},
            )

    logger.debug("Imported tree: values=%d hash=%s", len(data), hash_provider.name)
    return tree


def loads_tree(
    text: str | bytes,
    hash_provider: HashProvider | None = None,
    verify: bool = False,
) -> MerkleTree:
    """Import a tree from a JSON string."""
    try:
        export = TreeExport.model_validate_json(text)
    except ValidationError as e:
        raise TreeEncodingException(
            "Invalid tree export",
            details={"errors": e.errors(include_url=False)},
        ) from e
    return import_tree(export, hash_provider=hash_provider, verify=verify)


__all__ = [
    "TreeExport",
    "to_export",
    "export_tree",
    "dumps_tree",
    "import_tree",
    "loads_tree",
]
