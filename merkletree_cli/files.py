"""
CLI file helpers

Reading values, trees and proofs from disk and writing JSON results.
"""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Any

from merkletree.crypto.hashing import from_hex
from merkletree.schemas.encoding import loads_tree
from merkletree.tree.merkle_tree import MerkleTree


def read_values(path: str) -> list[bytes]:
    """
    Read one value per line, UTF-8 encoded. "-" reads standard input.

    Blank lines are skipped.
    """
    if path == "-":
        text = sys.stdin.read()
    else:
        text = Path(path).read_text(encoding="utf-8")
    return [line.encode("utf-8") for line in text.splitlines() if line]


def load_tree_file(path: str | Path) -> MerkleTree:
    """Load an exported tree JSON file."""
    return loads_tree(Path(path).read_text(encoding="utf-8"))


def load_json_file(path: str | Path) -> Any:
    """Load and parse a JSON file."""
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


def write_json_file(path: str | Path, payload: Any) -> None:
    """Write a JSON document with a trailing newline."""
    Path(path).write_text(json.dumps(payload, indent=2) + "\n", encoding="utf-8")


def parse_digest(text: str) -> bytes:
    """Parse a hex digest, with or without the 0x prefix."""
    if not text.startswith("0x"):
        text = "0x" + text
    return from_hex(text)
