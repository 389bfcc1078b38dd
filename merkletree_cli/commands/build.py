"""
CLI Build Command

Build a tree from a file of values and export it.

Usage:
    merkletree build values.txt [--salt] [--sorted] [--hash-type NAME] [--out tree.json] [--json]
"""

from __future__ import annotations

import json
import logging
import sys
from argparse import Namespace
from dataclasses import dataclass, asdict
from typing import Any

from merkletree.config import TreeConfig
from merkletree.schemas.encoding import export_tree
from merkletree.schemas.errors import MerkleTreeException
from merkletree.tree.merkle_tree import MerkleTree

from merkletree_cli.files import read_values, write_json_file


logger = logging.getLogger(__name__)


# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1


@dataclass
class BuildSummary:
    """Summary of tree construction for CLI output."""
    root: str = ""
    values: int = 0
    leaves: int = 0
    depth: int = 0
    hash_type: str = ""
    salt: bool = False
    sorted: bool = False
    output_path: str | None = None

    def to_dict(self) -> dict[str, Any]:
        d = asdict(self)
        if d["output_path"] is None:
            del d["output_path"]
        return d


def resolve_tree_config(args: Namespace) -> TreeConfig:
    """Overlay command-line flags on the configured tree options."""
    base = args.runtime_config.tree
    return TreeConfig(
        salted=base.salted if args.salt is None else args.salt,
        sorted=base.sorted if args.sorted is None else args.sorted,
        hash_type=args.hash_type or base.hash_type,
    )


def build_cmd(args: Namespace) -> int:
    """
    Execute the build command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code
    """
    try:
        values = read_values(args.values_file)
    except OSError as e:
        print(f"Error reading values: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    try:
        tree_config = resolve_tree_config(args)
        tree = MerkleTree.from_config(values, tree_config)
    except MerkleTreeException as e:
        print(f"Error: {e.message}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    logger.info("Built tree over %d values, root %s", len(tree), tree)

    if args.out:
        write_json_file(args.out, export_tree(tree))

    summary = BuildSummary(
        root=tree.root.hex(),
        values=len(tree),
        leaves=tree.leaf_count,
        depth=tree.depth,
        hash_type=tree.hash_provider.name,
        salt=tree.salted,
        sorted=tree.sorted,
        output_path=args.out,
    )

    if args.json:
        print(json.dumps(summary.to_dict(), indent=2))
    else:
        print(f"root: {summary.root}")
        print(f"values: {summary.values}")
        print(f"depth: {summary.depth}")
        print(f"hash_type: {summary.hash_type}")
        if summary.output_path:
            print(f"tree: {summary.output_path}")

    return EXIT_SUCCESS
