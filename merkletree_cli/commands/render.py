"""
CLI Dot Command

Render an exported tree as Graphviz DOT, optionally highlighting a proof
or a multiproof.

Usage:
    merkletree dot tree.json [--format truncated|hex|string] [--proof proof.json | --multiproof multi.json] [--out tree.dot]
"""

from __future__ import annotations

import json
import sys
from argparse import Namespace
from pathlib import Path

from merkletree.schemas.errors import MerkleTreeException
from merkletree.tree.dot import (
    Formatter,
    HexFormatter,
    StringFormatter,
    TruncatedHexFormatter,
    dot,
    dot_multiproof,
    dot_proof,
)
from merkletree.tree.merkle_proofs import Proof
from merkletree.tree.multiproof import MultiProof

from merkletree_cli.files import load_json_file, load_tree_file


# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1


FORMATTERS: dict[str, type] = {
    "truncated": TruncatedHexFormatter,
    "hex": HexFormatter,
    "string": StringFormatter,
}


def dot_cmd(args: Namespace) -> int:
    """
    Execute the dot command.

    --format applies to value labels; digests always use hex (full with
    --format hex, truncated otherwise).

    Returns:
        Exit code
    """
    leaf_formatter: Formatter = FORMATTERS[args.format]()
    branch_formatter: Formatter = HexFormatter() if args.format == "hex" else TruncatedHexFormatter()

    try:
        tree = load_tree_file(args.tree_path)
        if args.proof:
            output = dot_proof(
                tree,
                Proof.from_dict(load_json_file(args.proof)),
                leaf_formatter,
                branch_formatter,
            )
        elif args.multiproof:
            output = dot_multiproof(
                tree,
                MultiProof.from_dict(load_json_file(args.multiproof)),
                leaf_formatter,
                branch_formatter,
            )
        else:
            output = dot(tree, leaf_formatter, branch_formatter)
    except (OSError, json.JSONDecodeError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR
    except MerkleTreeException as e:
        print(f"Error: {e.message}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    if args.out:
        Path(args.out).write_text(output + "\n", encoding="utf-8")
    else:
        print(output)
    return EXIT_SUCCESS
