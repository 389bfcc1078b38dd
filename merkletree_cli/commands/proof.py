"""
CLI Proof Commands

Generate a single-leaf proof from an exported tree, and verify one against
a root or a pollard.

Usage:
    merkletree proof tree.json Bar [--height H] [--out proof.json]
    merkletree proof tree.json --index 1 [--height H] [--out proof.json]
    merkletree verify proof.json Bar --root 0x...
    merkletree verify proof.json Bar --tree tree.json [--height H]
"""

from __future__ import annotations

import json
import logging
import sys
from argparse import Namespace
from typing import Any

from merkletree.crypto.hashing import get_hash_provider
from merkletree.schemas.errors import MerkleTreeException
from merkletree.tree.merkle_tree import MerkleTree
from merkletree.tree.merkle_proofs import (
    Proof,
    generate_proof,
    generate_proof_for_index,
    payload_flag,
    verify_proof,
)

from merkletree_cli.files import (
    load_json_file,
    load_tree_file,
    parse_digest,
    write_json_file,
)


logger = logging.getLogger(__name__)


# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1
EXIT_VERIFICATION_FAILED = 2


def proof_document(proof: Proof, pollard_height: int, tree: MerkleTree) -> dict[str, Any]:
    """Proof payload plus the tree settings a verifier needs."""
    document = proof.to_dict()
    document.update({
        "pollard_height": pollard_height,
        "salt": tree.salted,
        "sorted": tree.sorted,
        "hash_type": tree.hash_provider.name,
    })
    return document


def proof_cmd(args: Namespace) -> int:
    """
    Execute the proof command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code
    """
    if args.value is None and args.index is None:
        print("Error: give a value or --index", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    try:
        tree = load_tree_file(args.tree_path)
        if args.index is not None:
            proof = generate_proof_for_index(tree, args.index, args.height)
        else:
            proof = generate_proof(tree, args.value.encode("utf-8"), args.height)
    except OSError as e:
        print(f"Error reading tree: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR
    except MerkleTreeException as e:
        print(f"Error: {e.message}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    document = proof_document(proof, args.height, tree)
    logger.info("Generated proof for leaf %d with %d hashes", proof.index, len(proof.hashes))

    if args.out:
        write_json_file(args.out, document)
        print(f"proof: {args.out}")
    else:
        print(json.dumps(document, indent=2))

    return EXIT_SUCCESS


def verify_cmd(args: Namespace) -> int:
    """
    Execute the verify command.

    Tree settings (salting, sorting, hash provider) are read from the proof
    document, falling back to the runtime configuration.

    Returns:
        Exit code (2 when the proof does not verify)
    """
    defaults = args.runtime_config.tree

    try:
        document = load_json_file(args.proof_path)
        proof = Proof.from_dict(document)
        salted = payload_flag(document, "salt", defaults.salted)
        sorted_ = payload_flag(document, "sorted", defaults.sorted)
        hash_provider = get_hash_provider(document.get("hash_type", defaults.hash_type))

        if args.root:
            pollard = [parse_digest(args.root)]
        else:
            tree = load_tree_file(args.tree)
            height = args.height
            if height is None:
                height = tree.depth - len(proof.hashes)
            pollard = tree.pollard(height)
    except (OSError, json.JSONDecodeError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR
    except MerkleTreeException as e:
        print(f"Error: {e.message}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    ok = verify_proof(
        args.value.encode("utf-8"),
        salted,
        proof,
        pollard,
        hash_provider,
        sorted=sorted_,
    )

    if args.json:
        print(json.dumps({"valid": ok, "index": proof.index, "pollard_size": len(pollard)}, indent=2))
    else:
        print(f"valid: {str(ok).lower()}")

    if ok:
        logger.info("Proof verified")
        return EXIT_SUCCESS
    logger.warning("Proof verification failed")
    return EXIT_VERIFICATION_FAILED
