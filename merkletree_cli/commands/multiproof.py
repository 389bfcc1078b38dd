"""
CLI Multiproof Commands

Usage:
    merkletree multiproof tree.json Foo Baz [--out multi.json]
    merkletree verify-multiproof multi.json Foo Baz --root 0x... [--strict]
"""

from __future__ import annotations

import json
import logging
import sys
from argparse import Namespace

from merkletree.schemas.errors import MerkleTreeException
from merkletree.tree.multiproof import (
    MultiProof,
    generate_multiproof,
    generate_multiproof_for_indices,
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


def multiproof_cmd(args: Namespace) -> int:
    """
    Execute the multiproof command.

    Returns:
        Exit code
    """
    try:
        tree = load_tree_file(args.tree_path)
        if args.indices:
            proof = generate_multiproof_for_indices(tree, args.indices)
        else:
            proof = generate_multiproof(tree, [v.encode("utf-8") for v in args.values])
    except OSError as e:
        print(f"Error reading tree: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR
    except MerkleTreeException as e:
        print(f"Error: {e.message}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    logger.info(
        "Generated multiproof for %d leaves with %d hashes",
        len(proof.indices), proof.hash_count,
    )

    document = proof.to_dict()
    if args.out:
        write_json_file(args.out, document)
        print(f"multiproof: {args.out}")
    else:
        print(json.dumps(document, indent=2))

    return EXIT_SUCCESS


def verify_multiproof_cmd(args: Namespace) -> int:
    """
    Execute the verify-multiproof command.

    Values pair positionally with the indices recorded in the proof.

    Returns:
        Exit code (2 when the proof does not verify)
    """
    try:
        proof = MultiProof.from_dict(load_json_file(args.proof_path))
        root = parse_digest(args.root)
        ok = proof.verify(
            [v.encode("utf-8") for v in args.values],
            root,
            strict=args.strict,
        )
    except (OSError, json.JSONDecodeError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR
    except MerkleTreeException as e:
        print(f"Error: {e.message}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    if args.json:
        print(json.dumps({"valid": ok, "indices": proof.indices, "hashes": proof.hash_count}, indent=2))
    else:
        print(f"valid: {str(ok).lower()}")

    if ok:
        logger.info("Multiproof verified")
        return EXIT_SUCCESS
    logger.warning("Multiproof verification failed")
    return EXIT_VERIFICATION_FAILED
