"""
CLI Main Entry Point

Parses command-line arguments and dispatches to subcommands.

Usage:
    python -m merkletree_cli build <values_file> [--salt] [--sorted] [--hash-type NAME] [--out PATH] [--json]
    python -m merkletree_cli proof <tree_json> [<value> | --index N] [--height H] [--out PATH]
    python -m merkletree_cli verify <proof_json> <value> (--root HEX | --tree PATH [--height H]) [--json]
    python -m merkletree_cli multiproof <tree_json> [<value>... | --index N...] [--out PATH]
    python -m merkletree_cli verify-multiproof <multiproof_json> <value>... --root HEX [--strict] [--json]
    python -m merkletree_cli dot <tree_json> [--format truncated|hex|string] [--proof PATH | --multiproof PATH]
    python -m merkletree_cli config [--init|--show]

Environment Variables:
    MERKLETREE_HASH_TYPE     Hash provider (blake2b, keccak256, sha256, sha512)
    MERKLETREE_SALT          Salt leaves with their index (default: false)
    MERKLETREE_SORTED        Sort sibling hashes before hashing (default: false)
    MERKLETREE_LOG_LEVEL     Log level (default: INFO)
    MERKLETREE_LOG_FILE      Optional log file
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
import traceback
from pathlib import Path
from typing import Sequence

from merkletree.crypto.hashing import available_hash_providers

from merkletree_cli import __version__
from merkletree_cli.commands import build, proof, multiproof, render
from merkletree_cli.config import (
    DEFAULT_CONFIG_NAME,
    get_default_config_template,
    load_config,
)


# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1
EXIT_VERIFICATION_FAILED = 2


def setup_logging(level: str = "INFO", log_file: str | None = None) -> None:
    """Configure logging for the CLI."""
    log_level = getattr(logging, level.upper(), logging.INFO)

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]

    if log_file:
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=log_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        handlers=handlers,
    )


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser with all subcommands."""
    parser = argparse.ArgumentParser(
        prog="merkletree",
        description="Merkle tree CLI - Build trees, generate and verify proofs and multiproofs.",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}"
    )
    parser.add_argument(
        "--config", "-c",
        type=Path,
        default=None,
        help=f"Path to YAML configuration file (default: ./{DEFAULT_CONFIG_NAME} or ~/.config/merkletree/config.yaml)",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Log level (overrides config)",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # --- build command ---
    build_parser = subparsers.add_parser(
        "build",
        help="Build a tree from a file of values",
        description="Build a tree over one UTF-8 value per line and optionally export it.",
    )
    build_parser.add_argument(
        "values_file",
        type=str,
        help="File with one value per line ('-' for stdin)",
    )
    build_parser.add_argument(
        "--salt",
        dest="salt",
        action="store_true",
        default=None,
        help="Salt each leaf with its index",
    )
    build_parser.add_argument(
        "--no-salt",
        dest="salt",
        action="store_false",
        help="Do not salt leaves",
    )
    build_parser.add_argument(
        "--sorted",
        dest="sorted",
        action="store_true",
        default=None,
        help="Sort sibling hashes before hashing",
    )
    build_parser.add_argument(
        "--no-sorted",
        dest="sorted",
        action="store_false",
        help="Hash siblings in position order",
    )
    build_parser.add_argument(
        "--hash-type",
        type=str,
        choices=available_hash_providers(),
        default=None,
        help="Hash provider (default: from config or blake2b)",
    )
    build_parser.add_argument(
        "--out", "-o",
        type=str,
        default=None,
        help="Write the exported tree JSON to this path",
    )
    build_parser.add_argument(
        "--json",
        action="store_true",
        default=False,
        help="Output machine-readable JSON summary",
    )
    build_parser.set_defaults(func=build.build_cmd)

    # --- proof command ---
    proof_parser = subparsers.add_parser(
        "proof",
        help="Generate a proof for one value",
        description="Generate a single-leaf proof from an exported tree.",
    )
    proof_parser.add_argument("tree_path", type=str, help="Exported tree JSON")
    proof_parser.add_argument("value", type=str, nargs="?", default=None, help="Value to prove")
    proof_parser.add_argument(
        "--index",
        type=int,
        default=None,
        help="Prove the value at this leaf position instead",
    )
    proof_parser.add_argument(
        "--height",
        type=int,
        default=0,
        help="Pollard height the proof will be checked against (default: 0, the root)",
    )
    proof_parser.add_argument("--out", "-o", type=str, default=None, help="Write proof JSON to this path")
    proof_parser.set_defaults(func=proof.proof_cmd)

    # --- verify command ---
    verify_parser = subparsers.add_parser(
        "verify",
        help="Verify a single-leaf proof",
        description="Verify a proof against a root or against the pollard of an exported tree.",
    )
    verify_parser.add_argument("proof_path", type=str, help="Proof JSON")
    verify_parser.add_argument("value", type=str, help="Value being proven")
    anchor = verify_parser.add_mutually_exclusive_group(required=True)
    anchor.add_argument("--root", type=str, help="Root digest in hex")
    anchor.add_argument("--tree", type=str, help="Exported tree JSON to take the pollard from")
    verify_parser.add_argument(
        "--height",
        type=int,
        default=None,
        help="Pollard height when using --tree (default: inferred from the proof length)",
    )
    verify_parser.add_argument("--json", action="store_true", default=False, help="JSON output")
    verify_parser.set_defaults(func=proof.verify_cmd)

    # --- multiproof command ---
    multiproof_parser = subparsers.add_parser(
        "multiproof",
        help="Generate a multiproof for several values",
        description="Generate a compressed proof for several values of an exported tree.",
    )
    multiproof_parser.add_argument("tree_path", type=str, help="Exported tree JSON")
    multiproof_parser.add_argument("values", type=str, nargs="*", help="Values to prove")
    multiproof_parser.add_argument(
        "--index",
        dest="indices",
        type=int,
        action="append",
        default=None,
        help="Prove the value at this leaf position (repeatable)",
    )
    multiproof_parser.add_argument("--out", "-o", type=str, default=None, help="Write multiproof JSON to this path")
    multiproof_parser.set_defaults(func=multiproof.multiproof_cmd)

    # --- verify-multiproof command ---
    verify_multi_parser = subparsers.add_parser(
        "verify-multiproof",
        help="Verify a multiproof",
        description="Verify a multiproof; values pair positionally with the proof's indices.",
    )
    verify_multi_parser.add_argument("proof_path", type=str, help="Multiproof JSON")
    verify_multi_parser.add_argument("values", type=str, nargs="+", help="Values being proven")
    verify_multi_parser.add_argument("--root", type=str, required=True, help="Root digest in hex")
    verify_multi_parser.add_argument(
        "--strict",
        action="store_true",
        default=False,
        help="Treat a proof that cannot reach the root as an error",
    )
    verify_multi_parser.add_argument("--json", action="store_true", default=False, help="JSON output")
    verify_multi_parser.set_defaults(func=multiproof.verify_multiproof_cmd)

    # --- dot command ---
    dot_parser = subparsers.add_parser(
        "dot",
        help="Render a tree as Graphviz DOT",
        description="Render an exported tree, optionally highlighting a proof or multiproof.",
    )
    dot_parser.add_argument("tree_path", type=str, help="Exported tree JSON")
    dot_parser.add_argument(
        "--format",
        type=str,
        choices=sorted(render.FORMATTERS),
        default="truncated",
        help="Label format (default: truncated)",
    )
    highlight = dot_parser.add_mutually_exclusive_group()
    highlight.add_argument("--proof", type=str, default=None, help="Proof JSON to highlight")
    highlight.add_argument("--multiproof", type=str, default=None, help="Multiproof JSON to highlight")
    dot_parser.add_argument("--out", "-o", type=str, default=None, help="Write DOT to this path")
    dot_parser.set_defaults(func=render.dot_cmd)

    # --- config command ---
    config_parser = subparsers.add_parser(
        "config",
        help="Manage CLI configuration",
        description="Initialize or display configuration.",
    )
    config_parser.add_argument(
        "--init",
        action="store_true",
        default=False,
        help="Create a template configuration file",
    )
    config_parser.add_argument(
        "--show",
        action="store_true",
        default=False,
        help="Show current configuration",
    )
    config_parser.add_argument(
        "--path",
        type=str,
        default=DEFAULT_CONFIG_NAME,
        help=f"Path for config file (default: {DEFAULT_CONFIG_NAME})",
    )
    config_parser.set_defaults(func=config_cmd)

    return parser


def config_cmd(args: argparse.Namespace) -> int:
    """Handle config command."""
    if args.init:
        config_path = Path(args.path)
        if config_path.exists():
            print(f"Error: Config file already exists: {config_path}", file=sys.stderr)
            return EXIT_RUNTIME_ERROR

        config_path.write_text(get_default_config_template())
        print(f"Created configuration file: {config_path}")
        print("You can also use environment variables (MERKLETREE_* prefix).")
        return EXIT_SUCCESS

    if args.show:
        print(json.dumps(args.runtime_config.to_dict(), indent=2))
        return EXIT_SUCCESS

    print("Usage: merkletree config [--init|--show]")
    print("  --init  Create a template configuration file")
    print("  --show  Show current configuration")
    return EXIT_SUCCESS


def main(argv: Sequence[str] | None = None) -> int:
    """
    Main entry point for the CLI.

    Args:
        argv: Command-line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code (0=success, 1=error, 2=verification failed)
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return EXIT_RUNTIME_ERROR

    try:
        config = load_config(args.config)
    except Exception as e:
        print(f"Error loading configuration: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    log_level = args.log_level or config.log_level
    setup_logging(level=log_level, log_file=config.log_file)

    args.runtime_config = config

    try:
        return args.func(args)
    except KeyboardInterrupt:
        print("\nInterrupted.", file=sys.stderr)
        return EXIT_RUNTIME_ERROR
    except Exception as e:
        if logging.getLogger().isEnabledFor(logging.DEBUG):
            traceback.print_exc()
        else:
            print(f"Error: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR


if __name__ == "__main__":
    sys.exit(main())
