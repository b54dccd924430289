"""
tlog CLI Main Entry Point

Parses command-line arguments and dispatches to subcommands.

Usage:
    python -m tlog_cli consistency --first sth_a.json --second sth_b.json --proof proof.json [--json] [--debug]
    python -m tlog_cli inclusion --sth sth.json --proof proof.json (--leaf-hash B64 | --leaf-input B64)
    python -m tlog_cli tree entries.json [--sth sth.json] [--check-leaves]
    python -m tlog_cli path inclusion <leaf_index> <tree_size>
    python -m tlog_cli path consistency <first_size> <second_size>
    python -m tlog_cli config --init

Environment Variables:
    TLOG_HASH_ALGORITHM     hashlib digest used for tree hashing (default: sha256)
    TLOG_DEBUG              Enable debug diagnostics (default: false)
    TLOG_LOG_LEVEL          Log level (default: INFO)
    TLOG_LOG_FILE           Also write logs to this file
    TLOG_OUTPUT_FORMAT      Default output format: human, json
    TLOG_MAX_ENTRIES        Largest entry list the tree command will hash
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
import traceback
from pathlib import Path
from typing import Sequence

from tlog_core.schemas.errors import TlogException

from tlog_cli import __version__
from tlog_cli.commands import tree, verify
from tlog_cli.commands.common import (
    EXIT_RUNTIME_ERROR,
    EXIT_SUCCESS,
    get_config,
)
from tlog_cli.config import config_to_dict, get_default_config_template, load_config


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


def _add_output_flags(parser: argparse.ArgumentParser, debug_help: str) -> None:
    parser.add_argument(
        "--json",
        action="store_true",
        default=False,
        help="Output machine-readable JSON",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        default=False,
        help=debug_help,
    )


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser with all subcommands."""
    parser = argparse.ArgumentParser(
        prog="tlog",
        description="Verify Merkle tree proofs from an RFC 6962 transparency log offline.",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}"
    )
    parser.add_argument(
        "--config", "-c",
        type=Path,
        default=None,
        help="Path to configuration file (default: ./tlog.json or ~/.config/tlog/config.json)",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Log level (overrides config)",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # --- consistency command ---
    consistency_parser = subparsers.add_parser(
        "consistency",
        help="Verify a consistency proof between two tree heads",
        description="Check that the second tree head extends the first using a get-sth-consistency response.",
    )
    consistency_parser.add_argument(
        "--first",
        type=str,
        required=True,
        help="JSON file with the earlier signed tree head",
    )
    consistency_parser.add_argument(
        "--second",
        type=str,
        required=True,
        help="JSON file with the later signed tree head",
    )
    consistency_parser.add_argument(
        "--proof",
        type=str,
        required=True,
        help="JSON file with the consistency proof ({\"consistency\": [...]})",
    )
    _add_output_flags(consistency_parser, "Include each proof hash with its range and role")
    consistency_parser.set_defaults(func=verify.consistency_cmd)

    # --- inclusion command ---
    inclusion_parser = subparsers.add_parser(
        "inclusion",
        help="Verify an inclusion proof for one leaf",
        description="Check a get-proof-by-hash response against a signed tree head.",
    )
    inclusion_parser.add_argument(
        "--sth",
        type=str,
        required=True,
        help="JSON file with the signed tree head",
    )
    inclusion_parser.add_argument(
        "--proof",
        type=str,
        required=True,
        help="JSON file with the inclusion proof ({\"leaf_index\": N, \"audit_path\": [...]})",
    )
    leaf_group = inclusion_parser.add_mutually_exclusive_group(required=True)
    leaf_group.add_argument(
        "--leaf-hash",
        type=str,
        default=None,
        help="Base64 Merkle leaf hash",
    )
    leaf_group.add_argument(
        "--leaf-input",
        type=str,
        default=None,
        help="Base64 leaf input (hashed with the leaf prefix)",
    )
    _add_output_flags(inclusion_parser, "Include each audit path hash with its range and side")
    inclusion_parser.set_defaults(func=verify.inclusion_cmd)

    # --- tree command ---
    tree_parser = subparsers.add_parser(
        "tree",
        help="Recompute a root hash from log entries",
        description="Hash a saved get-entries response and optionally compare with a tree head.",
    )
    tree_parser.add_argument(
        "entries",
        type=str,
        help="JSON file with log entries ({\"entries\": [{\"leaf_input\": ...}]})",
    )
    tree_parser.add_argument(
        "--sth",
        type=str,
        default=None,
        help="JSON file with a signed tree head to compare against",
    )
    tree_parser.add_argument(
        "--check-leaves",
        action="store_true",
        default=False,
        help="Decode every entry as a timestamped object-hash leaf",
    )
    _add_output_flags(tree_parser, "Include every subtree hash")
    tree_parser.set_defaults(func=tree.tree_cmd)

    # --- path command ---
    path_parser = subparsers.add_parser(
        "path",
        help="Show the subtree ranges of a proof",
        description="Print which subtrees an inclusion or consistency proof covers.",
    )
    path_parser.add_argument(
        "kind",
        choices=["inclusion", "consistency"],
        help="Proof kind",
    )
    path_parser.add_argument(
        "m",
        type=int,
        help="Leaf index (inclusion) or first tree size (consistency)",
    )
    path_parser.add_argument(
        "n",
        type=int,
        help="Tree size (inclusion) or second tree size (consistency)",
    )
    path_parser.add_argument(
        "--json",
        action="store_true",
        default=False,
        help="Output machine-readable JSON",
    )
    path_parser.set_defaults(func=tree.path_cmd)

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
        default="tlog.json",
        help="Path for config file (default: tlog.json)",
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
        print("\nEdit this file to configure your settings.")
        print("You can also use environment variables (TLOG_* prefix).")
        return EXIT_SUCCESS

    if args.show:
        print(json.dumps(config_to_dict(get_config(args)), indent=2))
        return EXIT_SUCCESS

    # Default: show help
    print("Usage: tlog config [--init|--show]")
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

    # Load configuration
    try:
        config = load_config(args.config)
    except (TlogException, FileNotFoundError) as e:
        print(f"Error loading configuration: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    # Setup logging
    log_level = args.log_level or config.log_level
    setup_logging(level=log_level, log_file=config.log_file)

    # Debug from config applies to commands that take --debug
    if config.runtime.debug and hasattr(args, "debug"):
        args.debug = True

    # Attach config to args for commands to use
    args.cli_config = config

    try:
        return args.func(args)
    except KeyboardInterrupt:
        print("\nInterrupted.", file=sys.stderr)
        return EXIT_RUNTIME_ERROR
    except TlogException as e:
        if getattr(args, "debug", False):
            traceback.print_exc()
        print(f"Error [{e.code}]: {e.message}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR
    except Exception as e:
        if getattr(args, "debug", False):
            traceback.print_exc()
        else:
            print(f"Error: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR


if __name__ == "__main__":
    sys.exit(main())
