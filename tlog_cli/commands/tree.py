"""
CLI Tree Commands

- tree: recompute a root hash from saved get-entries output and
  optionally compare it with a signed tree head
- path: print the subtree ranges of an inclusion or consistency proof

Usage:
    tlog tree entries.json [--sth sth.json] [--check-leaves] [--json] [--debug]
    tlog path inclusion <leaf_index> <tree_size> [--json]
    tlog path consistency <first_size> <second_size> [--json]
"""

from __future__ import annotations

import logging
import sys
from argparse import Namespace
from dataclasses import asdict, dataclass, field
from typing import Any

from tlog_core.crypto.hashing import to_b64
from tlog_core.merkle.leaf import ObjectHashLeaf
from tlog_core.merkle.paths import (
    effective_consistency_path,
    inclusion_path,
    tree_height,
)
from tlog_core.merkle.ranges import Range
from tlog_core.merkle.tree import build_tree, tree_root
from tlog_core.schemas.errors import EncodingException, InvalidRangeException
from tlog_core.schemas.log_api import EntriesResponse, SignedTreeHead

from tlog_cli.commands.common import (
    EXIT_RUNTIME_ERROR,
    EXIT_SUCCESS,
    EXIT_VERIFICATION_FAILED,
    format_range,
    get_config,
    get_hasher,
    print_json,
    wants_json,
)
from tlog_cli.io import InputError, load_model


logger = logging.getLogger(__name__)


@dataclass
class TreeSummary:
    """Summary of a recomputed tree for CLI output."""
    tree_size: int = 0
    height: int = 0
    root: str = ""
    expected_root: str | None = None
    matches: bool | None = None
    nodes: list[dict[str, Any]] = field(default_factory=list)
    leaves: list[dict[str, Any]] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        d = asdict(self)
        for key in ("expected_root", "matches"):
            if d[key] is None:
                del d[key]
        for key in ("nodes", "leaves"):
            if not d[key]:
                del d[key]
        return d


def print_tree_human(summary: TreeSummary) -> None:
    """Print tree summary in human-readable format."""
    print(f"tree size: {summary.tree_size}")
    print(f"tree height: {summary.height}")
    print(f"calculated root hash: {summary.root}")
    if summary.expected_root is not None:
        print(f"received root hash: {summary.expected_root}")
        print(f"matches: {str(summary.matches).lower()}")

    if summary.leaves:
        print(f"\nleaves ({len(summary.leaves)}):")
        for leaf in summary.leaves:
            print(f"  #{leaf['index']}: timestamp={leaf['timestamp']} object_hash={leaf['object_hash']}")

    if summary.nodes:
        print(f"\nnodes ({len(summary.nodes)}):")
        for node in summary.nodes:
            start, end = node["range"]
            print(f"  {format_range(start, end):<18} {node['hash']}")


def tree_cmd(args: Namespace) -> int:
    """
    Execute the tree command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code
    """
    config = get_config(args)
    hasher = get_hasher(args)

    try:
        entries = load_model(args.entries, EntriesResponse)
        sth = load_model(args.sth, SignedTreeHead) if args.sth else None
    except InputError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    leaf_inputs = entries.leaf_inputs
    if len(leaf_inputs) > config.max_entries:
        print(
            f"Error: {len(leaf_inputs)} entries exceeds max_entries={config.max_entries}",
            file=sys.stderr,
        )
        return EXIT_RUNTIME_ERROR

    if sth is not None:
        if sth.tree_size > len(leaf_inputs):
            print(
                f"Error: tree head covers {sth.tree_size} entries but only "
                f"{len(leaf_inputs)} were supplied",
                file=sys.stderr,
            )
            return EXIT_RUNTIME_ERROR
        leaf_inputs = leaf_inputs[:sth.tree_size]

    summary = TreeSummary(tree_size=len(leaf_inputs), height=tree_height(len(leaf_inputs)))

    if args.check_leaves:
        for index, leaf_input in enumerate(leaf_inputs):
            try:
                leaf = ObjectHashLeaf.from_bytes(leaf_input)
            except EncodingException as e:
                print(f"Error: entry #{index}: {e.message}", file=sys.stderr)
                return EXIT_RUNTIME_ERROR
            summary.leaves.append({
                "index": index,
                "timestamp": leaf.timestamp,
                "object_hash": to_b64(leaf.object_hash),
            })

    root = tree_root(leaf_inputs, hasher=hasher)
    summary.root = to_b64(root)

    if args.debug and leaf_inputs:
        tree = build_tree(leaf_inputs, hasher=hasher)
        if tree[Range(0, len(leaf_inputs))] != root:
            logger.error("Stack root and tree root disagree for %d leaves", len(leaf_inputs))
            return EXIT_RUNTIME_ERROR
        summary.nodes = [
            {"range": [r.start, r.end], "hash": to_b64(h)}
            for r, h in sorted(tree.items(), key=lambda item: (item[0].size, item[0].start))
        ]

    if sth is not None:
        summary.expected_root = to_b64(sth.sha256_root_hash)
        summary.matches = root == sth.sha256_root_hash

    if wants_json(args):
        print_json(summary.to_dict())
    else:
        print_tree_human(summary)

    if summary.matches is False:
        logger.warning(
            "Received root hash %s, calculated root hash %s",
            summary.expected_root, summary.root,
        )
        return EXIT_VERIFICATION_FAILED
    return EXIT_SUCCESS


def path_cmd(args: Namespace) -> int:
    """
    Execute the path command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code
    """
    try:
        if args.kind == "inclusion":
            ranges = inclusion_path(args.m, 0, args.n)
        else:
            if args.m > args.n:
                raise InvalidRangeException(
                    f"First size {args.m} exceeds second size {args.n}"
                )
            ranges = [] if args.m == args.n else effective_consistency_path(args.m, args.n)
    except InvalidRangeException as e:
        print(f"Error: {e.message}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    if wants_json(args):
        print_json({
            "kind": args.kind,
            "m": args.m,
            "n": args.n,
            "ranges": [[r.start, r.end] for r in ranges],
        })
    else:
        print(f"{args.kind} path ({args.m}, {args.n}): {len(ranges)} range(s)")
        for r in ranges:
            print(f"  {str(r):<12} {format_range(r.start, r.end)}")

    return EXIT_SUCCESS
