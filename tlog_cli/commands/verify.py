"""
CLI Verify Commands

Verify proofs offline against saved log responses:
- consistency: two signed tree heads plus a get-sth-consistency body
- inclusion: a signed tree head plus a get-proof-by-hash body

Usage:
    tlog consistency --first sth_a.json --second sth_b.json --proof proof.json [--json] [--debug]
    tlog inclusion --sth sth.json --proof proof.json (--leaf-hash B64 | --leaf-input B64) [--json] [--debug]
"""

from __future__ import annotations

import logging
import sys
from argparse import Namespace
from dataclasses import asdict, dataclass, field
from typing import Any

from tlog_core.crypto.hashing import to_b64
from tlog_core.merkle.verify import verify_consistency, verify_inclusion
from tlog_core.schemas.errors import InvalidRangeException
from tlog_core.schemas.log_api import (
    ConsistencyProofResponse,
    InclusionProofResponse,
    SignedTreeHead,
)

from tlog_cli.commands.common import (
    EXIT_RUNTIME_ERROR,
    EXIT_SUCCESS,
    EXIT_VERIFICATION_FAILED,
    b64_or_none,
    format_range,
    get_hasher,
    print_json,
    step_to_dict,
    wants_json,
)
from tlog_cli.io import InputError, decode_b64_arg, load_model


logger = logging.getLogger(__name__)


@dataclass
class ConsistencySummary:
    """Summary of a consistency check for CLI output."""
    first_size: int = 0
    second_size: int = 0
    first_root: str = ""
    second_root: str = ""
    valid: bool = False
    reconstructed_first: str | None = None
    reconstructed_second: str | None = None
    error: str | None = None
    steps: list[dict[str, Any]] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        d = asdict(self)
        if d["error"] is None:
            del d["error"]
        if not d["steps"]:
            del d["steps"]
        return d


@dataclass
class InclusionSummary:
    """Summary of an inclusion check for CLI output."""
    leaf_index: int = 0
    tree_size: int = 0
    leaf_hash: str = ""
    root: str = ""
    valid: bool = False
    reconstructed_root: str | None = None
    error: str | None = None
    steps: list[dict[str, Any]] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        d = asdict(self)
        if d["error"] is None:
            del d["error"]
        if not d["steps"]:
            del d["steps"]
        return d


def _print_steps_human(steps: list[dict[str, Any]]) -> None:
    print(f"\nsteps ({len(steps)}):")
    for step in steps:
        start, end = step["range"]
        print(f"  [{step['role']:>6}] {format_range(start, end):<18} {step['hash']}")


def print_consistency_human(summary: ConsistencySummary) -> None:
    """Print consistency summary in human-readable format."""
    print(f"first tree size: {summary.first_size}")
    print(f"first root hash: {summary.first_root}")
    print(f"second tree size: {summary.second_size}")
    print(f"second root hash: {summary.second_root}")
    if summary.reconstructed_first is not None:
        print(f"calculated first root: {summary.reconstructed_first}")
        print(f"calculated second root: {summary.reconstructed_second}")
    print(f"valid: {str(summary.valid).lower()}")
    if summary.error:
        print(f"  ✗ {summary.error}")
    if summary.steps:
        _print_steps_human(summary.steps)


def print_inclusion_human(summary: InclusionSummary) -> None:
    """Print inclusion summary in human-readable format."""
    print(f"leaf index: {summary.leaf_index}")
    print(f"tree size: {summary.tree_size}")
    print(f"leaf hash: {summary.leaf_hash}")
    print(f"root hash: {summary.root}")
    if summary.reconstructed_root is not None:
        print(f"calculated root: {summary.reconstructed_root}")
    print(f"valid: {str(summary.valid).lower()}")
    if summary.error:
        print(f"  ✗ {summary.error}")
    if summary.steps:
        _print_steps_human(summary.steps)


def consistency_cmd(args: Namespace) -> int:
    """
    Execute the consistency command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code
    """
    try:
        first = load_model(args.first, SignedTreeHead)
        second = load_model(args.second, SignedTreeHead)
        proof = load_model(args.proof, ConsistencyProofResponse)
    except InputError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    logger.info(
        "Verifying consistency between tree sizes %d and %d (%d proof hashes)",
        first.tree_size, second.tree_size, len(proof.consistency),
    )

    try:
        result = verify_consistency(
            first.tree_size,
            first.sha256_root_hash,
            second.tree_size,
            second.sha256_root_hash,
            proof.consistency,
            hasher=get_hasher(args),
        )
    except InvalidRangeException as e:
        print(f"Error: {e.message}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    summary = ConsistencySummary(
        first_size=first.tree_size,
        second_size=second.tree_size,
        first_root=to_b64(first.sha256_root_hash),
        second_root=to_b64(second.sha256_root_hash),
        valid=result.valid,
        reconstructed_first=b64_or_none(result.reconstructed_first),
        reconstructed_second=b64_or_none(result.reconstructed_second),
        error=result.error.message if result.error else None,
    )
    if args.debug:
        summary.steps = [step_to_dict(step) for step in result.steps]

    if wants_json(args):
        print_json(summary.to_dict())
    else:
        print_consistency_human(summary)

    if result.valid:
        logger.info("Consistency verified")
        return EXIT_SUCCESS

    logger.warning("Consistency verification failed: %s", result.error.code if result.error else "unknown")
    return EXIT_VERIFICATION_FAILED


def inclusion_cmd(args: Namespace) -> int:
    """
    Execute the inclusion command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code
    """
    hasher = get_hasher(args)

    try:
        sth = load_model(args.sth, SignedTreeHead)
        proof = load_model(args.proof, InclusionProofResponse)
        if args.leaf_hash is not None:
            leaf_hash = decode_b64_arg(args.leaf_hash, "leaf-hash")
        else:
            leaf_hash = hasher.hash_leaf(decode_b64_arg(args.leaf_input, "leaf-input"))
    except InputError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    logger.info(
        "Verifying inclusion of leaf %d in tree of size %d",
        proof.leaf_index, sth.tree_size,
    )

    try:
        result = verify_inclusion(
            proof.leaf_index,
            leaf_hash,
            sth.tree_size,
            proof.audit_path,
            sth.sha256_root_hash,
            hasher=hasher,
        )
    except InvalidRangeException as e:
        print(f"Error: {e.message}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    summary = InclusionSummary(
        leaf_index=proof.leaf_index,
        tree_size=sth.tree_size,
        leaf_hash=to_b64(leaf_hash),
        root=to_b64(sth.sha256_root_hash),
        valid=result.valid,
        reconstructed_root=b64_or_none(result.reconstructed_root),
        error=result.error.message if result.error else None,
    )
    if args.debug:
        summary.steps = [step_to_dict(step) for step in result.steps]

    if wants_json(args):
        print_json(summary.to_dict())
    else:
        print_inclusion_human(summary)

    if result.valid:
        logger.info("Inclusion verified")
        return EXIT_SUCCESS

    logger.warning("Inclusion verification failed: %s", result.error.code if result.error else "unknown")
    return EXIT_VERIFICATION_FAILED
