"""
Helpers shared by CLI commands.
"""

from __future__ import annotations

import json
from argparse import Namespace
from typing import Any

from tlog_core.crypto.hashing import TreeHasher, to_b64
from tlog_core.merkle.results import ProofStep

from tlog_cli.config import CLIConfig


# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1
EXIT_VERIFICATION_FAILED = 2


def get_config(args: Namespace) -> CLIConfig:
    """Config attached by main(), or defaults when a command runs standalone."""
    return getattr(args, "cli_config", None) or CLIConfig()


def get_hasher(args: Namespace) -> TreeHasher:
    """Tree hasher for the configured algorithm."""
    return TreeHasher(get_config(args).runtime.hash.algorithm)


def wants_json(args: Namespace) -> bool:
    """True if --json was given or JSON is the configured default."""
    return bool(getattr(args, "json", False)) or get_config(args).default_output_format == "json"


def b64_or_none(value: bytes | None) -> str | None:
    return to_b64(value) if value is not None else None


def step_to_dict(step: ProofStep) -> dict[str, Any]:
    """JSON-friendly view of a proof step."""
    return {
        "range": [step.range.start, step.range.end],
        "hash": to_b64(step.hash),
        "role": step.role,
    }


def format_range(start: int, end: int) -> str:
    """Describe a range the way tree diagrams label it."""
    if end - start == 1:
        return f"leaf {start}"
    return f"entries {start} - {end - 1}"


def print_json(data: dict[str, Any]) -> None:
    print(json.dumps(data, indent=2))
