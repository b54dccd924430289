"""
CLI Input Loading

Reads saved log API responses (JSON files) into typed payload models.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import TypeVar

from pydantic import BaseModel, ValidationError

from tlog_core.crypto.hashing import from_b64
from tlog_core.schemas.errors import EncodingException


ModelT = TypeVar("ModelT", bound=BaseModel)


class InputError(Exception):
    """Error reading or decoding a CLI input file."""
    pass


def load_model(path: str | Path, model_cls: type[ModelT]) -> ModelT:
    """
    Load a JSON file and validate it as model_cls.

    Raises:
        InputError: If the file is missing, not JSON, or fails validation
    """
    path = Path(path)
    if not path.exists():
        raise InputError(f"File not found: {path}")

    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise InputError(f"Invalid JSON in {path}: {e}") from e

    try:
        return model_cls.model_validate(data)
    except ValidationError as e:
        raise InputError(
            f"{path} is not a valid {model_cls.__name__}: "
            f"{e.error_count()} error(s), first: {e.errors()[0]['msg']}"
        ) from e


def decode_b64_arg(value: str, name: str) -> bytes:
    """
    Decode a base64 command-line argument.

    Raises:
        InputError: If the value is not valid base64
    """
    try:
        return from_b64(value)
    except EncodingException as e:
        raise InputError(f"--{name}: {e.message}") from e
