"""
Schemas

Purpose: Export error models/exceptions and the typed log API payloads.
"""

# Error models and exceptions
from .errors import (
    ConfigException,
    ConsistencyCheckFailedException,
    EncodingException,
    ErrorCodes,
    HashPrimitiveUnavailableException,
    InclusionCheckFailedException,
    InvalidRangeException,
    MalformedProofException,
    TlogError,
    TlogException,
)

# Log API payloads
from .log_api import (
    ConsistencyProofResponse,
    EntriesResponse,
    InclusionProofResponse,
    LeafEntry,
    SignedTreeHead,
)

__all__ = [
    # Errors
    "ErrorCodes",
    "TlogError",
    "TlogException",
    "MalformedProofException",
    "ConsistencyCheckFailedException",
    "InclusionCheckFailedException",
    "InvalidRangeException",
    "HashPrimitiveUnavailableException",
    "EncodingException",
    "ConfigException",
    # Log API
    "SignedTreeHead",
    "ConsistencyProofResponse",
    "InclusionProofResponse",
    "LeafEntry",
    "EntriesResponse",
]
