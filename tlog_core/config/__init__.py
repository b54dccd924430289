"""
Runtime Configuration Module

Provides configuration loading and management for the Merkle core.
"""

from .runtime import (
    HashConfig,
    RuntimeConfig,
    get_default_config,
    set_default_config,
)

__all__ = [
    "HashConfig",
    "RuntimeConfig",
    "get_default_config",
    "set_default_config",
]
