"""
Runtime Configuration

Central configuration for the Merkle core: which digest backs the tree
hasher and whether debug diagnostics are enabled.
"""

from __future__ import annotations

import copy
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

from dotenv import load_dotenv

from tlog_core.schemas.errors import ConfigException

load_dotenv()


@dataclass
class HashConfig:
    """Configuration for the tree hasher."""
    algorithm: str = "sha256"


@dataclass
class RuntimeConfig:
    """
    Complete runtime configuration for the Merkle core.

    Can be loaded from:
    - Environment variables
    - YAML file
    - Programmatic construction
    """
    hash: HashConfig = field(default_factory=HashConfig)
    debug: bool = False
    extra: dict[str, Any] = field(default_factory=dict)

    @staticmethod
    def _get_env_overrides() -> dict[str, Any]:
        """
        Get configuration overrides from environment variables.

        Supported variables:
        - TLOG_HASH_ALGORITHM: hashlib digest name for tree hashing
        - TLOG_DEBUG: Enable debug diagnostics (true/false)
        """
        overrides: dict[str, Any] = {}

        if os.getenv("TLOG_HASH_ALGORITHM"):
            overrides.setdefault("hash", {})["algorithm"] = os.getenv("TLOG_HASH_ALGORITHM")

        if os.getenv("TLOG_DEBUG"):
            overrides["debug"] = os.getenv("TLOG_DEBUG", "false").lower() == "true"

        return overrides

    @classmethod
    def from_env(cls) -> "RuntimeConfig":
        """
        Load configuration purely from environment variables.

        Uses defaults for any values not specified in env vars.
        """
        return cls.from_dict(cls._get_env_overrides())

    @classmethod
    def from_yaml(cls, path: str | Path) -> "RuntimeConfig":
        """Load configuration from a YAML file."""
        import yaml
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        with open(path) as f:
            try:
                data = yaml.safe_load(f)
            except yaml.YAMLError as e:
                raise ConfigException(f"Invalid YAML in {path}: {e}") from e

        return cls.from_dict(data or {})

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "RuntimeConfig":
        """Load configuration from a dictionary (supports partial data)."""
        hash_data = data.get("hash", {})
        if not isinstance(hash_data, dict):
            raise ConfigException(
                f"'hash' section must be a mapping, got {type(hash_data).__name__}"
            )

        try:
            hash_config = HashConfig(**hash_data) if hash_data else HashConfig()
        except TypeError as e:
            raise ConfigException(f"Invalid 'hash' section: {e}") from e

        return cls(
            hash=hash_config,
            debug=bool(data.get("debug", False)),
            extra=data.get("extra", {}),
        )

    def with_env_overrides(self) -> "RuntimeConfig":
        """
        Return a new config with environment variable overrides applied.

        This allows loading from a config file first, then overlaying env vars.
        """
        overrides = self._get_env_overrides()
        if not overrides:
            return self

        new_config = copy.deepcopy(self)

        if "hash" in overrides:
            for key, value in overrides["hash"].items():
                setattr(new_config.hash, key, value)

        if "debug" in overrides:
            new_config.debug = overrides["debug"]

        return new_config

    def to_dict(self) -> dict[str, Any]:
        """Convert configuration to a dictionary."""
        return {
            "hash": {
                "algorithm": self.hash.algorithm,
            },
            "debug": self.debug,
            "extra": self.extra,
        }


# Global default configuration
_default_config: Optional[RuntimeConfig] = None


def get_default_config() -> RuntimeConfig:
    """Get the default runtime configuration."""
    global _default_config
    if _default_config is None:
        _default_config = RuntimeConfig.from_env()
    return _default_config


def set_default_config(config: Optional[RuntimeConfig]) -> None:
    """Set the default runtime configuration (None resets to env defaults)."""
    global _default_config
    _default_config = config
