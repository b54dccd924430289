"""
CLI Configuration

Configuration management for the tlog CLI.
Supports environment variables and configuration files.
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from pathlib import Path

from tlog_core.config.runtime import RuntimeConfig
from tlog_core.schemas.errors import ConfigException


# Environment variable prefix
ENV_PREFIX = "TLOG_"

OUTPUT_FORMATS = ("human", "json")


@dataclass
class CLIConfig:
    """Main CLI configuration."""

    # Logging
    log_level: str = "INFO"
    log_file: str | None = None

    # Output
    default_output_format: str = "human"  # "human" or "json"

    # Largest entry list the tree command will hash
    max_entries: int = 100_000

    # Core settings (hash algorithm, debug)
    runtime: RuntimeConfig = field(default_factory=RuntimeConfig)


def load_config_from_env() -> CLIConfig:
    """Load configuration from environment variables."""
    config = CLIConfig(runtime=RuntimeConfig.from_env())

    config.log_level = os.getenv(f"{ENV_PREFIX}LOG_LEVEL", "INFO")
    config.log_file = os.getenv(f"{ENV_PREFIX}LOG_FILE")

    if os.getenv(f"{ENV_PREFIX}OUTPUT_FORMAT"):
        config.default_output_format = os.getenv(f"{ENV_PREFIX}OUTPUT_FORMAT", "human")
    if os.getenv(f"{ENV_PREFIX}MAX_ENTRIES"):
        config.max_entries = _parse_int(os.getenv(f"{ENV_PREFIX}MAX_ENTRIES", ""), "MAX_ENTRIES")

    return config


def load_config_from_file(path: Path) -> CLIConfig:
    """Load configuration from a JSON file."""
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    with open(path, "r") as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigException(f"Invalid JSON in {path}: {e}") from e

    config = CLIConfig()

    config.log_level = data.get("log_level", config.log_level)
    config.log_file = data.get("log_file", config.log_file)
    config.default_output_format = data.get("default_output_format", config.default_output_format)
    config.max_entries = data.get("max_entries", config.max_entries)
    config.runtime = RuntimeConfig.from_dict(data)

    return config


def _parse_int(raw: str, name: str) -> int:
    try:
        return int(raw)
    except ValueError as e:
        raise ConfigException(f"{ENV_PREFIX}{name} must be an integer, got {raw!r}") from e


def load_config(config_path: Path | None = None) -> CLIConfig:
    """
    Load configuration from file and/or environment.

    Environment variables override file settings.

    Args:
        config_path: Optional path to config file

    Returns:
        Merged configuration
    """
    config = CLIConfig()

    if config_path is not None:
        config = load_config_from_file(config_path)
    else:
        default_paths = [
            Path.cwd() / "tlog.json",
            Path.cwd() / ".tlog.json",
            Path.home() / ".config" / "tlog" / "config.json",
        ]
        for default_path in default_paths:
            if default_path.exists():
                config = load_config_from_file(default_path)
                break

    # Environment takes precedence
    env_config = load_config_from_env()

    if os.getenv(f"{ENV_PREFIX}LOG_LEVEL"):
        config.log_level = env_config.log_level
    if os.getenv(f"{ENV_PREFIX}LOG_FILE"):
        config.log_file = env_config.log_file
    if os.getenv(f"{ENV_PREFIX}OUTPUT_FORMAT"):
        config.default_output_format = env_config.default_output_format
    if os.getenv(f"{ENV_PREFIX}MAX_ENTRIES"):
        config.max_entries = env_config.max_entries

    config.runtime = config.runtime.with_env_overrides()

    if config.default_output_format not in OUTPUT_FORMATS:
        raise ConfigException(
            f"default_output_format must be one of {OUTPUT_FORMATS}, "
            f"got {config.default_output_format!r}"
        )

    return config


def config_to_dict(config: CLIConfig) -> dict:
    """Flatten a CLIConfig into the JSON file layout."""
    data = config.runtime.to_dict()
    data.update({
        "log_level": config.log_level,
        "log_file": config.log_file,
        "default_output_format": config.default_output_format,
        "max_entries": config.max_entries,
    })
    return data


def get_default_config_template() -> str:
    """Get a template configuration file."""
    return """{
  "log_level": "INFO",
  "log_file": null,
  "default_output_format": "human",
  "max_entries": 100000,
  "hash": {
    "algorithm": "sha256"
  },
  "debug": false
}
"""
