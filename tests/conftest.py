"""
Pytest configuration and shared fixtures for tlog-merkle tests.

This conftest.py:
1. Adds project root to sys.path for imports
2. Provides commonly-used fixtures via pytest's autodiscovery
3. Configures pytest markers and settings
"""

import sys
from pathlib import Path

import pytest

# =============================================================================
# Path Setup - Must happen before any local imports
# =============================================================================

# Get the project root (parent of tests/)
_PROJECT_ROOT = Path(__file__).resolve().parent.parent
_TESTS_ROOT = Path(__file__).resolve().parent

# Add both project root and tests root to sys.path
for _path in [str(_PROJECT_ROOT), str(_TESTS_ROOT)]:
    if _path not in sys.path:
        sys.path.insert(0, _path)

# =============================================================================
# Import fixtures using importlib (more robust for pytest loading)
# =============================================================================

import importlib

_log = importlib.import_module("fixtures.log_fixtures")

make_leaf_inputs = _log.make_leaf_inputs
make_object_hash_leaves = _log.make_object_hash_leaves

from tlog_core.config import set_default_config


# =============================================================================
# Pytest Fixtures (autodiscovered by pytest)
# =============================================================================

@pytest.fixture
def leaf_inputs():
    """Provide 11 distinct leaf inputs (not a power of two, three levels of carry)."""
    return make_leaf_inputs(11)


@pytest.fixture
def abc_leaves():
    """Provide the three-leaf tree ["a", "b", "c"]."""
    return [b"a", b"b", b"c"]


@pytest.fixture(autouse=True)
def _reset_default_config(monkeypatch):
    """Keep TLOG_* settings from the environment out of every test."""
    for name in (
        "TLOG_HASH_ALGORITHM",
        "TLOG_DEBUG",
        "TLOG_LOG_LEVEL",
        "TLOG_LOG_FILE",
        "TLOG_OUTPUT_FORMAT",
        "TLOG_MAX_ENTRIES",
    ):
        monkeypatch.delenv(name, raising=False)
    set_default_config(None)
    yield
    set_default_config(None)


# =============================================================================
# Pytest Configuration
# =============================================================================

def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )
    config.addinivalue_line(
        "markers", "unit: marks tests as unit tests"
    )


# =============================================================================
# Test Helpers (available to all tests via fixtures)
# =============================================================================

@pytest.fixture
def flip_byte():
    """Helper returning a copy of data with one byte inverted."""
    def _flip(data: bytes, index: int = 0) -> bytes:
        tampered = bytearray(data)
        tampered[index] ^= 0xFF
        return bytes(tampered)
    return _flip


@pytest.fixture
def write_json(tmp_path):
    """Helper writing a JSON document under tmp_path and returning its path."""
    import json

    def _write(name: str, data) -> Path:
        path = tmp_path / name
        path.write_text(json.dumps(data), encoding="utf-8")
        return path
    return _write
