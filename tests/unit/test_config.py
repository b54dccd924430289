"""
Configuration Unit Tests
Tests for tlog_core/config/runtime.py and tlog_cli/config.py
"""
import json

import pytest

from tlog_cli.config import (
    CLIConfig,
    config_to_dict,
    get_default_config_template,
    load_config,
    load_config_from_file,
)
from tlog_core.config import (
    HashConfig,
    RuntimeConfig,
    get_default_config,
    set_default_config,
)
from tlog_core.schemas.errors import ConfigException


class TestRuntimeConfig:
    """Tests for RuntimeConfig loading."""

    def test_defaults(self):
        config = RuntimeConfig()
        assert config.hash.algorithm == "sha256"
        assert config.debug is False

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("TLOG_HASH_ALGORITHM", "sha512")
        monkeypatch.setenv("TLOG_DEBUG", "true")

        config = RuntimeConfig.from_env()

        assert config.hash.algorithm == "sha512"
        assert config.debug is True

    def test_from_dict_partial(self):
        config = RuntimeConfig.from_dict({"debug": True})
        assert config.debug is True
        assert config.hash == HashConfig()

    def test_from_dict_rejects_bad_hash_section(self):
        with pytest.raises(ConfigException):
            RuntimeConfig.from_dict({"hash": "sha256"})

    def test_from_dict_rejects_unknown_hash_key(self):
        with pytest.raises(ConfigException):
            RuntimeConfig.from_dict({"hash": {"algo": "sha256"}})

    def test_from_yaml(self, tmp_path):
        path = tmp_path / "tlog.yaml"
        path.write_text("hash:\n  algorithm: sha384\ndebug: true\n")

        config = RuntimeConfig.from_yaml(path)

        assert config.hash.algorithm == "sha384"
        assert config.debug is True

    def test_from_yaml_empty_file(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("")
        assert RuntimeConfig.from_yaml(path) == RuntimeConfig()

    def test_from_yaml_invalid(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("hash: [unclosed\n")
        with pytest.raises(ConfigException):
            RuntimeConfig.from_yaml(path)

    def test_from_yaml_missing(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            RuntimeConfig.from_yaml(tmp_path / "missing.yaml")

    def test_env_overrides_do_not_mutate(self, monkeypatch):
        base = RuntimeConfig()
        monkeypatch.setenv("TLOG_HASH_ALGORITHM", "sha512")

        overridden = base.with_env_overrides()

        assert overridden.hash.algorithm == "sha512"
        assert base.hash.algorithm == "sha256"

    def test_no_overrides_returns_self(self):
        config = RuntimeConfig()
        assert config.with_env_overrides() is config

    def test_to_dict_round_trip(self):
        config = RuntimeConfig(hash=HashConfig(algorithm="sha384"), debug=True)
        assert RuntimeConfig.from_dict(config.to_dict()) == config


class TestDefaultConfig:
    """Tests for the process-wide default."""

    def test_set_and_reset(self):
        custom = RuntimeConfig(debug=True)
        set_default_config(custom)
        assert get_default_config() is custom

        set_default_config(None)
        assert get_default_config() is not custom
        assert get_default_config().debug is False


class TestCLIConfig:
    """Tests for CLI config file and environment loading."""

    def test_defaults(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("HOME", str(tmp_path))

        config = load_config()

        assert config.log_level == "INFO"
        assert config.default_output_format == "human"
        assert config.max_entries == 100_000

    def test_template_loads(self, tmp_path):
        path = tmp_path / "tlog.json"
        path.write_text(get_default_config_template())

        config = load_config_from_file(path)

        assert config.runtime.hash.algorithm == "sha256"
        assert config.log_file is None

    def test_file_values(self, tmp_path):
        path = tmp_path / "custom.json"
        path.write_text(json.dumps({
            "log_level": "DEBUG",
            "default_output_format": "json",
            "max_entries": 10,
            "hash": {"algorithm": "sha512"},
        }))

        config = load_config(path)

        assert config.log_level == "DEBUG"
        assert config.default_output_format == "json"
        assert config.max_entries == 10
        assert config.runtime.hash.algorithm == "sha512"

    def test_default_path_discovered(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        (tmp_path / "tlog.json").write_text(json.dumps({"log_level": "WARNING"}))

        assert load_config().log_level == "WARNING"

    def test_env_overrides_file(self, tmp_path, monkeypatch):
        path = tmp_path / "custom.json"
        path.write_text(json.dumps({"log_level": "DEBUG", "max_entries": 10}))
        monkeypatch.setenv("TLOG_LOG_LEVEL", "ERROR")
        monkeypatch.setenv("TLOG_MAX_ENTRIES", "25")
        monkeypatch.setenv("TLOG_HASH_ALGORITHM", "sha384")

        config = load_config(path)

        assert config.log_level == "ERROR"
        assert config.max_entries == 25
        assert config.runtime.hash.algorithm == "sha384"

    def test_bad_max_entries(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("TLOG_MAX_ENTRIES", "lots")
        with pytest.raises(ConfigException, match="integer"):
            load_config()

    def test_bad_output_format(self, tmp_path):
        path = tmp_path / "custom.json"
        path.write_text(json.dumps({"default_output_format": "xml"}))
        with pytest.raises(ConfigException, match="default_output_format"):
            load_config(path)

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "custom.json"
        path.write_text("{not json")
        with pytest.raises(ConfigException):
            load_config_from_file(path)

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "nope.json")

    def test_config_to_dict(self):
        data = config_to_dict(CLIConfig())
        assert data["hash"] == {"algorithm": "sha256"}
        assert data["default_output_format"] == "human"
        assert data["max_entries"] == 100_000
