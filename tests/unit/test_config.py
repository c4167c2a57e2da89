"""Tests for num configuration loading."""

from __future__ import annotations

from pathlib import Path

import pytest

from num.core.config import DEFAULT_DEFINITIONS_FILE, NumConfig, load_config
from num.core.errors import ConfigError
from num.core.expression_lang.evaluator import DEFAULT_MAX_CALL_DEPTH


class TestNumConfig:
    def test_defaults(self) -> None:
        config = NumConfig()
        assert config.definitions_file == DEFAULT_DEFINITIONS_FILE
        assert config.search_path == []
        assert config.load_definitions is True
        assert config.max_call_depth == DEFAULT_MAX_CALL_DEPTH
        assert config.log_level == "WARNING"

    def test_log_level_normalized(self) -> None:
        assert NumConfig(log_level="debug").log_level == "DEBUG"

    def test_unknown_log_level(self) -> None:
        with pytest.raises(ValueError):
            NumConfig(log_level="loud")

    def test_call_depth_must_be_positive(self) -> None:
        with pytest.raises(ValueError):
            NumConfig(max_call_depth=0)

    def test_call_depth_upper_bound(self) -> None:
        assert NumConfig(max_call_depth=1_000_000).max_call_depth == 1_000_000
        with pytest.raises(ValueError):
            NumConfig(max_call_depth=1_000_001)


class TestLoadConfig:
    def test_missing_file_gives_defaults(self, tmp_path: Path) -> None:
        config = load_config(tmp_path / "num.toml", environ={})
        assert config == NumConfig()

    def test_reads_num_table(self, tmp_path: Path) -> None:
        path = tmp_path / "num.toml"
        path.write_text(
            "[num]\n"
            'definitions_file = "mine.ini"\n'
            'search_path = ["lib", "/opt/num"]\n'
            "load_definitions = false\n"
            "max_call_depth = 50\n"
            'log_level = "info"\n'
        )
        config = load_config(path, environ={})
        assert config.definitions_file == "mine.ini"
        assert config.search_path == [Path("lib"), Path("/opt/num")]
        assert config.load_definitions is False
        assert config.max_call_depth == 50
        assert config.log_level == "INFO"

    def test_other_tables_ignored(self, tmp_path: Path) -> None:
        path = tmp_path / "num.toml"
        path.write_text("[other]\nmax_call_depth = 3\n")
        assert load_config(path, environ={}).max_call_depth == DEFAULT_MAX_CALL_DEPTH

    def test_environment_overrides_file(self, tmp_path: Path) -> None:
        path = tmp_path / "num.toml"
        path.write_text("[num]\nmax_call_depth = 50\n")
        env = {
            "NUM_MAX_CALL_DEPTH": "20",
            "NUM_DEFINITIONS_FILE": "env.ini",
            "NUM_LOG_LEVEL": "DEBUG",
        }
        config = load_config(path, environ=env)
        assert config.max_call_depth == 20
        assert config.definitions_file == "env.ini"
        assert config.log_level == "DEBUG"

    def test_blank_environment_values_ignored(self, tmp_path: Path) -> None:
        config = load_config(tmp_path / "num.toml", environ={"NUM_MAX_CALL_DEPTH": "  "})
        assert config.max_call_depth == DEFAULT_MAX_CALL_DEPTH

    def test_defaults_to_cwd_and_os_environ(self, isolated_env: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        (isolated_env / "num.toml").write_text("[num]\nmax_call_depth = 7\n")
        monkeypatch.setenv("NUM_LOG_LEVEL", "error")
        config = load_config()
        assert config.max_call_depth == 7
        assert config.log_level == "ERROR"

    def test_malformed_toml(self, tmp_path: Path) -> None:
        path = tmp_path / "num.toml"
        path.write_text("[num\n")
        with pytest.raises(ConfigError, match="Invalid"):
            load_config(path, environ={})

    def test_non_numeric_depth(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError, match="max_call_depth"):
            load_config(tmp_path / "num.toml", environ={"NUM_MAX_CALL_DEPTH": "deep"})

    def test_unknown_level_from_environment(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError, match="log level"):
            load_config(tmp_path / "num.toml", environ={"NUM_LOG_LEVEL": "loud"})
