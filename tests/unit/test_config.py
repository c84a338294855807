"""
Unit tests for configuration and the command line.
"""

from pathlib import Path

import pytest

from rofis.config import ServerConfig
from rofis.__main__ import config_from_args, main


class TestServerConfig:
    """Tests for ServerConfig."""

    def test_defaults(self):
        config = ServerConfig()

        assert config.host == "127.0.0.1"
        assert config.port == 8080
        assert config.root_dir == "."
        assert config.index_file == "index.html"
        assert config.watch_interval == 0.1
        assert config.max_request_size == 64 * 1024
        assert config.timeout is None

    def test_valid_config_passes(self, tmp_path: Path):
        ServerConfig(root_dir=str(tmp_path)).validate()

    @pytest.mark.parametrize("overrides", [
        {"port": -1},
        {"port": 65536},
        {"backlog": 0},
        {"buffer_size": 100},
        {"timeout": 0},
        {"max_request_size": 10},
        {"watch_interval": 0},
        {"index_file": ""},
        {"index_file": "a/index.html"},
        {"log_level": "LOUD"},
    ])
    def test_invalid_values(self, tmp_path: Path, overrides):
        config = ServerConfig(root_dir=str(tmp_path), **overrides)

        with pytest.raises(ValueError):
            config.validate()

    def test_timeout_none_allowed(self, tmp_path: Path):
        ServerConfig(root_dir=str(tmp_path), timeout=None).validate()

    def test_missing_root(self, tmp_path: Path):
        with pytest.raises(ValueError, match="Root directory"):
            ServerConfig(root_dir=str(tmp_path / "missing")).validate()

    def test_root_is_a_file(self, tmp_path: Path):
        file_path = tmp_path / "f"
        file_path.write_text("x")

        with pytest.raises(ValueError):
            ServerConfig(root_dir=str(file_path)).validate()

    def test_from_env(self, monkeypatch, tmp_path: Path):
        monkeypatch.setenv("ROFIS_HOST", "0.0.0.0")
        monkeypatch.setenv("ROFIS_PORT", "3000")
        monkeypatch.setenv("ROFIS_ROOT", str(tmp_path))
        monkeypatch.setenv("ROFIS_WATCH_INTERVAL", "0.5")
        monkeypatch.setenv("ROFIS_LOG_LEVEL", "DEBUG")

        config = ServerConfig.from_env()

        assert config.host == "0.0.0.0"
        assert config.port == 3000
        assert config.root_dir == str(tmp_path)
        assert config.watch_interval == 0.5
        assert config.log_level == "DEBUG"

    def test_from_env_defaults(self, monkeypatch):
        for name in ("ROFIS_HOST", "ROFIS_PORT", "ROFIS_ROOT", "ROFIS_WATCH_INTERVAL", "ROFIS_LOG_LEVEL"):
            monkeypatch.delenv(name, raising=False)

        assert ServerConfig.from_env() == ServerConfig()


class TestCommandLine:
    """Tests for argument parsing in rofis.__main__."""

    @pytest.fixture(autouse=True)
    def clean_env(self, monkeypatch):
        for name in ("ROFIS_HOST", "ROFIS_PORT", "ROFIS_ROOT", "ROFIS_WATCH_INTERVAL", "ROFIS_LOG_LEVEL"):
            monkeypatch.delenv(name, raising=False)

    def test_no_arguments(self):
        assert config_from_args([]) == ServerConfig()

    def test_flags(self, tmp_path: Path):
        config = config_from_args([
            "--host", "0.0.0.0",
            "-p", "3000",
            "-r", str(tmp_path),
            "--watch-interval", "0.25",
            "--timeout", "2.5",
            "-l", "debug",
        ])

        assert config.host == "0.0.0.0"
        assert config.port == 3000
        assert config.root_dir == str(tmp_path)
        assert config.watch_interval == 0.25
        assert config.timeout == 2.5
        assert config.log_level == "DEBUG"

    def test_flags_override_environment(self, monkeypatch):
        monkeypatch.setenv("ROFIS_PORT", "4000")

        assert config_from_args([]).port == 4000
        assert config_from_args(["--port", "5000"]).port == 5000

    def test_unknown_log_level_rejected(self):
        with pytest.raises(SystemExit):
            config_from_args(["--log-level", "LOUD"])

    def test_version(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            config_from_args(["--version"])

        assert exc_info.value.code == 0
        assert "rofis" in capsys.readouterr().out

    def test_main_reports_bad_root(self, tmp_path: Path, capsys):
        code = main(["--root", str(tmp_path / "missing"), "--port", "0"])

        assert code == 1
        assert "Error:" in capsys.readouterr().err
