"""Unit tests for settings loading."""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from vaultdav.config import Settings, _load_config_file


class TestSettings:
    def test_defaults(self):
        settings = Settings()

        assert settings.base_path == "/obsidian"
        assert ".DS_Store" in settings.hidden_files
        assert settings.credentials.key == "webdav_config"
        assert settings.transport.timeout == 30.0
        assert settings.logging.level == "INFO"

    def test_base_path_trailing_slash_stripped(self):
        assert Settings(base_path="/vault/").base_path == "/vault"

    def test_relative_base_path_rejected(self):
        with pytest.raises(ValidationError):
            Settings(base_path="vault")

    def test_env_overrides(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("VAULTDAV_BASE_PATH", "/notes")
        monkeypatch.setenv("VAULTDAV_TRANSPORT__TIMEOUT", "5")
        monkeypatch.setenv("VAULTDAV_LOGGING__JSON", "true")

        settings = Settings(base_path="/from-file")

        assert settings.base_path == "/notes"
        assert settings.transport.timeout == 5.0
        assert settings.logging.json_output is True


class TestConfigFile:
    def test_yaml_file_from_env(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
        config = tmp_path / "vaultdav.yaml"
        config.write_text("base_path: /vault\nhidden_files: ['.trash']\n")
        monkeypatch.setenv("VAULTDAV_CONFIG_FILE", str(config))

        data = _load_config_file()
        settings = Settings(**data)

        assert settings.base_path == "/vault"
        assert settings.hidden_files == [".trash"]

    def test_empty_yaml(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
        config = tmp_path / "empty.yaml"
        config.write_text("")
        monkeypatch.setenv("VAULTDAV_CONFIG_FILE", str(config))

        assert _load_config_file() == {}
