"""vaultdav configuration management.

Configuration sources (in priority order):
1. Environment variables (VAULTDAV_ prefix)
2. Config file (vaultdav.yaml)
3. Defaults
"""

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path
from typing import Literal

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource, SettingsConfigDict

DEFAULT_BASE_PATH = "/obsidian"
DEFAULT_HIDDEN_FILES = (".DS_Store", "Thumbs.db", "desktop.ini")


class CredentialStoreConfig(BaseModel):
    """Where the credential record is persisted."""

    path: str = "~/.config/vaultdav/store.json"
    key: str = "webdav_config"

    @property
    def resolved_path(self) -> Path:
        return Path(self.path).expanduser()


class TransportConfig(BaseModel):
    """HTTP transport configuration for the WebDAV client."""

    timeout: float = 30.0
    verify_ssl: bool = True
    stream_chunk_size: int = 64 * 1024


class LoggingConfig(BaseModel):
    """structlog configuration."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    json_output: bool = Field(default=False, alias="json")

    model_config = ConfigDict(populate_by_name=True)


class Settings(BaseSettings):
    """vaultdav settings."""

    model_config = SettingsConfigDict(
        env_prefix="VAULTDAV_",
        env_nested_delimiter="__",
        case_sensitive=False,
    )

    # Sandbox root; every path handed to the capability lives below it.
    base_path: str = DEFAULT_BASE_PATH
    hidden_files: list[str] = Field(default_factory=lambda: list(DEFAULT_HIDDEN_FILES))

    credentials: CredentialStoreConfig = Field(default_factory=CredentialStoreConfig)
    transport: TransportConfig = Field(default_factory=TransportConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @field_validator("base_path")
    @classmethod
    def _check_base_path(cls, value: str) -> str:
        value = value.strip()
        if not value.startswith("/"):
            raise ValueError("base_path must be absolute")
        return value.rstrip("/") or "/"

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        # Environment wins over values read from the YAML file.
        return env_settings, init_settings, dotenv_settings, file_secret_settings


def _load_config_file() -> dict:
    """Load configuration from YAML file if exists.

    Looks for config file in order:
    1. VAULTDAV_CONFIG_FILE environment variable
    2. ./vaultdav.yaml
    3. ~/.config/vaultdav/config.yaml
    """
    config_paths = [
        os.environ.get("VAULTDAV_CONFIG_FILE"),
        Path("vaultdav.yaml"),
        Path("~/.config/vaultdav/config.yaml").expanduser(),
    ]

    for path in config_paths:
        if path is None:
            continue
        path = Path(path)
        if path.exists():
            with open(path) as f:
                return yaml.safe_load(f) or {}

    return {}


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance.

    Environment variables override values from the YAML file.
    """
    file_config = _load_config_file()
    return Settings(**file_config)
