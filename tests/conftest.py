"""Test configuration and fixtures."""

from __future__ import annotations

import pytest

from vaultdav.config import Settings
from vaultdav.managers.session import SessionManager
from vaultdav.stores import CredentialStore, MemoryStore
from tests.fakes import CapabilityFactory, FakeCapability

SERVER_URL = "https://example.com/dav"
BASE_PATH = "/obsidian"


@pytest.fixture
def test_settings() -> Settings:
    """Settings that never touch the user's home directory."""
    return Settings(base_path=BASE_PATH)


@pytest.fixture
def memory_store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture
def credential_store(memory_store: MemoryStore) -> CredentialStore:
    return CredentialStore(memory_store, key="webdav_config")


@pytest.fixture
def capability() -> FakeCapability:
    return FakeCapability(
        files={
            "/obsidian/index.md": "# Index",
            "/obsidian/.DS_Store": "",
            "/obsidian/notes/a.md": "alpha",
            "/obsidian/notes/b.md": "beta",
        },
        dirs=["/obsidian/notes", "/obsidian/daily"],
    )


@pytest.fixture
def factory(capability: FakeCapability) -> CapabilityFactory:
    return CapabilityFactory({SERVER_URL: capability})


@pytest.fixture
def session(
    credential_store: CredentialStore,
    test_settings: Settings,
    factory: CapabilityFactory,
) -> SessionManager:
    return SessionManager(
        credential_store,
        settings=test_settings,
        capability_factory=factory,
    )
