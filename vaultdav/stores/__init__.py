"""Persistence media for the credential record."""

from vaultdav.stores.base import KeyValueStore
from vaultdav.stores.credentials import CredentialStore
from vaultdav.stores.file import JsonFileStore
from vaultdav.stores.memory import MemoryStore

__all__ = ["CredentialStore", "JsonFileStore", "KeyValueStore", "MemoryStore"]
