"""Key-value store interface.

The credential record lives under a single key of a generic string store;
the medium itself (file, memory, browser storage, ...) is an adapter concern.
"""

from __future__ import annotations

from abc import ABC, abstractmethod


class KeyValueStore(ABC):
    """Abstract string key-value store."""

    @abstractmethod
    def get(self, key: str) -> str | None:
        """Return the stored value, or None if the key is absent."""
        ...

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """Store ``value`` under ``key``, replacing any previous value."""
        ...

    @abstractmethod
    def delete(self, key: str) -> None:
        """Remove ``key``; no-op if absent."""
        ...
