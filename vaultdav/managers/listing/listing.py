"""ListingCache - the latest directory listing and its derived views.

The stored Listing is replaced as a whole after a successful fetch; a failed
fetch leaves the previous one in place.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import TYPE_CHECKING

import structlog

from vaultdav.config import DEFAULT_HIDDEN_FILES
from vaultdav.models.entry import DirectoryEntry, Listing

if TYPE_CHECKING:
    from vaultdav.clients.capability import BoundCapability

logger = structlog.get_logger()


class ListingCache:
    """Holds the most recent Listing for the current path."""

    def __init__(self, base_path: str, hidden_files: Iterable[str] = DEFAULT_HIDDEN_FILES) -> None:
        self._hidden = frozenset(hidden_files)
        self._listing = Listing(path=base_path)
        self._log = logger.bind(component="listing_cache")

    @property
    def hidden_files(self) -> frozenset[str]:
        return self._hidden

    @property
    def listing(self) -> Listing:
        return self._listing

    @property
    def entries(self) -> tuple[DirectoryEntry, ...]:
        return self._listing.entries

    @property
    def directories(self) -> list[DirectoryEntry]:
        return self._listing.directories

    @property
    def files(self) -> list[DirectoryEntry]:
        return self._listing.files

    def is_hidden(self, entry: DirectoryEntry) -> bool:
        return entry.basename in self._hidden

    def replace(self, path: str, entries: Iterable[DirectoryEntry]) -> Listing:
        """Store a new Listing for ``path`` with hidden entries dropped."""
        visible = tuple(e for e in entries if not self.is_hidden(e))
        self._listing = Listing(path=path, entries=visible)
        return self._listing

    async def refresh(self, capability: BoundCapability, path: str) -> Listing:
        """Fetch ``path`` and replace the stored Listing.

        ``path`` must already be normalized. Capability errors propagate and
        leave the stored Listing untouched.
        """
        raw = await capability.list_entries(path)
        listing = self.replace(path, raw)
        self._log.debug(
            "listing.refreshed",
            path=path,
            total=len(raw),
            visible=len(listing),
        )
        return listing

    def clear(self, path: str) -> None:
        self._listing = Listing(path=path)
