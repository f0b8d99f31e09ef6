"""Directory entry and listing models.

A Listing is the ordered result of one directory query. It is replaced as a
whole on every successful fetch and never mutated in place.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from types import MappingProxyType
from typing import Any

from vaultdav.utils.datetime import parse_datetime, utcnow


class EntryKind(str, Enum):
    """Kind of a directory entry."""

    FILE = "file"
    DIRECTORY = "directory"


@dataclass(frozen=True, slots=True)
class DirectoryEntry:
    """One item of a directory listing."""

    basename: str
    path: str  # absolute, e.g. "/obsidian/notes/a.md"
    kind: EntryKind
    size: int = 0
    modified: datetime | None = None
    metadata: Mapping[str, Any] = field(
        default_factory=lambda: MappingProxyType({}),
        compare=False,
    )

    @property
    def is_dir(self) -> bool:
        return self.kind == EntryKind.DIRECTORY

    @property
    def is_file(self) -> bool:
        return self.kind == EntryKind.FILE

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> DirectoryEntry:
        """Build an entry from a raw capability record.

        Accepts ``basename``/``name``, ``path``/``filename`` and
        ``kind``/``type`` keys; anything else ends up in ``metadata``.
        ``modified``/``lastmod`` strings may be RFC 1123 or ISO 8601; other
        values become None.
        """
        known = {"basename", "name", "path", "filename", "kind", "type", "size", "modified", "lastmod"}
        basename = data.get("basename") or data.get("name")
        if not basename:
            raise ValueError("directory entry is missing a basename")
        path = data.get("path") or data.get("filename") or basename
        kind = EntryKind(data.get("kind") or data.get("type") or EntryKind.FILE)
        modified = data.get("modified") or data.get("lastmod")
        if isinstance(modified, str):
            modified = parse_datetime(modified)
        extra = {k: v for k, v in data.items() if k not in known}
        return cls(
            basename=basename,
            path=path,
            kind=kind,
            size=int(data.get("size") or 0),
            modified=modified,
            metadata=MappingProxyType(extra),
        )


@dataclass(frozen=True, slots=True)
class Listing:
    """Contents of ``path`` as fetched at ``fetched_at``."""

    path: str
    entries: tuple[DirectoryEntry, ...] = ()
    fetched_at: datetime = field(default_factory=utcnow)

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self):
        return iter(self.entries)

    @property
    def directories(self) -> list[DirectoryEntry]:
        return [e for e in self.entries if e.kind == EntryKind.DIRECTORY]

    @property
    def files(self) -> list[DirectoryEntry]:
        return [e for e in self.entries if e.kind == EntryKind.FILE]
