"""File-access capability interface.

A capability is the transport-facing object that actually talks to the
server. It must implement ``list_entries`` and, for each of read and write,
at least one of two variants:

- buffered: ``read_file(path) -> str`` / ``write_file(path, content)``
- streaming: ``read_file_stream(path) -> AsyncIterator[bytes]`` /
  ``write_file_stream(path, chunks: AsyncIterable[bytes])``

Which variant is used is decided once, when the capability is bound
(``negotiate``), not on every call.
"""

from __future__ import annotations

import inspect
from abc import ABC, abstractmethod
from collections.abc import AsyncIterator, Mapping, Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Any

from vaultdav.errors import CapabilityNotSupportedError
from vaultdav.models.entry import DirectoryEntry

BUFFERED_READ = "read_file"
STREAM_READ = "read_file_stream"
BUFFERED_WRITE = "write_file"
STREAM_WRITE = "write_file_stream"


class FileAccessCapability(ABC):
    """Abstract file-access capability.

    Only listing is mandatory at the type level; the read/write variants are
    discovered by ``negotiate``.
    """

    @abstractmethod
    async def list_entries(self, path: str) -> Sequence[DirectoryEntry | Mapping[str, Any]]:
        """List directory contents at an absolute path."""
        ...

    async def aclose(self) -> None:
        """Release transport resources."""
        return None


class Variant(str, Enum):
    """Resolved form of a read or write operation."""

    BUFFERED = "buffered"
    STREAM = "stream"


def _has(capability: object, name: str) -> bool:
    return callable(getattr(capability, name, None))


def _resolve(capability: object, operation: str, buffered: str, stream: str) -> Variant:
    if _has(capability, buffered):
        return Variant.BUFFERED
    if _has(capability, stream):
        return Variant.STREAM
    available = [
        name
        for name in (BUFFERED_READ, STREAM_READ, BUFFERED_WRITE, STREAM_WRITE)
        if _has(capability, name)
    ]
    raise CapabilityNotSupportedError(operation, available=available)


async def _single_chunk(data: bytes) -> AsyncIterator[bytes]:
    yield data


@dataclass(frozen=True)
class BoundCapability:
    """A capability together with its negotiated read/write variants."""

    capability: Any
    read_variant: Variant
    write_variant: Variant
    encoding: str = "utf-8"

    async def list_entries(self, path: str) -> list[DirectoryEntry]:
        raw = await self.capability.list_entries(path)
        return [e if isinstance(e, DirectoryEntry) else DirectoryEntry.from_dict(e) for e in raw]

    async def read(self, path: str) -> str:
        if self.read_variant == Variant.BUFFERED:
            content = await self.capability.read_file(path)
            if isinstance(content, bytes):
                return content.decode(self.encoding)
            return content

        stream = self.capability.read_file_stream(path)
        if inspect.isawaitable(stream):
            stream = await stream
        chunks: list[bytes] = []
        async for chunk in stream:
            chunks.append(chunk.encode(self.encoding) if isinstance(chunk, str) else chunk)
        return b"".join(chunks).decode(self.encoding)

    async def write(self, path: str, content: str | bytes) -> None:
        if self.write_variant == Variant.BUFFERED:
            await self.capability.write_file(path, content)
            return

        data = content.encode(self.encoding) if isinstance(content, str) else content
        await self.capability.write_file_stream(path, _single_chunk(data))

    async def aclose(self) -> None:
        close = getattr(self.capability, "aclose", None)
        if callable(close):
            await close()


def negotiate(capability: Any, *, encoding: str = "utf-8") -> BoundCapability:
    """Resolve which read/write variants ``capability`` exposes.

    Buffered forms are preferred; streaming forms are used only when the
    buffered one is absent.

    Raises:
        CapabilityNotSupportedError: If listing, reading or writing is not
            available in any form
    """
    if not _has(capability, "list_entries"):
        raise CapabilityNotSupportedError("list_entries")

    return BoundCapability(
        capability=capability,
        read_variant=_resolve(capability, "read", BUFFERED_READ, STREAM_READ),
        write_variant=_resolve(capability, "write", BUFFERED_WRITE, STREAM_WRITE),
        encoding=encoding,
    )
