"""In-memory capability fakes for unit tests."""

from __future__ import annotations

import asyncio
import posixpath
from collections.abc import AsyncIterable, AsyncIterator

from vaultdav.errors import AuthenticationError, TransportError
from vaultdav.models.entry import DirectoryEntry, EntryKind


class FakeCapability:
    """Buffered-only capability backed by a dict of files.

    Directories are implied by file paths plus ``dirs``.
    """

    def __init__(
        self,
        files: dict[str, str] | None = None,
        dirs: list[str] | None = None,
        *,
        fail_list: Exception | None = None,
    ) -> None:
        self.files: dict[str, str] = dict(files or {})
        self.dirs: set[str] = set(dirs or [])
        self.fail_list = fail_list
        self.list_calls: list[str] = []
        self.read_calls: list[str] = []
        self.write_calls: list[str] = []
        self.closed = False

    def _children(self, path: str) -> list[DirectoryEntry]:
        path = path.rstrip("/") or "/"
        children: dict[str, DirectoryEntry] = {}
        for d in sorted(self.dirs):
            if posixpath.dirname(d) == path:
                children[d] = DirectoryEntry(
                    basename=posixpath.basename(d), path=d, kind=EntryKind.DIRECTORY
                )
        for f, content in sorted(self.files.items()):
            if posixpath.dirname(f) == path:
                children[f] = DirectoryEntry(
                    basename=posixpath.basename(f),
                    path=f,
                    kind=EntryKind.FILE,
                    size=len(content.encode("utf-8")),
                )
        return list(children.values())

    async def list_entries(self, path: str) -> list[DirectoryEntry]:
        self.list_calls.append(path)
        if self.fail_list is not None:
            raise self.fail_list
        return self._children(path)

    async def read_file(self, path: str) -> str:
        self.read_calls.append(path)
        if path not in self.files:
            raise TransportError("WebDAV GET failed: 404", path=path, status_code=404)
        return self.files[path]

    async def write_file(self, path: str, content: str | bytes) -> None:
        self.write_calls.append(path)
        self.files[path] = content.decode("utf-8") if isinstance(content, bytes) else content

    async def aclose(self) -> None:
        self.closed = True


class StreamOnlyCapability:
    """Capability exposing only the streaming read/write variants."""

    def __init__(self, files: dict[str, str] | None = None, *, chunk_size: int = 3) -> None:
        self.files: dict[str, bytes] = {k: v.encode("utf-8") for k, v in (files or {}).items()}
        self.chunk_size = chunk_size
        self.stream_reads: list[str] = []
        self.stream_writes: list[str] = []

    async def list_entries(self, path: str) -> list[DirectoryEntry]:
        return []

    async def read_file_stream(self, path: str) -> AsyncIterator[bytes]:
        self.stream_reads.append(path)
        data = self.files[path]
        for i in range(0, len(data), self.chunk_size):
            yield data[i : i + self.chunk_size]

    async def write_file_stream(self, path: str, chunks: AsyncIterable[bytes]) -> None:
        self.stream_writes.append(path)
        self.files[path] = b"".join([chunk async for chunk in chunks])


class GatedCapability(FakeCapability):
    """FakeCapability whose listings of gated paths wait on an event."""

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self.gates: dict[str, asyncio.Event] = {}
        self.completed: list[str] = []

    async def list_entries(self, path: str) -> list[DirectoryEntry]:
        self.list_calls.append(path)
        gate = self.gates.get(path)
        if gate is not None:
            await gate.wait()
        self.completed.append(path)
        return self._children(path)


class RejectingCapability(FakeCapability):
    """Capability whose server rejects the credentials."""

    def __init__(self) -> None:
        super().__init__(fail_list=AuthenticationError("WebDAV PROPFIND failed: 401", status_code=401))


class ListOnlyCapability:
    """Capability that cannot read or write at all."""

    async def list_entries(self, path: str) -> list[DirectoryEntry]:
        return []


class CapabilityFactory:
    """Records factory calls and hands out capabilities per server URL."""

    def __init__(self, capabilities: dict[str, object] | None = None, default: object | None = None) -> None:
        self.capabilities = dict(capabilities or {})
        self.default = default
        self.calls: list[tuple[str, str, str]] = []

    def __call__(self, server_url: str, username: str, password: str) -> object:
        self.calls.append((server_url, username, password))
        if server_url in self.capabilities:
            return self.capabilities[server_url]
        if self.default is not None:
            return self.default
        raise ConnectionRefusedError(f"cannot reach {server_url}")
