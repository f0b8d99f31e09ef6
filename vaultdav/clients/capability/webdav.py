"""WebDAV capability client.

Pure HTTP client for a WebDAV server: PROPFIND for listings, GET for reads,
PUT for writes. Paths handed in are absolute server-side paths
(``/obsidian/notes/a.md``) relative to the server URL.
"""

from __future__ import annotations

import posixpath
import xml.etree.ElementTree as ET
from collections.abc import AsyncIterable, AsyncIterator
from types import MappingProxyType
from typing import Any
from urllib.parse import quote, unquote, urlsplit

import httpx
import structlog

from vaultdav.clients.capability.base import FileAccessCapability
from vaultdav.errors import AuthenticationError, TransportError
from vaultdav.models.entry import DirectoryEntry, EntryKind
from vaultdav.utils.datetime import parse_http_date

logger = structlog.get_logger()

DAV_NS = "DAV:"

PROPFIND_BODY = (
    '<?xml version="1.0" encoding="utf-8"?>'
    '<d:propfind xmlns:d="DAV:"><d:prop>'
    "<d:displayname/><d:resourcetype/><d:getcontentlength/>"
    "<d:getlastmodified/><d:getcontenttype/><d:getetag/>"
    "</d:prop></d:propfind>"
)


def _tag(name: str) -> str:
    return f"{{{DAV_NS}}}{name}"


def _strip_slash(path: str) -> str:
    return path.rstrip("/") or "/"


class WebDAVClient(FileAccessCapability):
    """HTTP client for a WebDAV server."""

    def __init__(
        self,
        server_url: str,
        *,
        username: str = "",
        password: str = "",
        timeout: float = 30.0,
        verify: bool = True,
        chunk_size: int = 64 * 1024,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._server_url = server_url.rstrip("/")
        self._root = _strip_slash(unquote(urlsplit(self._server_url).path) or "/")
        self._timeout = timeout
        self._chunk_size = chunk_size
        self._log = logger.bind(client="webdav", server_url=self._server_url)
        auth = httpx.BasicAuth(username, password) if username else None
        self._http = httpx.AsyncClient(
            auth=auth,
            timeout=timeout,
            verify=verify,
            transport=transport,
        )

    @property
    def server_url(self) -> str:
        return self._server_url

    def _url(self, path: str) -> str:
        if not path.startswith("/"):
            path = f"/{path}"
        return f"{self._server_url}{quote(path, safe='/')}"

    def _raise_for_status(self, response: httpx.Response, method: str, path: str) -> None:
        if response.status_code < 400:
            return
        self._log.error(
            "webdav.request_failed",
            method=method,
            path=path,
            status=response.status_code,
        )
        error_cls = AuthenticationError if response.status_code in (401, 403) else TransportError
        raise error_cls(
            f"WebDAV {method} failed: {response.status_code}",
            path=path,
            status_code=response.status_code,
        )

    async def _request(
        self,
        method: str,
        path: str,
        *,
        content: Any = None,
        headers: dict[str, str] | None = None,
    ) -> httpx.Response:
        """Make HTTP request to the server."""
        try:
            response = await self._http.request(
                method,
                self._url(path),
                content=content,
                headers=headers,
            )
        except httpx.TimeoutException as e:
            self._log.error("webdav.timeout", method=method, path=path, timeout=self._timeout)
            raise TransportError(f"WebDAV request timed out: {method} {path}", path=path) from e
        except httpx.RequestError as e:
            self._log.error("webdav.request_error", method=method, path=path, error=str(e))
            raise TransportError(f"WebDAV request error: {e}", path=path) from e

        self._raise_for_status(response, method, path)
        return response

    # Listing

    async def list_entries(self, path: str) -> list[DirectoryEntry]:
        """List directory contents (PROPFIND, Depth: 1)."""
        response = await self._request(
            "PROPFIND",
            path,
            content=PROPFIND_BODY.encode("utf-8"),
            headers={"Depth": "1", "Content-Type": "application/xml; charset=utf-8"},
        )
        entries = self.parse_multistatus(response.content, path)
        self._log.debug("webdav.listed", path=path, count=len(entries))
        return entries

    def _href_to_path(self, href: str) -> str:
        href_path = unquote(urlsplit(href).path)
        if self._root != "/" and (href_path == self._root or href_path.startswith(self._root + "/")):
            href_path = href_path[len(self._root):]
        if not href_path.startswith("/"):
            href_path = f"/{href_path}"
        return _strip_slash(href_path)

    def parse_multistatus(self, body: bytes, requested_path: str) -> list[DirectoryEntry]:
        """Parse a PROPFIND multistatus body into entries.

        The entry describing ``requested_path`` itself is dropped.
        """
        try:
            root = ET.fromstring(body)
        except ET.ParseError as e:
            raise TransportError(f"Malformed PROPFIND response: {e}", path=requested_path) from e

        own_path = _strip_slash(requested_path)
        entries: list[DirectoryEntry] = []

        for response in root.iter(_tag("response")):
            href = response.findtext(_tag("href"))
            if not href:
                continue
            path = self._href_to_path(href.strip())
            if path == own_path:
                continue

            props = self._ok_props(response)
            if props is None:
                continue

            resourcetype = props.find(_tag("resourcetype"))
            is_dir = resourcetype is not None and resourcetype.find(_tag("collection")) is not None
            size_text = props.findtext(_tag("getcontentlength")) or "0"
            try:
                size = int(size_text)
            except ValueError:
                size = 0

            metadata: dict[str, Any] = {}
            for key, prop in (
                ("displayname", "displayname"),
                ("mime", "getcontenttype"),
                ("etag", "getetag"),
            ):
                value = props.findtext(_tag(prop))
                if value:
                    metadata[key] = value.strip().strip('"') if key == "etag" else value.strip()

            entries.append(
                DirectoryEntry(
                    basename=posixpath.basename(path),
                    path=path,
                    kind=EntryKind.DIRECTORY if is_dir else EntryKind.FILE,
                    size=0 if is_dir else size,
                    modified=parse_http_date(props.findtext(_tag("getlastmodified"))),
                    metadata=MappingProxyType(metadata),
                )
            )

        return entries

    @staticmethod
    def _ok_props(response: ET.Element) -> ET.Element | None:
        """Return the <prop> element of the 2xx propstat, if any."""
        for propstat in response.iter(_tag("propstat")):
            status = propstat.findtext(_tag("status")) or ""
            parts = status.split()
            if len(parts) >= 2 and parts[1].startswith("2"):
                return propstat.find(_tag("prop"))
        return None

    # Buffered variants

    async def read_file(self, path: str) -> str:
        """Read file content as text (GET)."""
        response = await self._request("GET", path)
        return response.text

    async def write_file(self, path: str, content: str | bytes) -> None:
        """Write file content (PUT)."""
        data = content.encode("utf-8") if isinstance(content, str) else content
        await self._request("PUT", path, content=data)

    # Streaming variants

    async def read_file_stream(self, path: str) -> AsyncIterator[bytes]:
        """Stream file content (GET)."""
        try:
            async with self._http.stream("GET", self._url(path)) as response:
                if response.status_code >= 400:
                    await response.aread()
                self._raise_for_status(response, "GET", path)
                async for chunk in response.aiter_bytes(self._chunk_size):
                    yield chunk
        except httpx.TimeoutException as e:
            self._log.error("webdav.timeout", method="GET", path=path, timeout=self._timeout)
            raise TransportError(f"WebDAV request timed out: GET {path}", path=path) from e
        except httpx.RequestError as e:
            self._log.error("webdav.request_error", method="GET", path=path, error=str(e))
            raise TransportError(f"WebDAV request error: {e}", path=path) from e

    async def write_file_stream(self, path: str, chunks: AsyncIterable[bytes]) -> None:
        """Write file content from an async byte stream (PUT)."""
        await self._request("PUT", path, content=chunks)

    async def aclose(self) -> None:
        await self._http.aclose()
