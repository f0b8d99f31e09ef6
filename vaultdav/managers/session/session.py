"""SessionManager - connection lifecycle and browsing state.

Key responsibilities:
- connect: bind a capability, fetch the root listing, persist credentials.
  Any failure resets the session and yields False.
- ensure_connected: best-effort single reconnect with last-known credentials
- get_directory_contents: sandboxed listing refresh
- read_file / write_file: delegated to CapabilityRouter (no implicit reconnect)

Overlapping connect/get_directory_contents calls are not serialized; the
last one to complete wins.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from typing import Any

import httpx
import structlog

from vaultdav.clients.capability import BoundCapability, WebDAVClient, negotiate
from vaultdav.config import Settings, get_settings
from vaultdav.errors import ConnectionFailedError
from vaultdav.managers.listing import ListingCache
from vaultdav.managers.sandbox import PathSandbox
from vaultdav.models.credentials import CredentialRecord, RecordStatus
from vaultdav.models.entry import DirectoryEntry, Listing
from vaultdav.models.session import SessionState, SessionStatus
from vaultdav.router.capability import CapabilityRouter
from vaultdav.stores import CredentialStore, JsonFileStore

logger = structlog.get_logger()

# (server_url, username, password) -> capability object
CapabilityFactory = Callable[[str, str, str], Any]


def webdav_capability_factory(settings: Settings) -> CapabilityFactory:
    """Build WebDAVClient instances configured from ``settings.transport``."""

    def factory(server_url: str, username: str, password: str) -> WebDAVClient:
        try:
            url = httpx.URL(server_url)
        except (httpx.InvalidURL, TypeError) as e:
            raise ConnectionFailedError(
                f"Invalid server URL: {server_url!r}",
                details={"server_url": server_url},
            ) from e
        if url.scheme not in ("http", "https") or not url.host:
            raise ConnectionFailedError(
                f"Invalid server URL: {server_url!r}",
                details={"server_url": server_url},
            )

        return WebDAVClient(
            server_url,
            username=username,
            password=password,
            timeout=settings.transport.timeout,
            verify=settings.transport.verify_ssl,
            chunk_size=settings.transport.stream_chunk_size,
        )

    return factory


class SessionManager:
    """Owns one client-side WebDAV session."""

    def __init__(
        self,
        credential_store: CredentialStore | None = None,
        *,
        settings: Settings | None = None,
        base_path: str | None = None,
        capability_factory: CapabilityFactory | None = None,
    ) -> None:
        self._settings = settings or get_settings()
        self._sandbox = PathSandbox(base_path or self._settings.base_path)
        self._credentials = credential_store or CredentialStore(
            JsonFileStore(self._settings.credentials.resolved_path),
            key=self._settings.credentials.key,
        )
        self._capability_factory = capability_factory or webdav_capability_factory(self._settings)
        self._log = logger.bind(manager="session", base_path=self._sandbox.base_path)

        self._state = SessionState(base_path=self._sandbox.base_path)
        self._listing = ListingCache(self._sandbox.base_path, self._settings.hidden_files)
        self._router = CapabilityRouter(self._state, self._sandbox)
        self._closing: set[asyncio.Task] = set()
        self._pending_close: list[Any] = []

        loaded = self._credentials.load()
        self._credentials_status = loaded.status
        if loaded.status == RecordStatus.LOADED:
            self._state.server_url = loaded.record.server_url
            self._state.username = loaded.record.username
            self._state.password = loaded.record.password
        self._log.debug(
            "session.credentials_loaded",
            status=loaded.status.value,
            server_url=self._state.server_url or None,
        )

    # State accessors

    @property
    def sandbox(self) -> PathSandbox:
        return self._sandbox

    @property
    def base_path(self) -> str:
        return self._sandbox.base_path

    @property
    def current_path(self) -> str:
        return self._state.current_path

    @property
    def server_url(self) -> str:
        return self._state.server_url

    @property
    def username(self) -> str:
        return self._state.username

    @property
    def status(self) -> SessionStatus:
        return self._state.status

    @property
    def is_connected(self) -> bool:
        return self._state.is_connected

    @property
    def capability(self) -> BoundCapability | None:
        return self._state.capability

    @property
    def credentials_status(self) -> RecordStatus:
        """How the persisted record looked at construction time."""
        return self._credentials_status

    @property
    def listing(self) -> Listing:
        return self._listing.listing

    @property
    def files(self) -> list[DirectoryEntry]:
        """All visible entries of the current listing."""
        return list(self._listing.entries)

    @property
    def current_directory(self) -> list[DirectoryEntry]:
        """Directories of the current listing (snapshot)."""
        return self._listing.directories

    @property
    def current_files(self) -> list[DirectoryEntry]:
        """Files of the current listing (snapshot)."""
        return self._listing.files

    # Lifecycle

    async def connect(self, server_url: str, username: str, password: str) -> bool:
        """Connect and load the root listing.

        Returns:
            True on success. On any failure the session is reset and False is
            returned; credentials are persisted only on success.
        """
        self._log.info("session.connect", server_url=server_url, username=username)

        raw = None
        try:
            raw = self._capability_factory(server_url, username, password)
            capability = negotiate(raw)
        except Exception as e:
            self._log.error("session.connect_failed", server_url=server_url, stage="bind", error=str(e))
            if raw is not None:
                self._close_later(raw)
            self.reset()
            return False

        previous = self._state.capability
        self._state.capability = capability
        self._state.server_url = server_url
        self._state.username = username
        self._state.password = password
        self._state.status = SessionStatus.CONNECTED
        if previous is not None and previous is not capability:
            self._close_later(previous)

        try:
            await self.get_directory_contents(self._sandbox.base_path)
            self._credentials.save(
                CredentialRecord(
                    server_url=server_url,
                    username=username,
                    password=password,
                    base_path=self._sandbox.base_path,
                )
            )
        except Exception as e:
            self._log.error(
                "session.connect_failed",
                server_url=server_url,
                stage="initial_listing",
                error=str(e),
            )
            self.reset()
            return False

        self._log.info("session.connected", server_url=server_url, entries=len(self._listing.listing))
        return True

    async def ensure_connected(self) -> bool:
        """Return True if connected, trying one reconnect with known credentials."""
        if self._state.is_connected:
            return True
        if not self._state.server_url:
            return False

        self._log.info("session.auto_connect", server_url=self._state.server_url)
        connected = await self.connect(
            self._state.server_url,
            self._state.username,
            self._state.password,
        )
        if not connected:
            self._log.warning("session.auto_connect_failed")
        return connected

    def reset(self) -> None:
        """Clear credentials, capability, listing and path. Storage is untouched."""
        capability = self._state.capability
        self._state.clear()
        self._listing.clear(self._sandbox.base_path)
        if capability is not None:
            self._close_later(capability)
        self._log.info("session.reset")

    def forget_credentials(self) -> None:
        """Remove the persisted record (the in-memory session is unchanged)."""
        self._credentials.clear()

    async def aclose(self) -> None:
        """Reset the session and close every discarded capability.

        This includes capabilities dropped by ``reset`` while no event loop
        was running.
        """
        capability = self._state.capability
        self._state.capability = None
        self.reset()
        if capability is not None:
            await capability.aclose()
        pending, self._pending_close = self._pending_close, []
        for close in pending:
            await self._close_quietly(close)
        if self._closing:
            await asyncio.gather(*self._closing, return_exceptions=True)

    async def __aenter__(self) -> SessionManager:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    def _close_later(self, capability: Any) -> None:
        close = getattr(capability, "aclose", None)
        if not callable(close):
            return
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            # closed by the next aclose()
            self._pending_close.append(close)
            self._log.debug("session.capability_close_deferred")
            return
        task = loop.create_task(self._close_quietly(close))
        self._closing.add(task)
        task.add_done_callback(self._closing.discard)

    async def _close_quietly(self, close: Callable[[], Any]) -> None:
        try:
            await close()
        except Exception as e:
            self._log.warning("session.capability_close_failed", error=str(e))

    # Browsing

    async def get_directory_contents(self, path: str | None = None) -> list[DirectoryEntry] | None:
        """List ``path`` (default: the sandbox root) and make it current.

        Returns:
            The visible entries, or None when no connection could be made

        Raises:
            Exception: Whatever the capability raised; the previous listing
                and current path are kept
        """
        if not await self.ensure_connected():
            self._log.warning("session.listing_skipped", reason="not_connected")
            return None

        full_path = self._sandbox.normalize(path)
        capability = self._state.capability
        if capability is None:
            self._log.warning("session.listing_skipped", reason="capability_discarded")
            return None

        self._log.debug("session.listing", path=full_path)
        try:
            listing = await self._listing.refresh(capability, full_path)
        except Exception as e:
            self._log.error("session.listing_failed", path=full_path, error=str(e))
            raise

        self._state.current_path = full_path
        self._log.info("session.listing_updated", path=full_path, entries=len(listing))
        return list(listing.entries)

    # Files

    async def read_file(self, path: str) -> str:
        """Read a file; raises NotConnectedError when disconnected."""
        return await self._router.read_file(path)

    async def write_file(self, path: str, content: str | bytes) -> bool:
        """Write a file; raises NotConnectedError when disconnected."""
        return await self._router.write_file(path, content)
