"""CapabilityRouter - routes read/write requests to the bound capability.

Responsibilities:
- Require an active session (no implicit reconnect)
- Confine paths to the sandbox root
- Dispatch to the negotiated buffered/streaming variant
- Annotate failures with the attempted path
"""

from __future__ import annotations

import structlog

from vaultdav.clients.capability import BoundCapability
from vaultdav.errors import NotConnectedError, VaultDavError
from vaultdav.managers.sandbox import PathSandbox
from vaultdav.models.session import SessionState

logger = structlog.get_logger()


def _annotate(error: Exception, path: str) -> None:
    if isinstance(error, VaultDavError):
        error.details.setdefault("path", path)
    error.add_note(f"path: {path}")


class CapabilityRouter:
    """Read/write facade over the session's bound capability."""

    def __init__(self, state: SessionState, sandbox: PathSandbox) -> None:
        self._state = state
        self._sandbox = sandbox
        self._log = logger.bind(component="capability_router")

    def _require_capability(self, operation: str) -> BoundCapability:
        capability = self._state.capability
        if not self._state.is_connected or capability is None:
            self._log.warning("capability.not_connected", operation=operation)
            raise NotConnectedError(details={"operation": operation})
        return capability

    async def read_file(self, path: str) -> str:
        """Read file content.

        Args:
            path: File path (relative or absolute, sandboxed)

        Returns:
            File content as text

        Raises:
            NotConnectedError: If the session is not connected
        """
        capability = self._require_capability("read")
        full_path = self._sandbox.normalize(path)

        self._log.info(
            "capability.files.read",
            path=full_path,
            variant=capability.read_variant.value,
        )

        try:
            return await capability.read(full_path)
        except Exception as e:
            self._log.error("capability.files.read_failed", path=full_path, error=str(e))
            _annotate(e, full_path)
            raise

    async def write_file(self, path: str, content: str | bytes) -> bool:
        """Write file content.

        Args:
            path: File path (relative or absolute, sandboxed)
            content: File content

        Returns:
            True once the capability accepted the write

        Raises:
            NotConnectedError: If the session is not connected
        """
        capability = self._require_capability("write")
        full_path = self._sandbox.normalize(path)

        self._log.info(
            "capability.files.write",
            path=full_path,
            variant=capability.write_variant.value,
            content_len=len(content),
        )

        try:
            await capability.write(full_path, content)
        except Exception as e:
            self._log.error("capability.files.write_failed", path=full_path, error=str(e))
            _annotate(e, full_path)
            raise
        return True
