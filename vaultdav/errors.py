"""vaultdav error types.

All errors carry a human readable ``message`` and a ``details`` dict with
structured context (path, status code, capability name, ...).

Propagation:
- ConnectionFailedError is absorbed by ``SessionManager.connect`` (bool result)
- NotConnectedError fails read/write fast
- TransportError propagates from listing/read/write to the caller
- ConfigParseError is reported as a load status, never raised to session callers
"""

from __future__ import annotations

from typing import Any


class VaultDavError(Exception):
    """Base class for all vaultdav errors."""

    code: str = "vaultdav_error"

    def __init__(self, message: str = "", *, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details: dict[str, Any] = dict(details or {})

    def __str__(self) -> str:
        return self.message


class ConnectionFailedError(VaultDavError):
    """Server unreachable or credentials rejected while connecting."""

    code = "connection_failed"


class NotConnectedError(VaultDavError):
    """Operation attempted without an active session."""

    code = "not_connected"

    def __init__(self, message: str = "WebDAV client is not connected", **kwargs: Any) -> None:
        super().__init__(message, **kwargs)


class TransportError(VaultDavError):
    """Capability call rejected after a connection exists."""

    code = "transport_error"

    def __init__(
        self,
        message: str,
        *,
        path: str | None = None,
        status_code: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        merged = dict(details or {})
        if path is not None:
            merged["path"] = path
        if status_code is not None:
            merged["status_code"] = status_code
        super().__init__(message, details=merged)

    @property
    def path(self) -> str | None:
        return self.details.get("path")

    @property
    def status_code(self) -> int | None:
        return self.details.get("status_code")


class AuthenticationError(TransportError):
    """Server answered 401/403."""

    code = "authentication_failed"


class ConfigParseError(VaultDavError):
    """Persisted credential record could not be parsed."""

    code = "config_parse_error"


class CapabilityNotSupportedError(VaultDavError):
    """Capability exposes neither variant of a required operation pair."""

    code = "capability_not_supported"

    def __init__(self, operation: str, *, available: list[str] | None = None) -> None:
        super().__init__(
            f"Capability does not support operation: {operation}",
            details={"operation": operation, "available": list(available or [])},
        )
