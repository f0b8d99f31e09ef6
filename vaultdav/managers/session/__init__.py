"""Session manager."""

from vaultdav.managers.session.session import (
    CapabilityFactory,
    SessionManager,
    webdav_capability_factory,
)

__all__ = ["CapabilityFactory", "SessionManager", "webdav_capability_factory"]
