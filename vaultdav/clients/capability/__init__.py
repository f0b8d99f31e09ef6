"""File-access capability module."""

from vaultdav.clients.capability.base import (
    BoundCapability,
    FileAccessCapability,
    Variant,
    negotiate,
)
from vaultdav.clients.capability.webdav import WebDAVClient

__all__ = ["BoundCapability", "FileAccessCapability", "Variant", "WebDAVClient", "negotiate"]
