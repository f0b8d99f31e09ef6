"""vaultdav - client-side WebDAV session scoped to a sandboxed subtree.

Typical use:

    session = SessionManager()
    if await session.connect("https://example.com/dav", "alice", "secret"):
        await session.get_directory_contents("notes")
        text = await session.read_file("notes/a.md")
"""

from vaultdav.config import Settings, get_settings
from vaultdav.errors import (
    AuthenticationError,
    CapabilityNotSupportedError,
    ConfigParseError,
    ConnectionFailedError,
    NotConnectedError,
    TransportError,
    VaultDavError,
)
from vaultdav.managers.session import SessionManager
from vaultdav.models import DirectoryEntry, EntryKind, Listing

__version__ = "0.1.0"

__all__ = [
    "AuthenticationError",
    "CapabilityNotSupportedError",
    "ConfigParseError",
    "ConnectionFailedError",
    "DirectoryEntry",
    "EntryKind",
    "Listing",
    "NotConnectedError",
    "SessionManager",
    "Settings",
    "TransportError",
    "VaultDavError",
    "__version__",
    "get_settings",
]
