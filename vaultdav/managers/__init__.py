"""Manager layer - session state and browsing logic."""

from vaultdav.managers.listing import ListingCache
from vaultdav.managers.sandbox import PathSandbox
from vaultdav.managers.session import SessionManager

__all__ = ["ListingCache", "PathSandbox", "SessionManager"]
