"""Directory listing cache."""

from vaultdav.managers.listing.listing import ListingCache

__all__ = ["ListingCache"]
