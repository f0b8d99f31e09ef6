"""Capability routing."""

from vaultdav.router.capability.capability import CapabilityRouter

__all__ = ["CapabilityRouter"]
