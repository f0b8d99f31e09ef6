"""Data models."""

from vaultdav.models.credentials import CredentialLoad, CredentialRecord, RecordStatus
from vaultdav.models.entry import DirectoryEntry, EntryKind, Listing
from vaultdav.models.session import SessionState, SessionStatus

__all__ = [
    "CredentialLoad",
    "CredentialRecord",
    "DirectoryEntry",
    "EntryKind",
    "Listing",
    "RecordStatus",
    "SessionState",
    "SessionStatus",
]
