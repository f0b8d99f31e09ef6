"""Session state model.

SessionState is the in-memory state of one connection plus the current
browsing position.
- connected == False implies capability is None
- current_path always lies within base_path
- base_path is fixed at construction
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from vaultdav.clients.capability import BoundCapability


class SessionStatus(str, Enum):
    """Observable connection status."""

    DISCONNECTED = "disconnected"
    CONNECTED = "connected"


@dataclass
class SessionState:
    """Mutable session fields, owned by SessionManager."""

    base_path: str
    current_path: str = ""
    server_url: str = ""
    username: str = ""
    password: str = ""
    capability: BoundCapability | None = None
    status: SessionStatus = SessionStatus.DISCONNECTED

    def __post_init__(self) -> None:
        if not self.current_path:
            self.current_path = self.base_path

    @property
    def is_connected(self) -> bool:
        return self.status == SessionStatus.CONNECTED and self.capability is not None

    def clear(self) -> None:
        """Drop credentials and capability; keep base_path."""
        self.capability = None
        self.status = SessionStatus.DISCONNECTED
        self.server_url = ""
        self.username = ""
        self.password = ""
        self.current_path = self.base_path
