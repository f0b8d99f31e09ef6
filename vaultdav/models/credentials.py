"""Persisted credential record.

Stored as a single JSON object under one key of a key-value store:
``{"serverUrl": ..., "username": ..., "password": ..., "basePath": ...}``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class CredentialRecord(BaseModel):
    """Connection credentials; every field is optional."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    server_url: str = ""
    username: str = ""
    password: str = ""
    base_path: str | None = Field(default=None)

    @field_validator("server_url", "username", "password", mode="before")
    @classmethod
    def _null_to_empty(cls, value: Any) -> Any:
        return "" if value is None else value

    @property
    def is_empty(self) -> bool:
        return not self.server_url

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True)


class RecordStatus(str, Enum):
    """Outcome of loading the persisted record."""

    LOADED = "loaded"
    ABSENT = "absent"  # key not present in the store
    CORRUPT = "corrupt"  # present but unparseable


@dataclass(frozen=True)
class CredentialLoad:
    """Result of ``CredentialStore.load``; ``record`` is empty unless LOADED."""

    status: RecordStatus
    record: CredentialRecord = field(default_factory=CredentialRecord)
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.status == RecordStatus.LOADED
