"""Credential record persistence on top of a KeyValueStore."""

from __future__ import annotations

import json

import structlog
from pydantic import ValidationError

from vaultdav.errors import ConfigParseError
from vaultdav.models.credentials import CredentialLoad, CredentialRecord, RecordStatus
from vaultdav.stores.base import KeyValueStore

logger = structlog.get_logger()


def parse_record(raw: str) -> CredentialRecord:
    """Parse a stored record.

    Raises:
        ConfigParseError: If ``raw`` is not a JSON object matching the record
    """
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        raise ConfigParseError(f"Credential record is not valid JSON: {e}") from e
    if not isinstance(data, dict):
        raise ConfigParseError(
            "Credential record must be a JSON object",
            details={"type": type(data).__name__},
        )
    try:
        return CredentialRecord.model_validate(data)
    except ValidationError as e:
        raise ConfigParseError(
            "Credential record has invalid fields",
            details={"errors": e.errors(include_url=False)},
        ) from e


class CredentialStore:
    """Loads and saves the credential record under a single key."""

    def __init__(self, store: KeyValueStore, key: str = "webdav_config") -> None:
        self._store = store
        self._key = key
        self._log = logger.bind(component="credential_store", key=key)

    @property
    def key(self) -> str:
        return self._key

    def load(self) -> CredentialLoad:
        """Load the record; absence or corruption yields an empty record."""
        raw = self._store.get(self._key)
        if raw is None:
            return CredentialLoad(status=RecordStatus.ABSENT)

        try:
            record = parse_record(raw)
        except ConfigParseError as e:
            self._log.warning("credentials.corrupt", error=e.message)
            return CredentialLoad(status=RecordStatus.CORRUPT, error=e.message)

        return CredentialLoad(status=RecordStatus.LOADED, record=record)

    def save(self, record: CredentialRecord) -> None:
        self._store.set(self._key, record.to_json())
        self._log.debug("credentials.saved", server_url=record.server_url)

    def clear(self) -> None:
        """Forget the persisted record."""
        self._store.delete(self._key)
        self._log.info("credentials.cleared")
