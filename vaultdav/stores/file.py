"""JSON file key-value store.

The whole store is one JSON object on disk. Writes go to a temp file in the
same directory and are moved into place with ``os.replace``.
"""

from __future__ import annotations

import json
import os
import tempfile
from pathlib import Path

import structlog

from vaultdav.stores.base import KeyValueStore

logger = structlog.get_logger()


class JsonFileStore(KeyValueStore):
    """Key-value store persisted as a JSON object file."""

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path).expanduser()
        self._log = logger.bind(store="json_file", path=str(self._path))

    @property
    def path(self) -> Path:
        return self._path

    def _read_all(self) -> dict[str, str]:
        try:
            raw = self._path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return {}
        except OSError as e:
            self._log.warning("store.read_failed", error=str(e))
            return {}

        try:
            data = json.loads(raw) if raw.strip() else {}
        except json.JSONDecodeError as e:
            self._log.warning("store.decode_failed", error=str(e))
            return {}
        if not isinstance(data, dict):
            self._log.warning("store.unexpected_root", type=type(data).__name__)
            return {}
        return {k: v for k, v in data.items() if isinstance(v, str)}

    def _write_all(self, data: dict[str, str]) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=self._path.parent, prefix=".vaultdav-", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2, sort_keys=True)
            os.replace(tmp_name, self._path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    def get(self, key: str) -> str | None:
        return self._read_all().get(key)

    def set(self, key: str, value: str) -> None:
        data = self._read_all()
        data[key] = value
        self._write_all(data)

    def delete(self, key: str) -> None:
        data = self._read_all()
        if data.pop(key, None) is not None:
            self._write_all(data)
