"""PathSandbox - confines caller paths to a fixed subtree.

Every path that reaches the capability goes through ``normalize`` first.
"""

from __future__ import annotations

import posixpath


def _clean_base(base_path: str) -> str:
    return posixpath.normpath("/" + base_path.strip().lstrip("/"))


class PathSandbox:
    """Maps arbitrary paths to absolute paths under ``base_path``."""

    def __init__(self, base_path: str) -> None:
        self._base = _clean_base(base_path)

    @property
    def base_path(self) -> str:
        return self._base

    def contains(self, path: str) -> bool:
        """Whether an absolute, collapsed path lies within the sandbox root."""
        if self._base == "/":
            return path.startswith("/")
        return path == self._base or path.startswith(self._base + "/")

    def normalize(self, path: str | None = None) -> str:
        """Normalize ``path`` to an absolute path under the sandbox root.

        - relative paths get a leading ``/``
        - ``.``, ``..`` and duplicate slashes are collapsed
        - paths outside the root are re-rooted under it
        - empty input and ``/`` map to the root itself

        The result always starts with the root and
        ``normalize(normalize(p)) == normalize(p)``.
        """
        raw = path or ""
        absolute = posixpath.normpath("/" + raw.lstrip("/"))
        if self.contains(absolute):
            return absolute

        relative = absolute.lstrip("/")
        if not relative:
            return self._base
        if self._base == "/":
            return "/" + relative
        return f"{self._base}/{relative}"

    def relative(self, path: str) -> str:
        """Path of a sandboxed location relative to the root ('' for the root)."""
        normalized = self.normalize(path)
        if normalized == self._base:
            return ""
        prefix = "/" if self._base == "/" else self._base + "/"
        return normalized[len(prefix):]
