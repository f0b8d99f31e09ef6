"""Path sandbox."""

from vaultdav.managers.sandbox.sandbox import PathSandbox

__all__ = ["PathSandbox"]
