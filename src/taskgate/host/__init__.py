"""Host command execution for taskgate.

The gateway never creates or continues sessions itself; it asks the
editor host to do so through a pluggable executor backend.

Public API:
    HostCommandExecutor -- Abstract base class
    HostCommandError -- Raised by backends when a command fails
    HttpHostExecutor -- HTTP backend for the editor's command bridge
"""

from taskgate.host.base import HostCommandError, HostCommandExecutor

__all__ = ["HostCommandError", "HostCommandExecutor", "HttpHostExecutor"]


def __getattr__(name: str) -> type:
    """Lazy import for concrete implementations that require external deps."""
    if name == "HttpHostExecutor":
        from taskgate.host.http_backend import HttpHostExecutor
        return HttpHostExecutor
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
