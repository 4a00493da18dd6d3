"""Error hierarchy for the gateway.

The HTTP layer maps each kind to a status code:

    ValidationError     -> 400
    HostExecutionError  -> 500

BindError never reaches a client; it is raised by the server lifecycle
when the listening socket cannot be bound.
"""

from __future__ import annotations


class TaskGateError(Exception):
    """Base class for all taskgate errors."""


class ValidationError(TaskGateError):
    """Raised when a request payload fails a precondition.

    Always raised before the host is invoked, so a validation failure
    has no side effects.
    """


class HostExecutionError(TaskGateError):
    """Raised when a host command fails.

    The message is the string form of the underlying exception, which
    is kept as ``__cause__``.
    """


class BindError(TaskGateError):
    """Raised when the API server cannot bind its listening socket."""

    def __init__(self, message: str, host: str = "", port: int = 0) -> None:
        super().__init__(message)
        self.host = host
        self.port = port
