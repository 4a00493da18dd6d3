"""Abstract base class for host command execution.

The host is the editor runtime that owns the agent's single "current
task". Backends translate the two session commands into whatever
mechanism reaches that runtime (an HTTP command bridge, an in-process
call, IPC), so the gateway can be wired to any of them unchanged.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any

logger = logging.getLogger(__name__)


class HostCommandExecutor(ABC):
    """Abstract interface for issuing session commands to the host.

    Example usage::

        async with HttpHostExecutor(base_url="http://localhost:3100") as host:
            task_id = await host.start_new_session("fix bug", [])
            await host.continue_session(task_id, "also fix typo", [])
    """

    @abstractmethod
    async def connect(self) -> None:
        """Establish a connection to the host.

        Raises:
            HostCommandError: If the host cannot be reached.
        """
        ...

    @abstractmethod
    async def disconnect(self) -> None:
        """Release the connection. Safe to call more than once."""
        ...

    @abstractmethod
    async def start_new_session(self, description: str, images: list[Any]) -> str | None:
        """Start a new host session.

        The host finds an active editor surface, discards whatever task
        it currently holds, and creates a new one from ``description``
        and ``images``.

        Args:
            description: Initial task text.
            images: Opaque image payloads, forwarded verbatim.

        Returns:
            The generated session identifier, or None if the host had no
            active surface to create it on.

        Raises:
            HostCommandError: If the command fails.
        """
        ...

    @abstractmethod
    async def continue_session(self, session_id: str, message: str, images: list[Any]) -> Any:
        """Send a message to an existing host session.

        The host loads the session and injects ``message`` as if a user
        had typed it into the live interface.

        Returns:
            The host's result payload, uninterpreted.

        Raises:
            HostCommandError: If the command fails.
        """
        ...

    async def __aenter__(self) -> HostCommandExecutor:
        """Async context manager entry -- connects to the host."""
        await self.connect()
        return self

    async def __aexit__(self, exc_type: type | None, exc_val: Exception | None, exc_tb: object) -> None:
        """Async context manager exit -- disconnects from the host."""
        await self.disconnect()


class HostCommandError(Exception):
    """Raised when a host command fails."""

    def __init__(self, message: str, backend: str = "") -> None:
        super().__init__(message)
        self.backend = backend
