"""HTTP host command backend.

Relays session commands to the editor's command bridge. The bridge
exposes each editor command as ``POST /commands/{command}``, taking the
command's argument object as the JSON body and answering with
``{"result": <value>}``.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any

import httpx

from taskgate.host.base import HostCommandError, HostCommandExecutor

logger = logging.getLogger(__name__)

DEFAULT_START_COMMAND = "cline.startNewTask"
DEFAULT_CONTINUE_COMMAND = "cline.addMessageToTask"


class HttpHostExecutor(HostCommandExecutor):
    """Issues session commands to the editor's HTTP command bridge."""

    def __init__(
        self,
        base_url: str = "http://localhost:3100",
        timeout: float | None = None,
        start_command: str = DEFAULT_START_COMMAND,
        continue_command: str = DEFAULT_CONTINUE_COMMAND,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._start_command = start_command
        self._continue_command = continue_command
        self._transport = transport
        self._client: httpx.AsyncClient | None = None
        self._connect_lock = asyncio.Lock()

    @property
    def is_connected(self) -> bool:
        return self._client is not None

    async def connect(self) -> None:
        """Create the HTTP client and verify the bridge is reachable.

        Concurrent callers share one attempt. The client is only kept
        once the health check passes; a no-op when already connected.
        """
        async with self._connect_lock:
            if self._client is not None:
                return
            client = httpx.AsyncClient(
                base_url=self._base_url,
                timeout=self._timeout,
                transport=self._transport,
            )
            try:
                resp = await client.get("/health")
                resp.raise_for_status()
            except Exception as e:
                await client.aclose()
                raise HostCommandError(
                    f"Failed to connect to host bridge: {e}", backend="http"
                ) from e
            self._client = client
            logger.info("Connected to host bridge at %s", self._base_url)

    async def disconnect(self) -> None:
        """Close the HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None
            logger.info("Disconnected from host bridge")

    async def start_new_session(self, description: str, images: list[Any]) -> str | None:
        """Run the start command and return the new task identifier."""
        result = await self._execute(
            self._start_command, {"task": description, "images": images}
        )
        logger.debug("Host started task %s", result)
        return None if result is None else str(result)

    async def continue_session(self, session_id: str, message: str, images: list[Any]) -> Any:
        """Run the continue command and return the host payload."""
        result = await self._execute(
            self._continue_command,
            {"taskId": session_id, "message": message, "images": images},
        )
        logger.debug("Host accepted message for task %s", session_id)
        return result

    async def _execute(self, command: str, args: dict[str, Any]) -> Any:
        """POST a command to the bridge and unwrap its result."""
        if self._client is None:
            await self.connect()
        client = self._client
        if client is None:
            raise HostCommandError("Not connected to host bridge", backend="http")
        path = f"/commands/{command}"
        try:
            resp = await client.post(path, json=args)
        except httpx.HTTPError as e:
            raise HostCommandError(
                f"HTTP request to {path} failed: {e}", backend="http"
            ) from e
        if resp.is_error:
            raise HostCommandError(_error_message(resp), backend="http")
        try:
            body = resp.json()
        except ValueError as e:
            raise HostCommandError(
                f"Invalid JSON from host bridge for {command}", backend="http"
            ) from e
        return body.get("result") if isinstance(body, dict) else body


def _error_message(resp: httpx.Response) -> str:
    """Extract the bridge's error text from a failed response."""
    try:
        body = resp.json()
    except ValueError:
        body = None
    if isinstance(body, dict) and body.get("error"):
        return str(body["error"])
    return f"Host bridge returned {resp.status_code} for {resp.request.url.path}"
