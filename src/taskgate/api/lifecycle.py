"""Start/stop handle for the task API server.

Runs uvicorn inside the caller's event loop so the server can be
started and stopped programmatically, e.g. from an editor extension
host or from tests. The listening socket is bound up front, which lets
``start`` fail with BindError instead of uvicorn exiting the process.
"""

from __future__ import annotations

import asyncio
import logging
import socket

import uvicorn
from fastapi import FastAPI

from taskgate.domain.errors import BindError

logger = logging.getLogger(__name__)


class GatewayServer:
    """Owns one uvicorn server for a FastAPI app.

    Example usage::

        server = GatewayServer(create_app(), host="127.0.0.1")
        await server.start(3000)
        ...
        await server.stop()
    """

    def __init__(self, app: FastAPI, host: str = "127.0.0.1") -> None:
        self._app = app
        self._host = host
        self._port: int | None = None
        self._server: uvicorn.Server | None = None
        self._task: asyncio.Task[None] | None = None

    @property
    def is_running(self) -> bool:
        return self._server is not None

    @property
    def port(self) -> int | None:
        """Port actually bound, or None when not running."""
        return self._port

    async def start(self, port: int = 3000) -> None:
        """Bind ``port`` and return once the server is accepting requests.

        Port 0 binds a free ephemeral port; read it back from ``port``.

        Raises:
            BindError: If the socket cannot be bound.
        """
        if self._server is not None:
            logger.warning("API server already running on port %s", self._port)
            return

        try:
            sock = _bind_socket(self._host, port)
        except OSError as e:
            logger.error("Error starting API server: %s", e)
            raise BindError(
                f"Cannot bind {self._host}:{port}: {e}", host=self._host, port=port
            ) from e

        bound_port = sock.getsockname()[1]
        config = uvicorn.Config(
            self._app,
            host=self._host,
            port=bound_port,
            log_config=None,
            lifespan="on",
        )
        server = uvicorn.Server(config)
        task = asyncio.create_task(server.serve(sockets=[sock]))

        while not server.started:
            if task.done():
                sock.close()
                await task
                raise RuntimeError("API server exited during startup")
            await asyncio.sleep(0.01)

        self._server = server
        self._task = task
        self._port = bound_port
        logger.info("Task API server started on %s:%d", self._host, bound_port)

    async def stop(self) -> None:
        """Stop the server and wait until it has fully closed.

        Does nothing if the server is not running.
        """
        if self._server is None or self._task is None:
            return
        self._server.should_exit = True
        try:
            await self._task
        finally:
            self._server = None
            self._task = None
            self._port = None
        logger.info("Task API server stopped")

    async def wait_closed(self) -> None:
        """Block until the server exits (e.g. on SIGINT)."""
        if self._task is not None:
            await self._task


def _bind_socket(host: str, port: int) -> socket.socket:
    family = socket.AF_INET6 if ":" in host else socket.AF_INET
    sock = socket.socket(family, socket.SOCK_STREAM)
    sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
    try:
        sock.bind((host, port))
    except OSError:
        sock.close()
        raise
    sock.set_inheritable(True)
    return sock
