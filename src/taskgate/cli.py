"""Command-line interface for taskgate.

Provides the main entry point for running the task control API.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path

logger = logging.getLogger(__name__)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        prog="taskgate",
        description="Remote control API for editor-hosted agent tasks",
    )
    parser.add_argument(
        "-c", "--config",
        type=Path,
        default=None,
        help="Path to YAML configuration file (default: config/taskgate.yaml)",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable debug logging",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    serve_parser = subparsers.add_parser("serve", help="Start the task control API server")
    serve_parser.add_argument(
        "--host", type=str, default=None,
        help="Interface to listen on (overrides server.host)",
    )
    serve_parser.add_argument(
        "--port", type=int, default=None,
        help="Port to listen on (overrides server.port)",
    )

    return parser.parse_args(argv)


async def _serve(settings, host: str, port: int) -> None:
    """Run the API server until it is interrupted."""
    from taskgate.api.lifecycle import GatewayServer
    from taskgate.api.server import create_app

    app = create_app(
        host_base_url=settings.host.base_url,
        host_timeout=settings.host.timeout,
        start_command=settings.host.start_command,
        continue_command=settings.host.continue_command,
    )
    server = GatewayServer(app, host=host)
    await server.start(port)
    try:
        await server.wait_closed()
    finally:
        await server.stop()


def main(argv: list[str] | None = None) -> None:
    """Main entry point for the taskgate CLI."""
    args = parse_args(argv)

    if args.command is None:
        parse_args(["--help"])
        return

    from taskgate.config.settings import load_settings
    from taskgate.domain.errors import BindError
    from taskgate.utils.logging import setup_logging

    settings = load_settings(args.config)

    if args.verbose:
        settings.logging.level = "DEBUG"

    setup_logging(settings.logging)

    if args.command == "serve":
        host = args.host or settings.server.host
        port = args.port if args.port is not None else settings.server.port
        logger.info("Starting task API on %s:%d (host bridge %s)", host, port, settings.host.base_url)
        try:
            asyncio.run(_serve(settings, host, port))
        except BindError as e:
            logger.error("%s", e)
            sys.exit(1)
        except KeyboardInterrupt:
            logger.info("Interrupted")


if __name__ == "__main__":
    main()
