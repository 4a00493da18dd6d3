"""Logging setup utilities for taskgate.

Configures the ``taskgate`` logger hierarchy from the logging section
of the settings.
"""

from __future__ import annotations

import logging
import sys

from taskgate.config.settings import LoggingConfig

# Handlers added by setup_logging, replaced on every call.
_installed_handlers: list[logging.Handler] = []


def setup_logging(config: LoggingConfig | None = None) -> None:
    """Configure logging for the taskgate application.

    Safe to call more than once: handlers from an earlier call are
    removed and closed first, so log lines are never duplicated.
    Handlers attached by anything else are left alone.

    Args:
        config: Logging configuration. If None, uses defaults
                (INFO level, stderr output).
    """
    if config is None:
        config = LoggingConfig()

    app_logger = logging.getLogger("taskgate")
    while _installed_handlers:
        handler = _installed_handlers.pop()
        app_logger.removeHandler(handler)
        handler.close()

    app_logger.setLevel(getattr(logging, config.level.upper(), logging.INFO))
    formatter = logging.Formatter(config.format)

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if config.file:
        handlers.append(logging.FileHandler(config.file))

    for handler in handlers:
        handler.setFormatter(formatter)
        app_logger.addHandler(handler)
        _installed_handlers.append(handler)

    app_logger.info("Logging initialized at %s level", config.level)
