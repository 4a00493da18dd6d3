"""Configuration management for taskgate.

Loads settings from a YAML configuration file, with environment
variables (``TASKGATE_`` prefix) and a .env file filling anything the
file leaves out.
"""

from __future__ import annotations

import logging
from pathlib import Path

import yaml
from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings

from taskgate.host.http_backend import DEFAULT_CONTINUE_COMMAND, DEFAULT_START_COMMAND

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path("config/taskgate.yaml")


class ServerConfig(BaseModel):
    host: str = Field(default="127.0.0.1")
    port: int = Field(default=3000, ge=0, le=65535)


class HostConfig(BaseModel):
    base_url: str = Field(
        default="http://localhost:3100", description="Editor command bridge URL"
    )
    timeout: float | None = Field(
        default=None, gt=0, description="Seconds per host command; None waits forever"
    )
    start_command: str = Field(default=DEFAULT_START_COMMAND)
    continue_command: str = Field(default=DEFAULT_CONTINUE_COMMAND)


class LoggingConfig(BaseModel):
    level: str = Field(default="INFO")
    format: str = Field(
        default="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    file: str | None = Field(default=None)


class Settings(BaseSettings):
    """Root configuration for taskgate.

    Reads ``TASKGATE_*`` environment variables and .env files
    automatically, e.g. ``TASKGATE_SERVER__PORT=3001``.
    """

    model_config = {
        "env_prefix": "TASKGATE_",
        "env_nested_delimiter": "__",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }

    server: ServerConfig = Field(default_factory=ServerConfig)
    host: HostConfig = Field(default_factory=HostConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


def load_settings(config_path: Path | str | None = None) -> Settings:
    """Load settings from YAML + .env + environment variables.

    Priority: YAML file > env vars > .env file > defaults.
    """
    path = Path(config_path) if config_path else DEFAULT_CONFIG_PATH

    yaml_data = {}
    if path.exists():
        with open(path) as f:
            yaml_data = yaml.safe_load(f) or {}
        logger.info("Loaded configuration from %s", path)
    else:
        logger.warning("Config file %s not found, using defaults + env vars", path)

    return Settings(**yaml_data)
