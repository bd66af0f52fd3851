"""Logging setup for the Social OS service."""

import logging
import os
import sys

from pydantic import BaseModel

# Client libraries that log every HTTP request at INFO
NOISY_LOGGERS = ("anthropic", "httpx", "httpcore", "uvicorn.access")


class LogConfig(BaseModel):
    """Logging configuration."""

    level: str = "INFO"
    format: str = "%(asctime)s %(levelname)s [%(name)s] %(message)s"
    date_format: str = "%Y-%m-%d %H:%M:%S"

    @classmethod
    def from_env(cls) -> "LogConfig":
        """Read the level from ``LOG_LEVEL``."""
        return cls(level=os.getenv("LOG_LEVEL") or cls.model_fields["level"].default)


def setup_logging(config: LogConfig | None = None) -> None:
    """Configure the root logger once, at application start."""
    config = config or LogConfig.from_env()

    logging.basicConfig(
        level=config.level.upper(),
        format=config.format,
        datefmt=config.date_format,
        stream=sys.stdout,
        force=True,
    )

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """Get a module logger. Levels are inherited from the root logger."""
    return logging.getLogger(name)
