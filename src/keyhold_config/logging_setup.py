"""Logging setup shared by every keyhold entry point."""

from __future__ import annotations

import logging
import sys
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from keyhold_config.settings import Settings

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_NOISY_LOGGERS = ("sqlalchemy.engine", "aiosqlite", "asyncpg")


def configure_logging(settings: Settings) -> None:
    """Configure root logging from settings.

    Console output with timestamps and module names, the configured level
    for keyhold modules and WARNING for chatty third-party libraries.
    """
    log_level = getattr(logging, settings.log_level.upper(), logging.INFO)

    logging.basicConfig(
        level=log_level,
        format=LOG_FORMAT,
        datefmt=DATE_FORMAT,
        stream=sys.stdout,
        force=True,
    )

    logging.getLogger("keyhold_identity").setLevel(log_level)
    logging.getLogger("keyhold_config").setLevel(log_level)

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
