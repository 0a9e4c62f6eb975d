"""Logging setup shared by the command line entry points."""

from __future__ import annotations

import logging

from config import settings

LOG_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"


def configure_logging(level: str | int | None = None) -> None:
    """Install a stderr handler on the root logger unless one is already configured."""
    level = level if level is not None else settings.LOG_LEVEL
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO
    logging.basicConfig(format=LOG_FORMAT)
    logging.getLogger().setLevel(level)
