"""Logging bootstrap for command-line entry points."""
from __future__ import annotations

import logging
from typing import Optional, Union

from engine.config import get as config_get

_FORMAT = "[%(name)s] %(levelname)s: %(message)s"


def configure_logging(level: Optional[Union[int, str]] = None) -> None:
    """Install a root handler; the level defaults to ``logging.level`` from config."""
    if level is None:
        level = config_get("logging.level", "INFO")
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO
    logging.basicConfig(level=level, format=_FORMAT)
