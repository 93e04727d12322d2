"""Logging helpers shared across the ingest jobs and routes."""
from __future__ import annotations

import logging
from typing import Optional

from app.utils.config import LOG_LEVEL

_LOGGER_CACHE: dict[str, logging.Logger] = {}


def configure_root_logger(level: str = LOG_LEVEL) -> None:
    """Attach a single stream handler to the root logger (no-op if one exists)."""
    if logging.getLogger().handlers:
        return
    formatter = logging.Formatter(
        "%(asctime)s | %(levelname)s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    handler = logging.StreamHandler()
    handler.setFormatter(formatter)
    logging.basicConfig(level=getattr(logging, level, logging.INFO), handlers=[handler])


def get_logger(name: Optional[str] = None) -> logging.Logger:
    name = name or "gridpulse"
    if name not in _LOGGER_CACHE:
        configure_root_logger()
        _LOGGER_CACHE[name] = logging.getLogger(name)
    return _LOGGER_CACHE[name]
