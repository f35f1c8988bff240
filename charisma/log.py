"""Logging helpers that keep every charisma logger under one namespace.

The menu owns the terminal, so by default only warnings reach stderr. Set
CHARISMA_LOG_FILE to capture the full trace in a file instead.
"""
from __future__ import annotations

import logging
import sys
from typing import Optional, TextIO

from charisma.config import CharismaConfig

BASE_LOGGER = "charisma"
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def setup_logging(config: CharismaConfig, stream: Optional[TextIO] = None) -> logging.Logger:
    """Configure the base 'charisma' logger once and return it."""
    base = logging.getLogger(BASE_LOGGER)
    level = getattr(logging, config.log_level, logging.WARNING)
    if base.handlers:
        base.setLevel(level)
        return base

    base.setLevel(level)
    base.propagate = False

    if config.log_path is not None:
        config.log_path.parent.mkdir(parents=True, exist_ok=True)
        handler: logging.Handler = logging.FileHandler(config.log_path, encoding="utf-8")
    else:
        handler = logging.StreamHandler(stream or sys.stderr)
        handler.setLevel(max(level, logging.WARNING))
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    base.addHandler(handler)
    return base


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a namespaced logger under 'charisma'."""
    if not name or name == BASE_LOGGER:
        return logging.getLogger(BASE_LOGGER)
    if name.startswith(BASE_LOGGER + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{BASE_LOGGER}.{name}")
