# embedline/logging/logger.py
"""
Logger factory for embedline.

All modules obtain their logger through get_logger(__name__) so that a single
handler and format is installed on the package root logger.
"""

from __future__ import annotations

import logging
import os
import sys

_ROOT = "embedline"
_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"

_configured = False


def _resolve_level(level: str | int | None) -> int:
    if level is None:
        level = os.getenv("EMBEDLINE_LOG_LEVEL", "INFO")
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(level.upper())
    if not isinstance(resolved, int):
        raise ValueError(f"Unknown log level: {level!r}")
    return resolved


def configure_logging(level: str | int | None = None) -> None:
    """Install the embedline handler on the package root logger."""
    global _configured

    root = logging.getLogger(_ROOT)
    root.setLevel(_resolve_level(level))

    if not _configured:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(_FORMAT))
        root.addHandler(handler)
        root.propagate = False
        _configured = True


def get_logger(name: str) -> logging.Logger:
    if not _configured:
        configure_logging()
    return logging.getLogger(name)
