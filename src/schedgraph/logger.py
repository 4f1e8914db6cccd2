"""
Logging helpers for schedgraph

All modules obtain their logger through get_logger(__name__) so that every
record lives under the "schedgraph" namespace and honours a single level
setting (SCHEDGRAPH_LOG_LEVEL, default INFO).
"""

import logging
import os
from typing import Optional

ROOT_LOGGER_NAME = "schedgraph"
DEFAULT_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

_configured = False


def _resolve_level(level: Optional[str]) -> int:
    name = (level or os.getenv("SCHEDGRAPH_LOG_LEVEL") or "INFO").upper()
    resolved = logging.getLevelName(name)
    # getLevelName returns a string like "Level FOO" for unknown names
    return resolved if isinstance(resolved, int) else logging.INFO


def setup_logging(level: Optional[str] = None, force: bool = False) -> logging.Logger:
    """
    Configure the package root logger once

    Args:
        level: Level name (DEBUG, INFO, ...). Falls back to SCHEDGRAPH_LOG_LEVEL.
        force: Reconfigure even if logging has already been set up

    Returns:
        The package root logger
    """
    global _configured
    root = logging.getLogger(ROOT_LOGGER_NAME)
    if _configured and not force:
        return root

    root.setLevel(_resolve_level(level))
    if not root.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(DEFAULT_FORMAT))
        root.addHandler(handler)
    _configured = True
    return root


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Return a logger under the schedgraph namespace."""
    setup_logging()
    if not name or name == ROOT_LOGGER_NAME:
        return logging.getLogger(ROOT_LOGGER_NAME)
    if not name.startswith(f"{ROOT_LOGGER_NAME}."):
        name = f"{ROOT_LOGGER_NAME}.{name}"
    return logging.getLogger(name)


__all__ = ["get_logger", "setup_logging"]
