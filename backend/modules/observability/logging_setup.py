"""Logging configuration."""

from __future__ import annotations

import logging
import sys
from typing import Optional

import config

_configured = False


def setup_logging(level: Optional[str] = None, format_string: Optional[str] = None) -> None:
    """
    Configure the root logger once per process.

    Args:
        level: Log level name (DEBUG, INFO, WARNING, ...); default config.LOG_LEVEL
        format_string: Custom log format string
    """
    global _configured
    if _configured:
        return

    log_level = (level or config.LOG_LEVEL).upper()
    log_format = format_string or "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    logging.basicConfig(
        level=getattr(logging, log_level, logging.INFO),
        format=log_format,
        handlers=[logging.StreamHandler(sys.stdout)],
    )

    # Third-party noise
    logging.getLogger("urllib3").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)

    _configured = True
    logging.getLogger(__name__).info("Logging configured - Level: %s", log_level)
