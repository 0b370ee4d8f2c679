"""Process-wide logging setup."""

from __future__ import annotations

import logging
import sys
from typing import Optional

from app.config import get_settings

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"
DEFAULT_LOGGER_NAME = "pagebridge"


class LoggingConfig:
    """Configure the root logger once; later instantiations are no-ops."""

    _configured = False

    def __init__(self, level: Optional[str] = None) -> None:
        if LoggingConfig._configured:
            return
        level_name = (level or get_settings().log_level or "INFO").upper()
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        root = logging.getLogger()
        root.handlers = [handler]
        root.setLevel(getattr(logging, level_name, logging.INFO))
        # httpx logs every request URL at INFO, which includes page tokens
        logging.getLogger("httpx").setLevel(logging.WARNING)
        LoggingConfig._configured = True


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Return a named logger under the application namespace."""
    if name is None:
        return logging.getLogger(DEFAULT_LOGGER_NAME)
    return logging.getLogger(f"{DEFAULT_LOGGER_NAME}.{name}")
