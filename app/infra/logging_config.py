"""Root logger configuration shared by the API process and Celery workers."""

from __future__ import annotations

import logging
import sys
from typing import Optional

from app.config import get_settings

LOGGER_NAMESPACE = "crm"
LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


class LoggingConfig:
    """Configure the root logger once: level from settings, one stream handler."""

    _configured = False

    def __init__(self, level: Optional[str] = None) -> None:
        if LoggingConfig._configured:
            return
        settings = get_settings()
        level_name = (level or settings.log_level or "INFO").upper()

        root = logging.getLogger()
        root.setLevel(level_name)
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        root.addHandler(handler)

        # Third-party clients are chatty at INFO
        logging.getLogger("httpx").setLevel(logging.WARNING)
        logging.getLogger("httpcore").setLevel(logging.WARNING)

        LoggingConfig._configured = True


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Return a logger under the service namespace."""
    if not name:
        return logging.getLogger(LOGGER_NAMESPACE)
    return logging.getLogger(f"{LOGGER_NAMESPACE}.{name}")
