"""Logging setup shared by the API, Celery workers and scripts."""

from __future__ import annotations

import logging
import sys
from typing import Optional

from app.config import get_settings

ROOT_LOGGER_NAME = "forum_mirror"
LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


class LoggingConfig:
    """Configure the root application logger once per process."""

    _configured = False

    def __init__(self, level: Optional[str] = None) -> None:
        if LoggingConfig._configured:
            return
        settings = get_settings()
        log_level = (level or settings.log_level or "INFO").upper()

        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))

        logger = logging.getLogger(ROOT_LOGGER_NAME)
        logger.setLevel(log_level)
        logger.handlers = [handler]

        # SQL echo is noisy; keep it at warning unless explicitly debugging
        logging.getLogger("sqlalchemy.engine").setLevel(
            logging.DEBUG if log_level == "DEBUG" else logging.WARNING
        )
        LoggingConfig._configured = True


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Return the application logger, or a named child of it."""
    if not name:
        return logging.getLogger(ROOT_LOGGER_NAME)
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")
