# -*- coding: utf-8 -*-
"""
Application logging: one ``series_admin`` logger with a rotating file
under Config.LOGS_DIR and an INFO console stream. Modules log through
``get_logger(__name__)``.
"""

import logging
import sys
from logging.handlers import RotatingFileHandler
from typing import Optional

APP_LOGGER_NAME = "series_admin"

FILE_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
CONSOLE_FORMAT = "%(levelname)-8s | %(message)s"

_logger: Optional[logging.Logger] = None


def _file_handler() -> Optional[logging.Handler]:
    from app.config import Config

    try:
        Config.LOGS_DIR.mkdir(parents=True, exist_ok=True)
        handler = RotatingFileHandler(
            Config.LOG_PATH,
            maxBytes=Config.LOG_MAX_BYTES,
            backupCount=Config.LOG_BACKUP_COUNT,
            encoding="utf-8"
        )
    except OSError as e:
        # Read-only install: console only
        sys.stderr.write(f"Log file disabled: {e}\n")
        return None

    handler.setLevel(logging.DEBUG)
    handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
    return handler


def setup_logger() -> logging.Logger:
    """(Re)configure the application logger and return it."""
    global _logger

    app_logger = logging.getLogger(APP_LOGGER_NAME)
    app_logger.setLevel(logging.DEBUG)
    app_logger.handlers.clear()

    file_handler = _file_handler()
    if file_handler is not None:
        app_logger.addHandler(file_handler)

    console = logging.StreamHandler(sys.stdout)
    console.setLevel(logging.INFO)
    console.setFormatter(logging.Formatter(CONSOLE_FORMAT))
    app_logger.addHandler(console)

    _logger = app_logger
    return app_logger


def get_logger(name: str) -> logging.Logger:
    """Child of the application logger, configuring it on first use."""
    if _logger is None:
        setup_logger()
    return _logger.getChild(name)
