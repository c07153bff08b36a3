"""Logging configuration for qusim."""

import logging
import logging.handlers
from pathlib import Path
from typing import Optional

from qusim.config import LOG_FILE, LOG_FORMAT, LOG_LEVEL

ROOT_NAME = "qusim"
_ROOT_LOGGER: Optional[logging.Logger] = None

logging.getLogger(ROOT_NAME).addHandler(logging.NullHandler())


def setup_logging(
    level: Optional[str] = None,
    log_file: Optional[Path] = None,
) -> logging.Logger:
    """
    Configure the 'qusim' root logger once.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Optional path of a rotating log file

    Returns:
        The configured root logger
    """
    global _ROOT_LOGGER
    if _ROOT_LOGGER is not None:
        return _ROOT_LOGGER

    if level is None:
        level = LOG_LEVEL
    if log_file is None:
        log_file = LOG_FILE
    numeric_level = getattr(logging, level.upper(), logging.WARNING)

    logger = logging.getLogger(ROOT_NAME)
    logger.setLevel(numeric_level)
    logger.propagate = False

    formatter = logging.Formatter(LOG_FORMAT)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(numeric_level)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.handlers.RotatingFileHandler(
            log_file,
            maxBytes=10485760,  # 10MB
            backupCount=5,
        )
        file_handler.setLevel(numeric_level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    _ROOT_LOGGER = logger
    return logger


def get_logger(name: str = "") -> logging.Logger:
    """
    Returns either:
      - the root 'qusim' logger, if name is "" or "qusim"
      - or a child 'qusim.<name>' logger that propagates to the root handlers

    Handlers are only installed by setup_logging(); until then records go
    to the host application's logging configuration.
    """
    if name in ("", ROOT_NAME):
        return logging.getLogger(ROOT_NAME)
    if name.startswith(ROOT_NAME + "."):
        name = name[len(ROOT_NAME) + 1:]
    return logging.getLogger(f"{ROOT_NAME}.{name}")


__all__ = ["setup_logging", "get_logger"]
