"""Logging for Course Manager.

Every ``coursemanager.*`` module logs through ``logging.getLogger(__name__)``.
``setup_logging`` attaches a rotating file handler, plus an optional console
handler, to the package logger. Both handlers mask student e-mail addresses,
including those embedded in database error messages.
"""

from __future__ import annotations

import logging
import re
from logging.handlers import RotatingFileHandler
from pathlib import Path

PACKAGE_LOGGER = "coursemanager"
LOG_FILE = "coursemanager.log"
MAX_BYTES = 10 * 1024 * 1024
BACKUP_COUNT = 5

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_EMAIL_PATTERN = re.compile(r"([A-Za-z0-9._%+-])[A-Za-z0-9._%+-]*@([A-Za-z0-9.-]+\.[A-Za-z]{2,})")


def sanitize_for_log(text: str) -> str:
    """Mask e-mail addresses so student contact data stays out of log files.

    ``jane.doe@uni.edu`` becomes ``j***@uni.edu``.
    """
    return _EMAIL_PATTERN.sub(r"\1***@\2", text)


class ContactMaskingFilter(logging.Filter):
    """Rewrites each record's message with e-mail addresses masked."""

    def filter(self, record: logging.LogRecord) -> bool:
        message = record.getMessage()
        masked = sanitize_for_log(message)
        if masked != message:
            record.msg = masked
            record.args = None
        return True


def _build_handler(handler: logging.Handler, level: int) -> logging.Handler:
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
    handler.addFilter(ContactMaskingFilter())
    return handler


def setup_logging(
    log_dir: str | Path | None = None,
    level: str | None = None,
    console: bool = False,
) -> logging.Logger:
    """Route Course Manager logs to ``<log_dir>/coursemanager.log``.

    Calling it again replaces the handlers of the previous call.

    Args:
        log_dir: Directory for the log file, created if missing. Defaults to ``logs``.
        level: Level name such as ``DEBUG``; unknown names fall back to INFO.
        console: Also log to stderr.

    Returns:
        The package logger.
    """
    directory = Path(log_dir) if log_dir is not None else Path("logs")
    directory.mkdir(parents=True, exist_ok=True)
    level_name = (level or "INFO").upper()
    log_level = logging.getLevelNamesMapping().get(level_name, logging.INFO)

    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(log_level)
    for old in list(logger.handlers):
        logger.removeHandler(old)
        old.close()

    log_path = directory / LOG_FILE
    file_handler = RotatingFileHandler(
        log_path, maxBytes=MAX_BYTES, backupCount=BACKUP_COUNT, encoding="utf-8"
    )
    logger.addHandler(_build_handler(file_handler, log_level))
    if console:
        logger.addHandler(_build_handler(logging.StreamHandler(), log_level))

    logger.info("Logging to %s at %s", log_path, logging.getLevelName(log_level))
    return logger
