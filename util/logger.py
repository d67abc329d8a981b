# util/logger.py
import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from config.settings import settings

logging.captureWarnings(True)


class ColoredFormatter(logging.Formatter):
    COLORS = {
        "DEBUG": "\033[37m",
        "INFO": "\033[32m",
        "WARNING": "\033[33m",
        "ERROR": "\033[31m",
        "CRITICAL": "\033[41m",
    }
    RESET = "\033[0m"

    def format(self, record: logging.LogRecord) -> str:
        # Colorize a copy of the level name so file handlers keep it plain
        if getattr(record, "_colorize", False):
            lvl = record.levelname
            record = logging.makeLogRecord(record.__dict__)
            record.levelname = f"{self.COLORS.get(lvl, self.RESET)}{lvl}{self.RESET}"
        return super().format(record)


class _ConsoleHandler(logging.StreamHandler):
    def emit(self, record: logging.LogRecord) -> None:
        record._colorize = True  # type: ignore[attr-defined]
        super().emit(record)


def init_logger() -> logging.Logger:
    """
    Idempotent logger init:
    - Always logs to stdout.
    - Writes to <LOG_DIR>/<LOG_FILE_NAME> only when settings.LOG_TO_FILE is True,
      rotated by size (LOG_MAX_BYTES / LOG_BACKUP_COUNT).
    - Respects settings.LOG_LEVEL.
    """
    root = logging.getLogger()
    if getattr(root, "_greenclaim_inited", False):
        return logging.getLogger(settings.LOGGER_NAME)

    level = getattr(logging, (settings.LOG_LEVEL or "INFO").upper(), logging.INFO)
    root.setLevel(level)

    for h in list(root.handlers):
        root.removeHandler(h)

    text_fmt = "%(asctime)s %(levelname)s %(name)s - %(message)s"
    date_fmt = "%Y-%m-%dT%H:%M:%S%z"

    ch = _ConsoleHandler(sys.stdout)
    ch.setLevel(level)
    ch.setFormatter(ColoredFormatter(text_fmt, datefmt=date_fmt))
    root.addHandler(ch)

    if settings.LOG_TO_FILE:
        os.makedirs(settings.LOG_DIR, exist_ok=True)
        fh = RotatingFileHandler(
            os.path.join(settings.LOG_DIR, settings.LOG_FILE_NAME),
            maxBytes=settings.LOG_MAX_BYTES,
            backupCount=settings.LOG_BACKUP_COUNT,
            encoding="utf-8",
        )
        fh.setLevel(level)
        fh.setFormatter(logging.Formatter(text_fmt, datefmt=date_fmt))
        root.addHandler(fh)

    # Quiet noisy libs
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("uvicorn.error").setLevel(logging.INFO)
    logging.getLogger("uvicorn.access").setLevel(logging.INFO)

    root._greenclaim_inited = True  # type: ignore[attr-defined]
    logger = logging.getLogger(settings.LOGGER_NAME)
    logger.debug("Logger initialized", extra={"component": "bootstrap"})
    return logger
