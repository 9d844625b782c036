"""Colored logging formatter and logging setup for console output."""

from __future__ import annotations

import logging
import os
import sys

DEFAULT_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DEFAULT_DATEFMT = "%Y-%m-%d %H:%M:%S"


class ColoredFormatter(logging.Formatter):
    """Logging formatter that applies ANSI color codes to the levelname field.

    Colors are disabled when the ``NO_COLOR`` environment variable is set or
    when the output stream is not a TTY (e.g. redirected to a file).
    """

    COLORS: dict[int, str] = {
        logging.DEBUG: "\033[36m",     # cyan
        logging.INFO: "\033[32m",      # green
        logging.WARNING: "\033[33m",   # yellow
        logging.ERROR: "\033[31m",     # red
        logging.CRITICAL: "\033[1;31m",  # bold red
    }
    RESET = "\033[0m"

    def _use_color(self) -> bool:
        if os.environ.get("NO_COLOR") is not None:
            return False
        stream = getattr(self, "_stream", None) or sys.stdout
        return hasattr(stream, "isatty") and stream.isatty()

    def format(self, record: logging.LogRecord) -> str:
        if self._use_color():
            color = self.COLORS.get(record.levelno, "")
            record = logging.makeLogRecord(record.__dict__)
            record.levelname = f"{color}{record.levelname}{self.RESET}"
        return super().format(record)


def setup_logging(log_level: str = "INFO", logger_name: str = "lavalink_session") -> logging.Logger:
    """Attach a colored stderr handler to the package logger.

    Safe to call repeatedly; the handler is installed once.
    """
    resolved_level = getattr(logging, log_level.upper(), logging.INFO)
    logger = logging.getLogger(logger_name)
    logger.setLevel(resolved_level)

    if not any(getattr(h, "_lavalink_session", False) for h in logger.handlers):
        handler = logging.StreamHandler(sys.stderr)
        formatter = ColoredFormatter(DEFAULT_FORMAT, datefmt=DEFAULT_DATEFMT)
        formatter._stream = handler.stream  # type: ignore[attr-defined]
        handler.setFormatter(formatter)
        handler._lavalink_session = True  # type: ignore[attr-defined]
        logger.addHandler(handler)

    return logger
