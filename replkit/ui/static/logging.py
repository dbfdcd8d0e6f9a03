#!/usr/bin/env python3
# replkit/ui/static/logging.py
from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from typing import Optional, Union

from replkit.ui.utils import ANSI, PRINT_MUTEX, strip_ansi, supports_color


class ColorizingStreamHandler(logging.StreamHandler):
    """StreamHandler that colors records by level on ANSI terminals and writes plain text elsewhere."""

    _LEVEL_COLORS = {
        logging.DEBUG: ANSI["bright_black"],
        logging.INFO: "",
        logging.WARNING: ANSI["yellow"],
        logging.ERROR: ANSI["red"],
        logging.CRITICAL: ANSI["magenta"],
    }

    def __init__(self, stream=None) -> None:
        super().__init__(stream)
        self._use_ansi = supports_color(self.stream)

    def emit(self, record: logging.LogRecord) -> None:
        try:
            message = self.format(record)
            color = self._LEVEL_COLORS.get(record.levelno, "")
            if self._use_ansi and color:
                message = f"{color}{message}{ANSI['reset']}"
            elif not self._use_ansi:
                message = strip_ansi(message)
            with PRINT_MUTEX:
                self.stream.write(message + self.terminator)
                self.flush()
        except Exception:
            self.handleError(record)


class PlainFormatter(logging.Formatter):
    """Formatter that strips ANSI (good for log files)."""

    def format(self, record: logging.LogRecord) -> str:
        return strip_ansi(super().format(record))


def init_logger(
    name: str = "replkit",
    level: Union[int, str] = logging.WARNING,
    logfile: Optional[str] = None,
) -> logging.Logger:
    """
    Initialize a color-safe logger.

    Console: colored on ANSI terminals, plain otherwise.
    File (optional): rotating, plain text, UTF-8, always at DEBUG.
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
    logger = logging.getLogger(name)
    logger.setLevel(logging.DEBUG if logfile else level)
    logger.propagate = False

    if not any(isinstance(h, ColorizingStreamHandler) for h in logger.handlers):
        console_handler = ColorizingStreamHandler(stream=sys.stderr)
        console_handler.setLevel(level)
        console_handler.setFormatter(
            logging.Formatter("[%(levelname)s] %(message)s"))
        logger.addHandler(console_handler)

    if logfile and not any(isinstance(h, RotatingFileHandler) for h in logger.handlers):
        file_handler = RotatingFileHandler(
            logfile, maxBytes=2_000_000, backupCount=3, encoding="utf-8"
        )
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(
            PlainFormatter(
                "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        )
        logger.addHandler(file_handler)

    return logger
