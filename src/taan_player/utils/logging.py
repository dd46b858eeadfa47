"""Colored logging formatter for console output."""

from __future__ import annotations

import logging
import os
import sys
from typing import Any, TextIO


class ColoredFormatter(logging.Formatter):
    """Logging formatter that applies ANSI color codes to the levelname field.

    Colors are disabled when the ``NO_COLOR`` environment variable is set or
    when the output stream is not a TTY (e.g. redirected to a file).
    ``FORCE_COLOR`` turns them on regardless of the stream.

    With ``strip_prefix`` set, logger names under the package are shortened
    (``taan_player.application.services.auth_coordinator`` becomes
    ``application.services.auth_coordinator``).
    """

    COLORS: dict[int, str] = {
        logging.DEBUG: "\033[36m",     # cyan
        logging.INFO: "\033[32m",      # green
        logging.WARNING: "\033[33m",   # yellow
        logging.ERROR: "\033[31m",     # red
        logging.CRITICAL: "\033[1;31m",  # bold red
    }
    RESET = "\033[0m"
    PACKAGE_PREFIX = "taan_player."

    def __init__(
        self,
        fmt: str | None = None,
        datefmt: str | None = None,
        style: Any = "%",
        *,
        stream: TextIO | None = None,
        strip_prefix: bool = False,
    ) -> None:
        super().__init__(fmt, datefmt, style)
        self._stream = stream
        self._strip_prefix = strip_prefix

    def _use_color(self) -> bool:
        if os.environ.get("NO_COLOR") is not None:
            return False
        if os.environ.get("FORCE_COLOR") is not None:
            return True
        stream = self._stream or sys.stdout
        return hasattr(stream, "isatty") and stream.isatty()

    def format(self, record: logging.LogRecord) -> str:
        use_color = self._use_color()
        shorten = self._strip_prefix and record.name.startswith(self.PACKAGE_PREFIX)
        if use_color or shorten:
            record = logging.makeLogRecord(record.__dict__)
        if shorten:
            record.name = record.name[len(self.PACKAGE_PREFIX):]
        if use_color:
            color = self.COLORS.get(record.levelno, "")
            record.levelname = f"{color}{record.levelname}{self.RESET}"
        return super().format(record)
