"""Terminal logging for the reporter."""

import logging
import sys
from collections.abc import Mapping
from typing import TextIO

TAG = "jest-markdown-reporter >> "
RESET = "\x1b[0m"
DEFAULT_COLOR = "\x1b[37m"
LEVEL_COLORS: Mapping[int, str] = {
    logging.INFO: "\x1b[32m",
    logging.WARNING: "\x1b[33m",
    logging.ERROR: "\x1b[31m",
    logging.CRITICAL: "\x1b[31m",
}


class TaggedFormatter(logging.Formatter):
    """Prefixes messages with the reporter tag, colored by level on terminals."""

    def __init__(self, *, color: bool = False) -> None:
        super().__init__(f"{TAG}%(message)s")
        self.color = color

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        if not self.color:
            return message
        return f"{LEVEL_COLORS.get(record.levelno, DEFAULT_COLOR)}{message}{RESET}"


def configure_logging(
    level: int = logging.INFO, stream: TextIO | None = None
) -> logging.Handler:
    """Send the package's log records to ``stream`` (default: stderr)."""
    stream = stream or sys.stderr
    handler = logging.StreamHandler(stream)
    handler.setFormatter(TaggedFormatter(color=stream.isatty()))

    logger = logging.getLogger("jest_markdown_reporter")
    for existing in list(logger.handlers):
        if isinstance(existing.formatter, TaggedFormatter):
            logger.removeHandler(existing)
    logger.addHandler(handler)
    logger.setLevel(level)
    return handler
