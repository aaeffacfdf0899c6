"""Logging formatters for console output.

INFO records are progress for the user and are shown as the bare message.
Every other level keeps the structured format with a colored level name.
"""

import logging

from dl_verify.constants import LOG_COLORS


class ColoredConsoleFormatter(logging.Formatter):
    """Console formatter with ANSI color support for different log levels.

    The record's level name is only colored for the duration of
    ``format()``, so the file handler still sees the plain name.
    """

    def format(self, record: logging.LogRecord) -> str:
        """Format log record with a colored level name."""
        color = LOG_COLORS.get(record.levelname)
        if color is None:
            return super().format(record)

        original_levelname = record.levelname
        record.levelname = f"{color}{original_levelname}{LOG_COLORS['RESET']}"
        try:
            return super().format(record)
        finally:
            record.levelname = original_levelname


class HybridConsoleFormatter(ColoredConsoleFormatter):
    """Plain message for INFO, structured and colored for other levels.

    Example Output:
        INFO:     "Downloading https://example.com/file.tar.gz"
        WARNING:  "12:30:45 - dl_verify.core.gpg - WARNING - Key not found"

    """

    def format(self, record: logging.LogRecord) -> str:
        """Format log record using simple or structured format by level."""
        if record.levelno == logging.INFO:
            return record.getMessage()
        return super().format(record)
