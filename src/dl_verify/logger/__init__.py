"""Logging utilities for dl-verify.

Structured logging with:
- Colored console output on stderr (stdout carries the artifact)
- File rotation using standard RotatingFileHandler
- Async-safe logging via QueueHandler/QueueListener
- Hierarchical logger naming (e.g., dl_verify.core.gpg.downloader)

Architecture:
    Application → QueueHandler → Queue → QueueListener Thread
                                              ↓
                                    Console + File Handlers

Usage:
    >>> from dl_verify.logger import get_logger
    >>> logger = get_logger(__name__)
    >>> logger.info("Processing %s", url)  # Use %-style formatting

Environment Variables:
    DL_VERIFY_LOG_DIR: Override the log directory (used by the test suite).

RULES FOR CONTRIBUTORS:
    1. Always use: logger = get_logger(__name__)
    2. Never call logging.basicConfig()
    3. Never attach handlers to child loggers
    4. Never use f-strings in log calls, use %-formatting
"""

from dl_verify.logger.config import (
    update_logger_from_config as _update_config,
)
from dl_verify.logger.formatters import (
    ColoredConsoleFormatter,
    HybridConsoleFormatter,
)
from dl_verify.logger.handlers import ConfigurationError
from dl_verify.logger.logger import (
    clear_logger_state,
    flush_all_handlers,
    get_logger,
    set_console_level,
)
from dl_verify.logger.state import get_state

__all__ = [
    "ColoredConsoleFormatter",
    "ConfigurationError",
    "HybridConsoleFormatter",
    "clear_logger_state",
    "flush_all_handlers",
    "get_logger",
    "set_console_level",
    "update_logger_from_config",
]


def update_logger_from_config(config=None) -> None:
    """Update logger handler levels from the global config.

    Args:
        config: Already loaded GlobalConfig, or None to load the default
            settings file.

    """
    _update_config(get_state(), config)
