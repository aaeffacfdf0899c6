"""Configuration loading and updating for the logging system.

Logger setup happens at import time of the first module that asks for a
logger, before any configuration file has been read. ``load_log_settings``
therefore returns bootstrap defaults and ``update_logger_from_config``
applies the INI values later on.
"""

import logging
import os
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import TYPE_CHECKING

from dl_verify.constants import (
    CONFIG_DIR_NAME,
    DEFAULT_CONFIG_SUBDIR,
    DEFAULT_CONSOLE_LOG_LEVEL,
    DEFAULT_LOG_LEVEL,
    LOG_DIR_ENV_VAR,
    LOG_FILE_NAME,
)

if TYPE_CHECKING:
    from dl_verify.domain.types import GlobalConfig
    from dl_verify.logger.state import _LoggerState


def load_log_settings() -> tuple[str, str, Path]:
    """Load default console level, file level, and file path.

    Environment Variable Override:
        DL_VERIFY_LOG_DIR: Overrides the log directory path. The test suite
        sets it so that test runs never write to the user's log directory.

    Returns:
        Tuple of (console_level, file_level, log_path)

    """
    env_log_dir = os.getenv(LOG_DIR_ENV_VAR)
    if env_log_dir:
        log_path = Path(env_log_dir).expanduser() / LOG_FILE_NAME
    else:
        log_path = (
            Path.home()
            / DEFAULT_CONFIG_SUBDIR
            / CONFIG_DIR_NAME
            / "logs"
            / LOG_FILE_NAME
        )

    return DEFAULT_CONSOLE_LOG_LEVEL, DEFAULT_LOG_LEVEL, log_path


def apply_log_levels(
    state: "_LoggerState", console_level_str: str, file_level_str: str
) -> None:
    """Set console and file handler levels on the running QueueListener.

    Args:
        state: Logger state object
        console_level_str: Console level name, e.g. "WARNING"
        file_level_str: File level name, e.g. "INFO"

    """
    console_level = getattr(logging, console_level_str, logging.WARNING)
    file_level = getattr(logging, file_level_str, logging.INFO)

    if state.queue_listener is None:
        return

    for handler in state.queue_listener.handlers:
        if isinstance(handler, RotatingFileHandler):
            handler.setLevel(file_level)
        elif isinstance(handler, logging.StreamHandler):
            handler.setLevel(console_level)


def update_logger_from_config(
    state: "_LoggerState", config: "GlobalConfig | None" = None
) -> None:
    """Update logger handler levels from the global config.

    Only handler levels change; handlers are never added or removed.

    Args:
        state: Logger state object (from logger.state module)
        config: Already loaded configuration. When omitted a local
            ConfigManager loads it from the default location.

    """
    if config is None:
        # Import here to avoid circular dependency
        from dl_verify.config import ConfigManager  # noqa: PLC0415

        config = ConfigManager().load_global_config()

    apply_log_levels(
        state,
        config.get("console_log_level", DEFAULT_CONSOLE_LOG_LEVEL),
        config.get("log_level", DEFAULT_LOG_LEVEL),
    )
    state.config_applied = True
