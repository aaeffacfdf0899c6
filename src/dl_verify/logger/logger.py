"""Main logger module providing public API functions.

- get_logger(): Get a logger, setting up the QueueHandler architecture once
- set_console_level(): Change console verbosity at runtime (``--verbose``)
- flush_all_handlers(): Ensure all pending log records are written
- clear_logger_state(): Clear global logger state for testing
"""

import atexit
import contextlib
import logging
import time
from logging.handlers import QueueHandler, RotatingFileHandler

from dl_verify.logger.config import load_log_settings
from dl_verify.logger.handlers import ROOT_LOGGER_NAME, setup_root_logger
from dl_verify.logger.state import get_state

FLUSH_TIMEOUT_SECONDS = 5.0


def flush_all_handlers() -> None:
    """Flush all handlers in the QueueListener to ensure writes complete.

    Waits until the queue is drained, then flushes each handler. Safe to
    call from any thread.
    """
    state = get_state()
    if state.queue_listener is not None and state.log_queue is not None:
        # QueueListener doesn't use task_done(), so poll the queue
        start_time = time.time()
        while not state.log_queue.empty():
            if time.time() - start_time > FLUSH_TIMEOUT_SECONDS:
                break
            time.sleep(0.01)

        # Give queue listener thread time to process final records
        time.sleep(0.1)

        for handler in state.queue_listener.handlers:
            with contextlib.suppress(OSError, ValueError):
                handler.flush()


def _cleanup_logging() -> None:
    """Stop the QueueListener on interpreter exit."""
    state = get_state()
    if state.queue_listener is not None:
        flush_all_handlers()
        state.queue_listener.stop()
        state.queue_listener = None


atexit.register(_cleanup_logging)


def get_logger(name: str = ROOT_LOGGER_NAME) -> logging.Logger:
    """Get a logger, initializing the root ``dl_verify`` logger once.

    Child loggers propagate to the root, which owns the only handler (a
    QueueHandler feeding a QueueListener with the console and file
    handlers). This is the way to get a logger in dl-verify modules:

        >>> logger = get_logger(__name__)
        >>> logger.info("Downloading %s", url)

    Args:
        name: Logger name, typically __name__ for module loggers

    Returns:
        Logger instance

    Raises:
        ConfigurationError: If file logging setup fails

    """
    state = get_state()
    with state.lock:
        if not state.root_initialized:
            console_level, file_level, log_file = load_log_settings()
            setup_root_logger(state, console_level, file_level, log_file)

    return logging.getLogger(name)


def set_console_level(level: str) -> None:
    """Change the console handler level of the running listener.

    Args:
        level: Level name, e.g. "DEBUG"

    """
    state = get_state()
    if state.queue_listener is None:
        return
    for handler in state.queue_listener.handlers:
        if isinstance(handler, logging.StreamHandler) and not isinstance(
            handler, RotatingFileHandler
        ):
            handler.setLevel(getattr(logging, level, logging.WARNING))


def clear_logger_state() -> None:
    """Clear global logger state for testing purposes.

    Stops the QueueListener, closes handlers and resets state flags so the
    next ``get_logger`` call starts from scratch.

    Warning:
        Intended for tests only.

    """
    state = get_state()
    with state.lock:
        if state.queue_listener is not None:
            flush_all_handlers()
            state.queue_listener.stop()
            state.queue_listener = None

        state.log_queue = None
        state.root_initialized = False
        state.config_applied = False

        root_logger = logging.getLogger(ROOT_LOGGER_NAME)
        for handler in root_logger.handlers[:]:
            if not isinstance(handler, QueueHandler):
                continue
            handler.close()
            root_logger.removeHandler(handler)
