"""Main logger module providing public API functions.

- setup_logging(): Configure logging with the QueueHandler architecture
- get_logger(): Get or create a logger below the ``release_desk`` root
- flush_all_handlers(): Ensure pending log records are written
- clear_logger_state(): Reset global logger state for tests
"""

import atexit
import contextlib
import logging
import time
from collections.abc import Iterator
from logging.handlers import RotatingFileHandler
from pathlib import Path

from release_desk.logger.config import load_log_settings
from release_desk.logger.handlers import ROOT_LOGGER_NAME, setup_root_logger
from release_desk.logger.state import get_state


def flush_all_handlers() -> None:
    """Flush all handlers in the QueueListener to ensure writes complete.

    Waits (at most five seconds) for the queue to drain, then flushes
    every handler owned by the listener.
    """
    state = get_state()
    if state.queue_listener is None or state.log_queue is None:
        return

    timeout = 5.0
    start_time = time.time()
    while not state.log_queue.empty():
        if time.time() - start_time > timeout:
            break
        time.sleep(0.01)

    # Give listener thread time to process the last dequeued record
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


def setup_logging(
    name: str = ROOT_LOGGER_NAME,
    console_level: str | None = None,
    file_level: str | None = None,
    log_file: Path | None = None,
    enable_file_logging: bool = True,  # noqa: FBT001, FBT002
) -> logging.Logger:
    """Configure logging and return the logger called ``name``.

    The root ``release_desk`` logger is initialized once; every other
    logger is a child that propagates into it.

    Args:
        name: Logger name, typically __name__
        console_level: Console log level ("DEBUG", "INFO", "WARNING")
        file_level: File log level ("DEBUG", "INFO")
        log_file: Path to log file
        enable_file_logging: Whether to enable file logging

    Returns:
        Logger instance

    Raises:
        ConfigurationError: If file logging setup fails

    """
    state = get_state()
    with state.lock:
        if not state.root_initialized:
            cfg_console, cfg_file, cfg_path = load_log_settings()
            setup_root_logger(
                state,
                console_level or cfg_console,
                file_level or cfg_file,
                log_file or cfg_path,
                enable_file_logging,
            )

    return logging.getLogger(name)


def get_logger(
    name: str = ROOT_LOGGER_NAME,
    enable_file_logging: bool = True,  # noqa: FBT001, FBT002
) -> logging.Logger:
    """Get a logger, initializing the logging system on first use.

    Use ``get_logger(__name__)`` in every module so records land under
    the ``release_desk`` hierarchy.

    Args:
        name: Logger name, typically __name__
        enable_file_logging: Whether to enable file logging

    Returns:
        Configured logger instance

    """
    return setup_logging(name=name, enable_file_logging=enable_file_logging)


def clear_logger_state() -> None:
    """Clear global logger state for testing purposes.

    Stops the listener, closes handlers and forgets every
    ``release_desk`` logger so the next test starts clean.
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

        for logger_name in list(logging.Logger.manager.loggerDict.keys()):
            if logger_name.startswith(ROOT_LOGGER_NAME):
                log_instance = logging.getLogger(logger_name)
                for handler in log_instance.handlers[:]:
                    handler.close()
                    log_instance.removeHandler(handler)
                logging.Logger.manager.loggerDict.pop(logger_name, None)


@contextlib.contextmanager
def temporary_console_level(level: str = "INFO") -> Iterator[None]:
    """Temporarily set the console handler level.

    Commands use this to show user-facing output even when
    console_log_level is WARNING, and ``--verbose`` uses it for DEBUG.

    Raises:
        ValueError: If level is not a valid logging level name

    """
    if not isinstance(logging.getLevelName(level), int):
        msg = f"Invalid log level: {level}"
        raise ValueError(msg)

    state = get_state()
    listener = state.queue_listener
    console_handlers = [
        handler
        for handler in (listener.handlers if listener else ())
        if isinstance(handler, logging.StreamHandler)
        and not isinstance(handler, RotatingFileHandler)
    ]
    original_levels = [handler.level for handler in console_handlers]
    for handler in console_handlers:
        handler.setLevel(level)

    try:
        yield
    finally:
        # Drain queued records before their level filter changes back.
        flush_all_handlers()
        for handler, original in zip(
            console_handlers, original_levels, strict=True
        ):
            handler.setLevel(original)
