"""Logging utilities for release-desk.

Architecture:
    Application → QueueHandler → Queue → QueueListener Thread
                                              ↓
                                    Console + File Handlers

Usage:
    >>> from release_desk.logger import get_logger
    >>> logger = get_logger(__name__)
    >>> logger.info("Loaded %d apps", count)  # Use %-style formatting

RULES FOR CONTRIBUTORS:
    1. Always use: logger = get_logger(__name__)
    2. Never call logging.basicConfig()
    3. Never attach handlers to child loggers
    4. Never use f-strings in log calls

Environment Variables:
    RELEASE_DESK_LOG_DIR: Override the log directory (used by tests).
"""

from release_desk.logger.config import (
    update_logger_from_config as _update_config,
)
from release_desk.logger.formatters import (
    ColoredConsoleFormatter,
    HybridConsoleFormatter,
    SimpleConsoleFormatter,
)
from release_desk.logger.handlers import ConfigurationError
from release_desk.logger.logger import (
    clear_logger_state,
    flush_all_handlers,
    get_logger,
    setup_logging,
    temporary_console_level,
)
from release_desk.logger.state import get_state

__all__ = [
    "ColoredConsoleFormatter",
    "ConfigurationError",
    "HybridConsoleFormatter",
    "SimpleConsoleFormatter",
    "clear_logger_state",
    "flush_all_handlers",
    "get_logger",
    "setup_logging",
    "temporary_console_level",
    "update_logger_from_config",
]


def update_logger_from_config() -> None:
    """Apply settings.conf log levels to the running handlers."""
    _update_config(get_state())
