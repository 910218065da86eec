"""Tests for logger configuration helpers."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from logging.handlers import RotatingFileHandler
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from release_desk.logger import (
    clear_logger_state,
    get_logger,
    temporary_console_level,
)
from release_desk.logger.config import (
    load_log_settings,
    update_logger_from_config,
)
from release_desk.logger.state import _LoggerState, get_state


@pytest.fixture
def fresh_logger_state() -> Iterator[None]:
    """Start from a cleared logger state and restore the registry after."""
    saved = dict(logging.Logger.manager.loggerDict)
    clear_logger_state()
    yield
    clear_logger_state()
    logging.Logger.manager.loggerDict.update(saved)


class TestLoadLogSettings:
    """Bootstrap defaults."""

    def test_env_override(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """RELEASE_DESK_LOG_DIR moves the log file."""
        monkeypatch.setenv("RELEASE_DESK_LOG_DIR", str(tmp_path))

        console, file_level, path = load_log_settings()

        assert (console, file_level) == ("INFO", "INFO")
        assert path == tmp_path / "release-desk.log"

    def test_default_location(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Without override logs go below the config directory."""
        monkeypatch.delenv("RELEASE_DESK_LOG_DIR", raising=False)

        _, _, path = load_log_settings()

        assert path.parts[-3:] == ("release-desk", "logs", "release-desk.log")


class TestUpdateFromConfig:
    """Applying settings.conf levels."""

    def test_sets_handler_levels(self, tmp_path: Path) -> None:
        """Console and file handlers get their configured levels."""
        console = logging.StreamHandler()
        file_handler = RotatingFileHandler(tmp_path / "x.log", delay=True)
        state = _LoggerState()
        state.queue_listener = MagicMock(handlers=(console, file_handler))
        manager = MagicMock()
        manager.return_value.load_settings.return_value = {
            "console_log_level": "WARNING",
            "log_level": "DEBUG",
        }

        with patch("release_desk.config.ConfigManager", manager):
            update_logger_from_config(state)

        assert console.level == logging.WARNING
        assert file_handler.level == logging.DEBUG
        assert state.config_applied
        file_handler.close()


class TestTemporaryConsoleLevel:
    """Scoped console verbosity."""

    def test_invalid_level(self) -> None:
        """Unknown level names are rejected."""
        with pytest.raises(ValueError, match="LOUD"):
            with temporary_console_level("LOUD"):
                pass

    def test_restores_level(self) -> None:
        """Console handlers return to their level afterwards."""
        get_logger(__name__)
        listener = get_state().queue_listener
        assert listener is not None
        console = [
            h
            for h in listener.handlers
            if isinstance(h, logging.StreamHandler)
            and not isinstance(h, RotatingFileHandler)
        ]
        before = [h.level for h in console]

        with temporary_console_level("DEBUG"):
            assert all(h.level == logging.DEBUG for h in console)

        assert [h.level for h in console] == before


class TestClearLoggerState:
    """Resetting the logging system between tests."""

    def test_clear_and_reinitialize(
        self, fresh_logger_state: None
    ) -> None:
        """A cleared state is rebuilt by the next get_logger call."""
        state = get_state()
        assert state.queue_listener is None
        assert not state.root_initialized

        logger = get_logger("release_desk.tests.fresh")

        assert state.root_initialized
        assert state.queue_listener is not None
        assert logger.name in logging.Logger.manager.loggerDict

        clear_logger_state()

        assert state.queue_listener is None
        assert not state.root_initialized
        assert "release_desk.tests.fresh" not in (
            logging.Logger.manager.loggerDict
        )
