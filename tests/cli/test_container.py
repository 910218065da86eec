"""Tests for ServiceContainer wiring."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import MagicMock

import pytest

from release_desk.cli.container import ServiceContainer
from release_desk.config import AppStoreConnectConfig
from release_desk.core.auth import JWTRequestSigner


@pytest.fixture
def config_manager(tmp_path: Path) -> MagicMock:
    """Config manager returning fixed settings and no credentials."""
    manager = MagicMock()
    manager.load_settings.return_value = {
        "max_concurrent_requests": 3,
        "catalog_limit": 42,
        "network": {"timeout_seconds": 10},
        "directory": {"tmp": tmp_path},
        "update": {
            "owner": "rijieli",
            "repo": "Release",
            "debug_updater": False,
            "ignored_version": "",
        },
    }
    manager.load_credentials.return_value = AppStoreConnectConfig()
    return manager


class TestLazyServices:
    """Services are built once on demand."""

    def test_settings_loaded_once(self, config_manager: MagicMock) -> None:
        """Settings are cached after the first read."""
        container = ServiceContainer(config_manager)

        assert container.settings is container.settings
        config_manager.load_settings.assert_called_once_with()

    def test_signer_requires_credentials(
        self, config_manager: MagicMock
    ) -> None:
        """Without credentials there is no signer."""
        assert ServiceContainer(config_manager).signer is None

    def test_signer_with_credentials(
        self, config_manager: MagicMock
    ) -> None:
        """Complete credentials produce a JWT signer."""
        config_manager.load_credentials.return_value = (
            AppStoreConnectConfig("issuer", "KEY", "pem")
        )
        container = ServiceContainer(config_manager)

        assert isinstance(container.signer, JWTRequestSigner)
        assert container.signer is container.signer

    @pytest.mark.asyncio
    async def test_wiring_and_cleanup(
        self, config_manager: MagicMock
    ) -> None:
        """Services share one session which cleanup closes."""
        container = ServiceContainer(config_manager)

        aggregator = container.create_aggregator(with_icons=True)
        session = container.session

        assert container.client is container.client
        assert container.gate.capacity == 3
        assert aggregator.limit == 42
        assert container.aggregator is container.aggregator
        assert container.detail_loader is container.detail_loader
        assert container.update_controller is container.update_controller

        await container.cleanup()

        assert session.closed

    @pytest.mark.asyncio
    async def test_cleanup_without_session(
        self, config_manager: MagicMock
    ) -> None:
        """Cleanup is a no-op when nothing was created."""
        container = ServiceContainer(config_manager)

        await container.cleanup()

        config_manager.load_settings.assert_not_called()
