"""Dependency injection container for service wiring.

The container is the composition root of the CLI: it creates the shared
HTTP session once and wires every core service with explicit
dependencies. Services are created lazily on first access, so commands
that never talk to App Store Connect never touch the keyring.

Usage:
    >>> container = ServiceContainer(ConfigManager())
    >>> try:
    ...     snapshot = await container.aggregator.refresh()
    ... finally:
    ...     await container.cleanup()
"""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import aiohttp

from release_desk import __version__
from release_desk.config import AppStoreConnectConfig, ConfigManager
from release_desk.core.auth import JWTRequestSigner
from release_desk.core.catalog import (
    AppDetailLoader,
    CatalogAggregator,
    RemoteCatalogClient,
)
from release_desk.core.gate import BoundedConcurrencyGate
from release_desk.core.http_session import build_session
from release_desk.core.icons import IconResolver
from release_desk.core.release_notes import ReleaseNoteEditor
from release_desk.core.update import (
    DiskImageInstaller,
    InstallerDownloader,
    ReleaseFeed,
    SelfUpdateController,
)
from release_desk.core.update.controller import exit_process
from release_desk.domain.models import AppDetail
from release_desk.logger import get_logger
from release_desk.types import Settings

logger = get_logger(__name__)


class ServiceContainer:
    """Container for managing service lifecycle and dependencies.

    Not thread-safe. Safe for concurrent use within one event loop. Each
    CLI invocation uses its own container and must call ``cleanup()``.
    """

    def __init__(
        self,
        config_manager: ConfigManager | None = None,
        *,
        install_dir: Path | None = None,
        terminator: Callable[[], None] = exit_process,
    ) -> None:
        """Initialize container with required infrastructure.

        Args:
            config_manager: Configuration manager; default if omitted
            install_dir: Override for the installed application directory
            terminator: Called after a successful self-update

        """
        self.config = config_manager or ConfigManager()
        self._install_dir = install_dir
        self._terminator = terminator

        self._settings: Settings | None = None
        self._credentials: AppStoreConnectConfig | None = None
        self._session: aiohttp.ClientSession | None = None
        self._signer: JWTRequestSigner | None = None
        self._client: RemoteCatalogClient | None = None
        self._gate: BoundedConcurrencyGate | None = None
        self._icon_resolver: IconResolver | None = None
        self._aggregator: CatalogAggregator | None = None
        self._detail_loader: AppDetailLoader | None = None
        self._update_controller: SelfUpdateController | None = None

    @property
    def settings(self) -> Settings:
        """Settings (loaded once, cached)."""
        if self._settings is None:
            self._settings = self.config.load_settings()
        return self._settings

    @property
    def credentials(self) -> AppStoreConnectConfig:
        """Stored App Store Connect credentials (loaded once)."""
        if self._credentials is None:
            self._credentials = self.config.load_credentials()
        return self._credentials

    @property
    def session(self) -> aiohttp.ClientSession:
        """HTTP session (singleton, lazy-loaded)."""
        if self._session is None:
            self._session = build_session(self.settings)
            logger.debug("Created new HTTP session")
        return self._session

    @property
    def signer(self) -> JWTRequestSigner | None:
        """Request signer, or None while credentials are incomplete."""
        if self._signer is None and self.credentials.is_valid:
            self._signer = JWTRequestSigner(self.credentials)
        return self._signer

    @property
    def client(self) -> RemoteCatalogClient:
        """App Store Connect client (singleton, lazy-loaded)."""
        if self._client is None:
            self._client = RemoteCatalogClient(self.session, self.signer)
        return self._client

    @property
    def gate(self) -> BoundedConcurrencyGate:
        """Gate shared by per-app and per-version requests."""
        if self._gate is None:
            self._gate = BoundedConcurrencyGate(
                self.settings["max_concurrent_requests"]
            )
        return self._gate

    @property
    def icon_resolver(self) -> IconResolver:
        """iTunes icon resolver (singleton, lazy-loaded)."""
        if self._icon_resolver is None:
            self._icon_resolver = IconResolver(self.session)
        return self._icon_resolver

    def create_aggregator(self, with_icons: bool = False) -> CatalogAggregator:
        """Create a catalog aggregator, optionally resolving icons."""
        return CatalogAggregator(
            self.client,
            self.gate,
            icon_resolver=self.icon_resolver if with_icons else None,
            limit=self.settings["catalog_limit"],
        )

    @property
    def aggregator(self) -> CatalogAggregator:
        """Catalog aggregator without icon lookups."""
        if self._aggregator is None:
            self._aggregator = self.create_aggregator()
        return self._aggregator

    @property
    def detail_loader(self) -> AppDetailLoader:
        """App detail loader (singleton, lazy-loaded)."""
        if self._detail_loader is None:
            self._detail_loader = AppDetailLoader(self.client, self.gate)
        return self._detail_loader

    def create_editor(self, detail: AppDetail) -> ReleaseNoteEditor:
        """Create a release-note editor for a loaded detail."""
        return ReleaseNoteEditor(detail, self.client)

    @property
    def update_controller(self) -> SelfUpdateController:
        """Self-update controller (singleton, lazy-loaded)."""
        if self._update_controller is None:
            update = self.settings["update"]
            feed = ReleaseFeed(self.session, update["owner"], update["repo"])
            downloader = InstallerDownloader(
                self.session, self.settings["directory"]["tmp"]
            )
            self._update_controller = SelfUpdateController(
                feed,
                downloader,
                DiskImageInstaller(),
                __version__,
                install_dir=self._install_dir,
                debug_updater=update["debug_updater"],
                ignored_version=update["ignored_version"],
                terminator=self._terminator,
            )
        return self._update_controller

    async def cleanup(self) -> None:
        """Close the HTTP session if it was created."""
        if self._session is not None and not self._session.closed:
            await self._session.close()
            logger.debug("Closed HTTP session")
        self._session = None
