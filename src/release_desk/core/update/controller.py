"""Self-update state machine.

States and transitions::

    IDLE -> CHECKING -> UPDATE_AVAILABLE | UP_TO_DATE | CHECK_FAILED
    UPDATE_AVAILABLE -> DOWNLOADING -> INSTALLING -> RESTARTING
    DOWNLOADING | INSTALLING -> INSTALL_FAILED -> (retry) DOWNLOADING

Every transition is published as an UpdateSnapshot.
"""

from __future__ import annotations

import os
from collections.abc import Callable
from dataclasses import dataclass, replace
from enum import Enum
from pathlib import Path

from release_desk.core.state import StatePublisher
from release_desk.core.update.download import InstallerDownloader
from release_desk.core.update.feed import GitHubRelease, ReleaseFeed
from release_desk.core.update.installer import (
    DiskImageInstaller,
    default_install_dir,
)
from release_desk.domain.version import is_newer_version
from release_desk.exceptions import NoInstallerAssetError
from release_desk.logger import flush_all_handlers, get_logger

logger = get_logger(__name__)


class UpdateState(Enum):
    """Phase of the self-updater."""

    IDLE = "idle"
    CHECKING = "checking"
    UPDATE_AVAILABLE = "update_available"
    UP_TO_DATE = "up_to_date"
    CHECK_FAILED = "check_failed"
    DOWNLOADING = "downloading"
    INSTALLING = "installing"
    INSTALL_FAILED = "install_failed"
    RESTARTING = "restarting"


@dataclass(frozen=True, slots=True)
class UpdateSnapshot:
    """Observable state of the self-updater."""

    state: UpdateState
    current_version: str
    latest_release: GitHubRelease | None = None
    progress: float = 0.0
    error: str | None = None


def exit_process() -> None:
    """Flush logs and end the process immediately."""
    flush_all_handlers()
    os._exit(0)


class SelfUpdateController:
    """Checks the release feed and replaces the installed application."""

    def __init__(
        self,
        feed: ReleaseFeed,
        downloader: InstallerDownloader,
        installer: DiskImageInstaller,
        current_version: str,
        *,
        install_dir: Path | None = None,
        debug_updater: bool = False,
        ignored_version: str = "",
        terminator: Callable[[], None] = exit_process,
    ) -> None:
        """Initialize the controller.

        Args:
            feed: Release feed to check
            downloader: Downloads the installer image
            installer: Mounts the image and copies the bundle
            current_version: Version of the running client
            install_dir: Directory holding the installed bundle
            debug_updater: Offer any release with an installer, even an
                older one
            ignored_version: Release tag the user chose to skip
            terminator: Called after a successful install

        """
        self.feed = feed
        self.downloader = downloader
        self.installer = installer
        self.install_dir = install_dir or default_install_dir()
        self.debug_updater = debug_updater
        self.ignored_version = ignored_version
        self._terminator = terminator
        self.state: StatePublisher[UpdateSnapshot] = StatePublisher(
            UpdateSnapshot(UpdateState.IDLE, current_version)
        )

    @property
    def snapshot(self) -> UpdateSnapshot:
        """Latest published state."""
        return self.state.snapshot

    def subscribe(
        self, listener: Callable[[UpdateSnapshot], None]
    ) -> Callable[[], None]:
        """Subscribe to state changes; returns the unsubscribe function."""
        return self.state.subscribe(listener)

    def _transition(self, state: UpdateState, **changes: object) -> None:
        self.state.publish(replace(self.snapshot, state=state, **changes))
        logger.debug("Updater state: %s", state.value)

    def _is_update(self, release: GitHubRelease) -> bool:
        if release.installer_asset is None:
            logger.debug("Release %s has no installer", release.tag_name)
            return False
        if self.debug_updater:
            return True
        return is_newer_version(
            release.tag_name, self.snapshot.current_version
        )

    async def check_for_updates(self) -> UpdateSnapshot:
        """Query the feed and publish whether an update is available.

        Check failures end in CHECK_FAILED with the error message; they
        are not raised.
        """
        self._transition(UpdateState.CHECKING, error=None, progress=0.0)
        try:
            release = await self.feed.fetch_latest()
        except Exception as e:  # noqa: BLE001
            logger.warning("Update check failed: %s", e)
            self._transition(UpdateState.CHECK_FAILED, error=str(e))
            return self.snapshot

        if self._is_update(release):
            logger.info(
                "Update available: %s (current %s)",
                release.tag_name,
                self.snapshot.current_version,
            )
            self._transition(
                UpdateState.UPDATE_AVAILABLE, latest_release=release
            )
        else:
            self._transition(UpdateState.UP_TO_DATE, latest_release=release)
        return self.snapshot

    def should_notify(self) -> bool:
        """True when an update is available and was not ignored."""
        release = self.snapshot.latest_release
        if self.snapshot.state is not UpdateState.UPDATE_AVAILABLE:
            return False
        if release is None:
            return False
        ignored = self.ignored_version.strip()
        return not ignored or ignored not in (
            release.tag_name,
            release.version,
        )

    def ignore_latest(self) -> str | None:
        """Skip notifications for the latest known release.

        Returns:
            The ignored tag, for the caller to persist

        """
        release = self.snapshot.latest_release
        if release is None:
            return None
        self.ignored_version = release.tag_name
        return release.tag_name

    def _on_progress(self, progress: float) -> None:
        self._transition(UpdateState.DOWNLOADING, progress=progress)

    async def download_and_install(self) -> None:
        """Download the installer, replace the application and restart.

        Raises:
            NoInstallerAssetError: If the latest release has no installer
            UpdateError: If downloading, mounting or copying fails
            Exception: Transport errors from the download

        """
        release = self.snapshot.latest_release
        try:
            asset = release.installer_asset if release else None
            if asset is None:
                msg = "Latest release has no installer image"
                raise NoInstallerAssetError(
                    msg, target=release.tag_name if release else None
                )

            self._transition(
                UpdateState.DOWNLOADING, progress=0.0, error=None
            )
            image = await self.downloader.download(
                asset, on_progress=self._on_progress
            )
            self._transition(UpdateState.DOWNLOADING, progress=1.0)

            self._transition(UpdateState.INSTALLING)
            await self.installer.install(image, self.install_dir)
            image.unlink(missing_ok=True)
        except Exception as e:
            logger.error("Update installation failed: %s", e)
            self._transition(UpdateState.INSTALL_FAILED, error=str(e))
            raise

        logger.info("Installed %s, restarting", asset.name)
        self._transition(UpdateState.RESTARTING)
        self._terminator()

    async def retry(self) -> None:
        """Start the download and install again from scratch."""
        await self.download_and_install()
