"""Upgrade command coordinator.

Checks the release feed for a newer client build and, unless only a
check was requested, downloads the disk image, replaces the installed
application and exits so the new version can start.
"""

from argparse import Namespace

from release_desk.cli.commands.base import BaseCommandHandler
from release_desk.core.update import UpdateState
from release_desk.logger import get_logger

logger = get_logger(__name__)


class UpgradeHandler(BaseCommandHandler):
    """Thin coordinator for upgrade command."""

    async def execute(self, args: Namespace) -> None:
        """Execute the upgrade command."""
        controller = self.container.update_controller
        logger.info("🔍 Checking for release-desk updates...")
        snapshot = await controller.check_for_updates()

        if snapshot.state is UpdateState.CHECK_FAILED:
            logger.info("❌ Version check failed: %s", snapshot.error)
            return

        release = snapshot.latest_release
        latest = release.tag_name if release else "-"
        logger.info(
            "Current: %s, Latest: %s", snapshot.current_version, latest
        )

        if args.ignore:
            self._ignore(controller.ignore_latest())
            return

        if snapshot.state is not UpdateState.UPDATE_AVAILABLE:
            logger.info("✨ You are running the latest version.")
            return

        if args.check_only:
            if controller.should_notify():
                logger.info("✅ A newer version is available!")
            else:
                logger.info(
                    "🔕 Release %s is available but ignored.", latest
                )
            return

        logger.info("🚀 Installing %s...", latest)
        await controller.download_and_install()

    def _ignore(self, tag: str | None) -> None:
        """Persist the ignored release tag."""
        if tag is None:
            logger.info("❌ No release to ignore")
            return
        settings = self.container.settings
        settings["update"]["ignored_version"] = tag
        self.config_manager.save_settings(settings)
        logger.info("🔕 Release %s will no longer be announced", tag)
