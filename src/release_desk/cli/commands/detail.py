"""Detail command handler: one app with its version history."""

from argparse import Namespace

from release_desk.cli.commands.base import BaseCommandHandler
from release_desk.cli.commands.helpers import format_date, parse_platform
from release_desk.logger import get_logger

logger = get_logger(__name__)


class DetailHandler(BaseCommandHandler):
    """Handler for the detail command."""

    async def execute(self, args: Namespace) -> None:
        """Load and print the detail of one app."""
        result = await self.container.detail_loader.load_detail(
            args.app_id, parse_platform(args.platform)
        )
        detail = result.detail

        logger.info("📦 %s", detail.name)
        logger.info("  App ID: %s", detail.id)
        logger.info("  Bundle ID: %s", detail.bundle_id)
        logger.info("  SKU: %s", detail.sku or "-")
        logger.info("  Primary Language: %s", detail.primary_language or "-")
        logger.info("  Platform: %s", detail.platform.display_name)
        logger.info("  Version: %s", detail.version or "-")
        logger.info("  Status: %s", detail.status.description)
        logger.info(
            "  Editable: %s", "yes" if detail.status.is_editable else "no"
        )

        logger.info("")
        logger.info("🗂  Versions (%d):", len(detail.release_notes))
        for note in detail.release_notes:
            logger.info(
                "  %-10s %-10s %d locales",
                note.version,
                format_date(note.release_date),
                len(note.localized_notes),
            )

        for failure in result.failures:
            logger.warning(
                "⚠️  Notes of version %s unavailable: %s",
                failure.key,
                failure.message,
            )
