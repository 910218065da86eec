"""Apps command handler: list the catalog, one row per platform."""

from argparse import Namespace

from release_desk.cli.commands.base import BaseCommandHandler
from release_desk.cli.commands.helpers import format_date, truncate
from release_desk.core.catalog import CatalogSnapshot
from release_desk.logger import get_logger

logger = get_logger(__name__)

NAME_WIDTH = 28


class AppsHandler(BaseCommandHandler):
    """Handler for the apps command."""

    async def execute(self, args: Namespace) -> None:
        """Refresh the catalog and print its rows."""
        aggregator = self.container.create_aggregator(with_icons=args.icons)
        if args.limit is not None:
            aggregator.limit = args.limit

        unsubscribe = aggregator.subscribe(self._log_progress)
        try:
            snapshot = await aggregator.refresh()
        finally:
            unsubscribe()
        self._print_rows(snapshot, show_icons=args.icons)

    @staticmethod
    def _log_progress(snapshot: CatalogSnapshot) -> None:
        if snapshot.is_loading and snapshot.progress:
            logger.debug("Catalog progress: %.0f%%", snapshot.progress * 100)

    @staticmethod
    def _print_rows(snapshot: CatalogSnapshot, *, show_icons: bool) -> None:
        rows = snapshot.rows
        logger.info("📋 Apps (%d rows):", len(rows))
        logger.info("")
        if not rows:
            logger.info("  None found")
        for row in rows:
            logger.info(
                "  %s %-9s %-10s %-10s %s",
                f"{truncate(row.name, NAME_WIDTH):<{NAME_WIDTH}}",
                row.platform.display_name,
                row.version or "-",
                format_date(row.last_modified),
                row.status.description,
            )
            if show_icons and row.icon_url:
                logger.info("  %s icon: %s", " " * NAME_WIDTH, row.icon_url)

        if snapshot.failures:
            logger.info("")
            logger.warning(
                "⚠️  %d apps could not be loaded:", len(snapshot.failures)
            )
            for failure in snapshot.failures:
                logger.warning("  %s: %s", failure.key, failure.message)
