"""Catalog aggregation: apps plus versions merged into display rows."""

from __future__ import annotations

import asyncio
import dataclasses
from collections.abc import Callable, Sequence
from dataclasses import dataclass

from release_desk.constants import DEFAULT_CATALOG_LIMIT
from release_desk.core.catalog.client import RemoteCatalogClient
from release_desk.core.gate import BoundedConcurrencyGate
from release_desk.core.icons import IconResolver
from release_desk.core.state import StatePublisher
from release_desk.domain.models import AppRecord, AppSummary, VersionSummary
from release_desk.domain.platform import Platform
from release_desk.domain.results import ItemFailure
from release_desk.logger import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class CatalogSnapshot:
    """Observable state of the catalog list."""

    rows: tuple[AppRecord, ...] = ()
    is_loading: bool = False
    progress: float = 0.0
    is_complete: bool = False
    last_error: str | None = None
    failures: tuple[ItemFailure, ...] = ()


def _row_sort_key(row: AppRecord) -> tuple[str, int]:
    return row.name, row.platform.display_order


def sort_rows(rows: Sequence[AppRecord]) -> list[AppRecord]:
    """Order rows by name (ordinal, case sensitive), then platform."""
    return sorted(rows, key=_row_sort_key)


def build_rows(
    app: AppSummary, versions: Sequence[VersionSummary]
) -> list[AppRecord]:
    """Build one row per platform the app has versions for.

    Each row takes status, version string and date from the first
    version of its platform in server order, which is the newest. Apps
    without versions yield no rows.
    """
    newest: dict[Platform, VersionSummary] = {}
    for version in versions:
        platform = version.platform or Platform.guess_from_bundle_id(
            app.bundle_id
        )
        newest.setdefault(platform, version)

    return [
        AppRecord(
            id=AppRecord.row_id(app.id, platform),
            app_id=app.id,
            name=app.name,
            bundle_id=app.bundle_id,
            platforms=(platform,),
            status=version.status,
            version=version.version_string or None,
            last_modified=version.created_date,
        )
        for platform, version in newest.items()
    ]


class CatalogAggregator:
    """Loads the catalog and publishes progress as it fills in.

    Per-app version lookups run concurrently under the shared gate. A
    failing app is logged and recorded in ``failures`` without stopping
    the others. Calling ``refresh`` again while a refresh is running
    supersedes it: the older run keeps going but its updates are dropped.
    """

    def __init__(
        self,
        client: RemoteCatalogClient,
        gate: BoundedConcurrencyGate,
        icon_resolver: IconResolver | None = None,
        limit: int = DEFAULT_CATALOG_LIMIT,
    ) -> None:
        """Initialize the aggregator.

        Args:
            client: Catalog API client
            gate: Limits concurrent per-app requests
            icon_resolver: Optional resolver used to backfill icon URLs
            limit: Maximum number of apps to list

        """
        self.client = client
        self.gate = gate
        self.icon_resolver = icon_resolver
        self.limit = limit
        self.state: StatePublisher[CatalogSnapshot] = StatePublisher(
            CatalogSnapshot()
        )
        self._generation = 0

    @property
    def snapshot(self) -> CatalogSnapshot:
        """Latest published state."""
        return self.state.snapshot

    def subscribe(
        self, listener: Callable[[CatalogSnapshot], None]
    ) -> Callable[[], None]:
        """Subscribe to state changes; returns the unsubscribe function."""
        return self.state.subscribe(listener)

    def _publish(self, generation: int, snapshot: CatalogSnapshot) -> bool:
        if generation != self._generation:
            return False
        self.state.publish(snapshot)
        return True

    async def refresh(self) -> CatalogSnapshot:
        """Reload the whole catalog.

        Returns:
            The final snapshot of this run, or the current snapshot if a
            newer refresh superseded it

        Raises:
            Exception: Whatever ``list_apps`` raised; ``last_error`` is
                set before re-raising

        """
        self._generation += 1
        generation = self._generation
        self._publish(generation, CatalogSnapshot(is_loading=True))

        try:
            apps = await self.client.list_apps(limit=self.limit)
        except Exception as e:
            logger.error("Failed to list apps: %s", e)
            failed = CatalogSnapshot(is_loading=False, last_error=str(e))
            self._publish(generation, failed)
            raise

        total = len(apps)
        logger.info("Loading versions for %d apps", total)
        rows: list[AppRecord] = []
        failures: list[ItemFailure] = []
        processed = 0

        async def load_app(app: AppSummary) -> None:
            nonlocal processed
            try:
                async with self.gate:
                    versions = await self.client.list_versions(app.id)
                rows.extend(build_rows(app, versions))
            except Exception as e:
                logger.warning(
                    "Failed to load versions for %s (%s): %s",
                    app.name,
                    app.id,
                    e,
                )
                failures.append(ItemFailure(app.id, str(e)))
            finally:
                processed += 1
                self._publish(
                    generation,
                    CatalogSnapshot(
                        rows=tuple(sort_rows(rows)),
                        is_loading=True,
                        progress=processed / total,
                        failures=tuple(failures),
                    ),
                )

        await asyncio.gather(*(load_app(app) for app in apps))

        final = CatalogSnapshot(
            rows=tuple(sort_rows(rows)),
            is_loading=False,
            progress=1.0,
            is_complete=True,
            failures=tuple(failures),
        )
        if not self._publish(generation, final):
            logger.debug("Discarding superseded refresh #%d", generation)
            return self.snapshot
        if failures:
            logger.warning(
                "Catalog loaded with %d of %d apps failing",
                len(failures),
                total,
            )

        if self.icon_resolver is not None and final.rows:
            final = await self._backfill_icons(
                self.icon_resolver, generation, final
            )
        return final

    async def _backfill_icons(
        self,
        resolver: IconResolver,
        generation: int,
        snapshot: CatalogSnapshot,
    ) -> CatalogSnapshot:
        icons = await resolver.fetch_icons(
            row.bundle_id for row in snapshot.rows
        )
        if generation != self._generation:
            return self.snapshot

        for row in snapshot.rows:
            url = icons.get(row.bundle_id)
            if url:
                row.icon_url = url
        updated = dataclasses.replace(snapshot)
        self._publish(generation, updated)
        return updated
