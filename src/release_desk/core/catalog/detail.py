"""Per-app detail loading with release-note fan-out."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field

from release_desk.core.catalog.client import RemoteCatalogClient
from release_desk.core.gate import BoundedConcurrencyGate
from release_desk.domain.models import (
    AppDetail,
    LocalizedReleaseNote,
    ReleaseNote,
    VersionSummary,
    select_for_platform,
)
from release_desk.domain.platform import Platform
from release_desk.domain.results import ItemFailure
from release_desk.domain.status import AppStatus
from release_desk.logger import get_logger

logger = get_logger(__name__)


@dataclass(slots=True, frozen=True)
class DetailLoadResult:
    """Loaded detail plus the versions whose notes could not be fetched."""

    detail: AppDetail
    failures: list[ItemFailure] = field(default_factory=list)


class AppDetailLoader:
    """Builds an AppDetail from the detail payload and per-version notes."""

    def __init__(
        self, client: RemoteCatalogClient, gate: BoundedConcurrencyGate
    ) -> None:
        self.client = client
        self.gate = gate

    async def _notes_for(
        self, version: VersionSummary
    ) -> list[LocalizedReleaseNote]:
        async with self.gate:
            return await self.client.fetch_localized_notes(version.id)

    async def load_detail(
        self, app_id: str, platform: Platform | None = None
    ) -> DetailLoadResult:
        """Load an app and the release notes of its versions.

        Versions are narrowed to ``platform`` when any match it. Note
        lookups run concurrently under the gate; a version whose lookup
        fails is left out and reported in ``failures`` while the others
        keep server order.

        Args:
            app_id: App identifier
            platform: Platform whose versions to show

        Returns:
            DetailLoadResult with the assembled AppDetail

        """
        payload = await self.client.fetch_app_detail(app_id)
        versions = select_for_platform(payload.versions, platform)

        outcomes = await asyncio.gather(
            *(self._notes_for(version) for version in versions),
            return_exceptions=True,
        )

        release_notes: list[ReleaseNote] = []
        failures: list[ItemFailure] = []
        for version, outcome in zip(versions, outcomes, strict=True):
            if isinstance(outcome, BaseException):
                if not isinstance(outcome, Exception):
                    raise outcome
                logger.warning(
                    "Skipping notes of version %s (%s): %s",
                    version.version_string,
                    version.id,
                    outcome,
                )
                failures.append(ItemFailure(version.id, str(outcome)))
                continue
            release_notes.append(
                ReleaseNote(
                    id=version.id,
                    version=version.version_string,
                    localized_notes=tuple(outcome),
                    platform=version.platform,
                    release_date=version.created_date,
                )
            )

        app = payload.app
        newest = versions[0] if versions else None
        if newest is not None:
            status = newest.status
            version_string: str | None = newest.version_string
            last_modified = newest.created_date
            detail_platform = newest.platform or Platform.guess_from_bundle_id(
                app.bundle_id
            )
        else:
            status = AppStatus.NOT_APPLICABLE
            version_string = None
            last_modified = None
            detail_platform = Platform.guess_from_bundle_id(app.bundle_id)

        detail = AppDetail(
            id=app.id,
            name=app.name,
            bundle_id=app.bundle_id,
            platform=detail_platform,
            status=status,
            version=version_string,
            last_modified=last_modified,
            sku=app.sku,
            primary_language=app.primary_locale,
            release_notes=tuple(release_notes),
        )
        logger.debug(
            "Loaded detail for %s: %d versions, %d failed",
            app.name,
            len(release_notes),
            len(failures),
        )
        return DetailLoadResult(detail=detail, failures=failures)
