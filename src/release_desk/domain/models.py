"""Catalog, detail and release-note models.

API resources follow the JSON:API shape used by App Store Connect::

    {"id": "...", "type": "apps", "attributes": {...}}

``from_api_response`` constructors raise DecodeError when a resource is
missing required members so callers never see half-built records.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Protocol, TypeVar

from release_desk.domain.locales import locale_display_name
from release_desk.domain.platform import Platform
from release_desk.domain.status import AppStatus
from release_desk.exceptions import DecodeError


def _resource_parts(
    resource: Any, kind: str
) -> tuple[str, dict[str, Any]]:
    """Return ``(id, attributes)`` of a JSON:API resource.

    Raises:
        DecodeError: If the resource lacks an id or attributes object

    """
    if not isinstance(resource, dict):
        msg = f"{kind} resource is not an object"
        raise DecodeError(msg)
    resource_id = resource.get("id")
    attributes = resource.get("attributes") or {}
    if not resource_id or not isinstance(attributes, dict):
        msg = f"{kind} resource is missing id or attributes"
        raise DecodeError(msg)
    return str(resource_id), attributes


def parse_datetime(value: Any) -> datetime | None:
    """Parse an ISO 8601 timestamp, returning None when absent or bad."""
    if not isinstance(value, str) or not value:
        return None
    try:
        return datetime.fromisoformat(value)
    except ValueError:
        return None


@dataclass(slots=True, frozen=True)
class AppSummary:
    """App stub as listed by the catalog API."""

    id: str
    name: str
    bundle_id: str
    sku: str | None = None
    primary_locale: str | None = None

    @classmethod
    def from_api_response(cls, resource: Any) -> AppSummary:
        """Create from an ``apps`` resource."""
        app_id, attributes = _resource_parts(resource, "apps")
        return cls(
            id=app_id,
            name=attributes.get("name") or "Unknown",
            bundle_id=attributes.get("bundleId") or "",
            sku=attributes.get("sku"),
            primary_locale=attributes.get("primaryLocale"),
        )


@dataclass(slots=True, frozen=True)
class VersionSummary:
    """Version metadata of one App Store version."""

    id: str
    version_string: str
    status: AppStatus
    platform: Platform | None = None
    created_date: datetime | None = None

    @classmethod
    def from_api_response(cls, resource: Any) -> VersionSummary:
        """Create from an ``appStoreVersions`` resource."""
        version_id, attributes = _resource_parts(
            resource, "appStoreVersions"
        )
        platform_value = attributes.get("platform")
        return cls(
            id=version_id,
            version_string=attributes.get("versionString") or "",
            status=AppStatus.from_wire(attributes.get("appStoreState")),
            platform=(
                Platform.from_wire(platform_value) if platform_value else None
            ),
            created_date=parse_datetime(attributes.get("createdDate")),
        )


@dataclass(slots=True, frozen=True)
class AppDetailPayload:
    """Raw detail fetch result: the app plus its versions in server order."""

    app: AppSummary
    versions: list[VersionSummary]


@dataclass(slots=True)
class AppRecord:
    """One display row: a single (app, platform) pair.

    Rows are rebuilt on every refresh. Only ``icon_url`` is filled in
    afterwards, once the icon lookup completes.
    """

    id: str
    app_id: str
    name: str
    bundle_id: str
    platforms: tuple[Platform, ...]
    status: AppStatus
    version: str | None = None
    last_modified: datetime | None = None
    icon_url: str | None = None

    @property
    def platform(self) -> Platform:
        """Primary platform of the row."""
        if self.platforms:
            return self.platforms[0]
        return Platform.guess_from_bundle_id(self.bundle_id)

    @staticmethod
    def row_id(app_id: str, platform: Platform) -> str:
        """Synthetic per-platform row id."""
        return f"{app_id}_{platform.value}"


@dataclass(slots=True, frozen=True)
class LocalizedReleaseNote:
    """Release notes of one version in one locale."""

    id: str
    locale: str
    notes: str
    whats_new: str | None = None

    @classmethod
    def from_api_response(cls, resource: Any) -> LocalizedReleaseNote:
        """Create from an ``appStoreVersionLocalizations`` resource."""
        localization_id, attributes = _resource_parts(
            resource, "appStoreVersionLocalizations"
        )
        locale = attributes.get("locale")
        if not locale:
            msg = f"Localization {localization_id} has no locale"
            raise DecodeError(msg)
        whats_new = attributes.get("whatsNew")
        return cls(
            id=localization_id,
            locale=locale,
            notes=whats_new or "",
            whats_new=whats_new,
        )

    @property
    def display_name(self) -> str:
        """Language name of the locale."""
        return locale_display_name(self.locale)


@dataclass(slots=True, frozen=True)
class ReleaseNote:
    """All localized notes of one version.

    ``localized_notes`` keeps the order it was built with; nothing sorts
    it implicitly.
    """

    id: str
    version: str
    localized_notes: tuple[LocalizedReleaseNote, ...] = ()
    platform: Platform | None = None
    release_date: datetime | None = None

    def for_locale(self, locale: str) -> LocalizedReleaseNote | None:
        """Return the localization for ``locale`` if present."""
        for note in self.localized_notes:
            if note.locale == locale:
                return note
        return None


@dataclass(slots=True, frozen=True)
class AppDetail:
    """Everything the detail view shows for one app."""

    id: str
    name: str
    bundle_id: str
    platform: Platform
    status: AppStatus
    version: str | None = None
    last_modified: datetime | None = None
    sku: str | None = None
    primary_language: str | None = None
    release_notes: tuple[ReleaseNote, ...] = field(default_factory=tuple)

    @property
    def current_release_note(self) -> ReleaseNote | None:
        """Release note of the newest version."""
        return self.release_notes[0] if self.release_notes else None

    def as_record(self) -> AppRecord:
        """Convert to a display row."""
        return AppRecord(
            id=AppRecord.row_id(self.id, self.platform),
            app_id=self.id,
            name=self.name,
            bundle_id=self.bundle_id,
            platforms=(self.platform,),
            status=self.status,
            version=self.version,
            last_modified=self.last_modified,
        )


class _HasPlatform(Protocol):
    @property
    def platform(self) -> Platform | None: ...


P = TypeVar("P", bound=_HasPlatform)


def select_for_platform(
    items: Sequence[P], platform: Platform | None
) -> list[P]:
    """Return items matching ``platform``, or all items if none match.

    Falling back to the unfiltered list keeps a detail view populated
    for apps whose versions carry no or a different platform tag.
    """
    if platform is None:
        return list(items)
    matching = [item for item in items if item.platform == platform]
    return matching if matching else list(items)
