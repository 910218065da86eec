"""App Store Connect REST client.

Thin typed wrapper over the handful of endpoints release-desk needs.
Each call signs the request, checks the status and decodes the JSON:API
document into domain models. Transport failures (``aiohttp.ClientError``,
timeouts) propagate unchanged; nothing is retried.
"""

from __future__ import annotations

from typing import Any

import aiohttp
import orjson

from release_desk.constants import ASC_BASE_URL, MAX_PAGE_LIMIT
from release_desk.core.auth import RequestSigner
from release_desk.domain.models import (
    AppDetailPayload,
    AppSummary,
    LocalizedReleaseNote,
    VersionSummary,
)
from release_desk.domain.platform import Platform
from release_desk.exceptions import (
    DecodeError,
    MissingLocalizationError,
    NotConfiguredError,
    RemoteError,
)
from release_desk.logger import get_logger

logger = get_logger(__name__)

APP_FIELDS = "name,bundleId,sku,primaryLocale"
VERSION_FIELDS = "versionString,appStoreState,platform,createdDate"
LOCALIZATION_FIELDS = "locale,whatsNew"


def _check_limit(limit: int) -> str:
    if not 1 <= limit <= MAX_PAGE_LIMIT:
        msg = f"limit must be between 1 and {MAX_PAGE_LIMIT}, got {limit}"
        raise ValueError(msg)
    return str(limit)


class RemoteCatalogClient:
    """Client for the App Store Connect catalog endpoints.

    Usage:
        >>> client = RemoteCatalogClient(session, signer)
        >>> apps = await client.list_apps(limit=50)

    A client built without a signer is valid but every call raises
    NotConfiguredError, so the rest of the application can be wired
    before credentials exist.
    """

    def __init__(
        self,
        session: aiohttp.ClientSession,
        signer: RequestSigner | None = None,
        base_url: str = ASC_BASE_URL,
    ) -> None:
        """Initialize the client.

        Args:
            session: Shared aiohttp session
            signer: Request signer; None when credentials are missing
            base_url: API root, without trailing slash

        """
        self.session = session
        self.signer = signer
        self.base_url = base_url.rstrip("/")

    @property
    def is_configured(self) -> bool:
        """True when requests can be signed."""
        return self.signer is not None

    async def _request(
        self,
        method: str,
        path: str,
        params: dict[str, str] | None = None,
        body: dict[str, Any] | None = None,
    ) -> Any:
        """Send a signed request and return the decoded JSON document.

        Raises:
            NotConfiguredError: If no signer is configured
            RemoteError: For non-2xx responses
            DecodeError: If the body is not valid JSON

        """
        if self.signer is None:
            raise NotConfiguredError(target=path)

        headers = self.signer.apply_auth({"Accept": "application/json"})
        data = None
        if body is not None:
            headers["Content-Type"] = "application/json"
            data = orjson.dumps(body)

        url = f"{self.base_url}{path}"
        logger.debug("%s %s %s", method, path, params or "")
        async with self.session.request(
            method, url, params=params, data=data, headers=headers
        ) as response:
            raw = await response.read()
            if not 200 <= response.status < 300:
                text = raw.decode("utf-8", errors="replace")
                logger.debug(
                    "%s %s failed with HTTP %d", method, path, response.status
                )
                raise RemoteError(response.status, text, target=path)

        try:
            return orjson.loads(raw)
        except orjson.JSONDecodeError as e:
            msg = f"Invalid JSON from {path}: {e}"
            raise DecodeError(msg, target=path) from e

    @staticmethod
    def _data_list(document: Any, path: str) -> list[Any]:
        data = document.get("data") if isinstance(document, dict) else None
        if not isinstance(data, list):
            msg = "Expected a list under 'data'"
            raise DecodeError(msg, target=path)
        return data

    @staticmethod
    def _data_object(document: Any, path: str) -> dict[str, Any]:
        data = document.get("data") if isinstance(document, dict) else None
        if not isinstance(data, dict):
            msg = "Expected an object under 'data'"
            raise DecodeError(msg, target=path)
        return data

    async def list_apps(self, limit: int = MAX_PAGE_LIMIT) -> list[AppSummary]:
        """List the apps of the account (one page, no pagination).

        Args:
            limit: Maximum number of apps, 1 to 200

        Returns:
            Apps in server order

        """
        path = "/v1/apps"
        document = await self._request(
            "GET",
            path,
            params={"fields[apps]": APP_FIELDS, "limit": _check_limit(limit)},
        )
        return [
            AppSummary.from_api_response(item)
            for item in self._data_list(document, path)
        ]

    async def _fetch_versions(
        self, app_id: str, limit: int, platform: Platform | None
    ) -> list[VersionSummary]:
        path = f"/v1/apps/{app_id}/appStoreVersions"
        params = {
            "fields[appStoreVersions]": VERSION_FIELDS,
            "limit": _check_limit(limit),
        }
        if platform is not None:
            params["filter[platform]"] = platform.value
        document = await self._request("GET", path, params=params)
        return [
            VersionSummary.from_api_response(item)
            for item in self._data_list(document, path)
        ]

    async def list_versions(
        self,
        app_id: str,
        limit: int = MAX_PAGE_LIMIT,
        platform: Platform | None = None,
    ) -> list[VersionSummary]:
        """List App Store versions of an app, newest first as served.

        When a platform filter matches nothing, the unfiltered list is
        fetched and returned instead.

        Args:
            app_id: App identifier
            limit: Maximum number of versions, 1 to 200
            platform: Optional platform filter

        Returns:
            Versions in server order

        """
        versions = await self._fetch_versions(app_id, limit, platform)
        if platform is not None and not versions:
            logger.debug(
                "No %s versions for app %s, fetching all platforms",
                platform.value,
                app_id,
            )
            versions = await self._fetch_versions(app_id, limit, None)
        return versions

    async def fetch_app_detail(self, app_id: str) -> AppDetailPayload:
        """Fetch one app together with its versions."""
        path = f"/v1/apps/{app_id}"
        document = await self._request(
            "GET", path, params={"fields[apps]": APP_FIELDS}
        )
        app = AppSummary.from_api_response(self._data_object(document, path))
        versions = await self.list_versions(app_id)
        return AppDetailPayload(app=app, versions=versions)

    async def fetch_localized_notes(
        self, version_id: str
    ) -> list[LocalizedReleaseNote]:
        """Fetch every localization of a version."""
        path = (
            f"/v1/appStoreVersions/{version_id}"
            "/appStoreVersionLocalizations"
        )
        document = await self._request(
            "GET",
            path,
            params={
                "fields[appStoreVersionLocalizations]": LOCALIZATION_FIELDS,
                "limit": str(MAX_PAGE_LIMIT),
            },
        )
        return [
            LocalizedReleaseNote.from_api_response(item)
            for item in self._data_list(document, path)
        ]

    async def update_localized_note(
        self, localization_id: str, text: str
    ) -> LocalizedReleaseNote:
        """Replace the "What's New" text of one localization.

        Returns:
            The localization as stored by the server

        Raises:
            MissingLocalizationError: If the response lacks the locale or
                the updated text

        """
        path = f"/v1/appStoreVersionLocalizations/{localization_id}"
        document = await self._request(
            "PATCH",
            path,
            body={
                "data": {
                    "type": "appStoreVersionLocalizations",
                    "id": localization_id,
                    "attributes": {"whatsNew": text},
                }
            },
        )
        resource = self._data_object(document, path)
        attributes = resource.get("attributes")
        if (
            not isinstance(attributes, dict)
            or not attributes.get("locale")
            or "whatsNew" not in attributes
        ):
            msg = "Update response has no locale or whatsNew"
            raise MissingLocalizationError(msg, target=localization_id)
        return LocalizedReleaseNote.from_api_response(resource)

    async def test_connection(self) -> bool:
        """Return True if a minimal listing succeeds. Never raises."""
        try:
            await self.list_apps(limit=1)
        except Exception as e:  # noqa: BLE001
            logger.warning("Connection test failed: %s", e)
            return False
        return True
