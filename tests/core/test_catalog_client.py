"""Tests for RemoteCatalogClient."""

from __future__ import annotations

from typing import Any
from unittest.mock import MagicMock

import orjson
import pytest
from conftest import StaticSigner, make_response

from release_desk.core.catalog.client import RemoteCatalogClient
from release_desk.domain.platform import Platform
from release_desk.domain.status import AppStatus
from release_desk.exceptions import (
    DecodeError,
    MissingLocalizationError,
    NotConfiguredError,
    RemoteError,
)


def app_resource(app_id: str, name: str, bundle_id: str) -> dict[str, Any]:
    """JSON:API ``apps`` resource."""
    return {
        "type": "apps",
        "id": app_id,
        "attributes": {"name": name, "bundleId": bundle_id, "sku": "SKU1"},
    }


def version_resource(
    version_id: str,
    version: str,
    platform: str = "IOS",
    state: str = "READY_FOR_SALE",
) -> dict[str, Any]:
    """JSON:API ``appStoreVersions`` resource."""
    return {
        "type": "appStoreVersions",
        "id": version_id,
        "attributes": {
            "versionString": version,
            "appStoreState": state,
            "platform": platform,
            "createdDate": "2024-05-01T10:00:00-07:00",
        },
    }


@pytest.fixture
def client(
    mock_session: MagicMock, signer: StaticSigner
) -> RemoteCatalogClient:
    """Client with a mocked session and fixed signer."""
    return RemoteCatalogClient(mock_session, signer)


class TestRequest:
    """Signing, status and decoding behavior shared by every call."""

    @pytest.mark.asyncio
    async def test_without_signer_raises_not_configured(
        self, mock_session: MagicMock
    ) -> None:
        """No request is sent without credentials."""
        client = RemoteCatalogClient(mock_session)

        with pytest.raises(NotConfiguredError):
            await client.list_apps()

        assert not client.is_configured
        mock_session.request.assert_not_called()

    @pytest.mark.asyncio
    async def test_requests_are_signed(
        self, client: RemoteCatalogClient, mock_session: MagicMock
    ) -> None:
        """Requests carry the bearer token and JSON accept header."""
        mock_session.request.return_value = make_response(body={"data": []})

        await client.list_apps(limit=50)

        args = mock_session.request.call_args
        assert args.args == (
            "GET",
            "https://api.appstoreconnect.apple.com/v1/apps",
        )
        assert args.kwargs["headers"]["Authorization"] == "Bearer test-token"
        assert args.kwargs["headers"]["Accept"] == "application/json"
        assert args.kwargs["params"]["limit"] == "50"
        assert args.kwargs["params"]["fields[apps]"] == (
            "name,bundleId,sku,primaryLocale"
        )
        assert args.kwargs["data"] is None

    @pytest.mark.asyncio
    async def test_error_status_raises_remote_error(
        self, client: RemoteCatalogClient, mock_session: MagicMock
    ) -> None:
        """Non-2xx answers become RemoteError with status and body."""
        mock_session.request.return_value = make_response(
            status=401, body=b'{"errors": [{"status": "401"}]}'
        )

        with pytest.raises(RemoteError) as exc_info:
            await client.list_apps()

        assert exc_info.value.status == 401
        assert "errors" in exc_info.value.body
        assert exc_info.value.target == "/v1/apps"

    @pytest.mark.asyncio
    async def test_invalid_json_raises_decode_error(
        self, client: RemoteCatalogClient, mock_session: MagicMock
    ) -> None:
        """A body that is not JSON is a decode failure."""
        mock_session.request.return_value = make_response(body=b"<html>")

        with pytest.raises(DecodeError):
            await client.list_apps()

    @pytest.mark.asyncio
    async def test_unexpected_shape_raises_decode_error(
        self, client: RemoteCatalogClient, mock_session: MagicMock
    ) -> None:
        """A document without a data list is a decode failure."""
        mock_session.request.return_value = make_response(
            body={"data": {"id": "1"}}
        )

        with pytest.raises(DecodeError):
            await client.list_apps()

    @pytest.mark.parametrize("limit", [0, 201])
    @pytest.mark.asyncio
    async def test_limit_out_of_range(
        self, client: RemoteCatalogClient, limit: int
    ) -> None:
        """Limits outside 1..200 are rejected before any request."""
        with pytest.raises(ValueError, match="limit"):
            await client.list_apps(limit=limit)


class TestListing:
    """Apps and versions."""

    @pytest.mark.asyncio
    async def test_list_apps_decodes_resources(
        self, client: RemoteCatalogClient, mock_session: MagicMock
    ) -> None:
        """Apps are returned in server order."""
        mock_session.request.return_value = make_response(
            body={
                "data": [
                    app_resource("2", "Zeta", "com.example.zeta"),
                    app_resource("1", "Alpha", "com.example.alpha"),
                ]
            }
        )

        apps = await client.list_apps()

        assert [app.id for app in apps] == ["2", "1"]
        assert apps[1].name == "Alpha"
        assert apps[1].bundle_id == "com.example.alpha"

    @pytest.mark.asyncio
    async def test_list_versions_with_platform_filter(
        self, client: RemoteCatalogClient, mock_session: MagicMock
    ) -> None:
        """A matching platform filter needs a single request."""
        mock_session.request.return_value = make_response(
            body={"data": [version_resource("v1", "2.0", "MAC_OS")]}
        )

        versions = await client.list_versions("1", platform=Platform.MAC_OS)

        assert mock_session.request.call_count == 1
        params = mock_session.request.call_args.kwargs["params"]
        assert params["filter[platform]"] == "MAC_OS"
        assert versions[0].platform is Platform.MAC_OS
        assert versions[0].status is AppStatus.READY_FOR_SALE

    @pytest.mark.asyncio
    async def test_empty_filtered_versions_fall_back_to_all(
        self, client: RemoteCatalogClient, mock_session: MagicMock
    ) -> None:
        """An empty filtered list is retried without the filter."""
        mock_session.request.side_effect = [
            make_response(body={"data": []}),
            make_response(body={"data": [version_resource("v1", "1.0")]}),
        ]

        versions = await client.list_versions("1", platform=Platform.TV_OS)

        assert [v.id for v in versions] == ["v1"]
        second = mock_session.request.call_args_list[1]
        assert "filter[platform]" not in second.kwargs["params"]

    @pytest.mark.asyncio
    async def test_empty_versions_without_filter(
        self, client: RemoteCatalogClient, mock_session: MagicMock
    ) -> None:
        """Without a filter an empty list is returned as is."""
        mock_session.request.return_value = make_response(body={"data": []})

        assert await client.list_versions("1") == []
        assert mock_session.request.call_count == 1

    @pytest.mark.asyncio
    async def test_fetch_app_detail(
        self, client: RemoteCatalogClient, mock_session: MagicMock
    ) -> None:
        """Detail combines the app resource and its versions."""
        mock_session.request.side_effect = [
            make_response(
                body={"data": app_resource("9", "Notes", "com.example.n")}
            ),
            make_response(
                body={
                    "data": [
                        version_resource("v2", "2.0"),
                        version_resource("v1", "1.0"),
                    ]
                }
            ),
        ]

        payload = await client.fetch_app_detail("9")

        assert payload.app.name == "Notes"
        assert [v.version_string for v in payload.versions] == ["2.0", "1.0"]
        first_url = mock_session.request.call_args_list[0].args[1]
        assert first_url.endswith("/v1/apps/9")


class TestLocalizations:
    """Fetching and updating "What's New" text."""

    @pytest.mark.asyncio
    async def test_fetch_localized_notes(
        self, client: RemoteCatalogClient, mock_session: MagicMock
    ) -> None:
        """Localizations decode with empty text for missing whatsNew."""
        mock_session.request.return_value = make_response(
            body={
                "data": [
                    {
                        "id": "loc1",
                        "attributes": {
                            "locale": "en-US",
                            "whatsNew": "Fixes",
                        },
                    },
                    {"id": "loc2", "attributes": {"locale": "de-DE"}},
                ]
            }
        )

        notes = await client.fetch_localized_notes("v1")

        assert [(n.locale, n.notes) for n in notes] == [
            ("en-US", "Fixes"),
            ("de-DE", ""),
        ]
        url = mock_session.request.call_args.args[1]
        assert url.endswith(
            "/v1/appStoreVersions/v1/appStoreVersionLocalizations"
        )

    @pytest.mark.asyncio
    async def test_update_sends_patch_body(
        self, client: RemoteCatalogClient, mock_session: MagicMock
    ) -> None:
        """Updates PATCH the localization with only whatsNew."""
        mock_session.request.return_value = make_response(
            body={
                "data": {
                    "id": "loc1",
                    "attributes": {"locale": "en-US", "whatsNew": "New"},
                }
            }
        )

        note = await client.update_localized_note("loc1", "New")

        call = mock_session.request.call_args
        assert call.args[0] == "PATCH"
        assert call.args[1].endswith("/v1/appStoreVersionLocalizations/loc1")
        assert call.kwargs["headers"]["Content-Type"] == "application/json"
        assert orjson.loads(call.kwargs["data"]) == {
            "data": {
                "type": "appStoreVersionLocalizations",
                "id": "loc1",
                "attributes": {"whatsNew": "New"},
            }
        }
        assert note.notes == "New"
        assert note.locale == "en-US"

    @pytest.mark.asyncio
    async def test_update_response_without_whats_new(
        self, client: RemoteCatalogClient, mock_session: MagicMock
    ) -> None:
        """A response lacking whatsNew is a missing localization."""
        mock_session.request.return_value = make_response(
            body={"data": {"id": "loc1", "attributes": {"locale": "en-US"}}}
        )

        with pytest.raises(MissingLocalizationError):
            await client.update_localized_note("loc1", "New")


class TestConnection:
    """test_connection never raises."""

    @pytest.mark.asyncio
    async def test_success(
        self, client: RemoteCatalogClient, mock_session: MagicMock
    ) -> None:
        """A successful one-item listing means the credentials work."""
        mock_session.request.return_value = make_response(body={"data": []})

        assert await client.test_connection() is True
        params = mock_session.request.call_args.kwargs["params"]
        assert params["limit"] == "1"

    @pytest.mark.asyncio
    async def test_failure(
        self, client: RemoteCatalogClient, mock_session: MagicMock
    ) -> None:
        """Any error is reported as False."""
        mock_session.request.return_value = make_response(status=403)

        assert await client.test_connection() is False
