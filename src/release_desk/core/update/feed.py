"""GitHub release feed for client self-updates.

This module contains the release and asset models and the fetcher for
the "latest release" endpoint of the repository that publishes builds.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Any

import aiohttp
import orjson

from release_desk.constants import (
    DEFAULT_UPDATE_OWNER,
    DEFAULT_UPDATE_REPO,
    GITHUB_API_URL,
    INSTALLER_EXTENSION,
)
from release_desk.exceptions import DecodeError, HTTPStatusError
from release_desk.logger import get_logger

logger = get_logger(__name__)


@dataclass(slots=True, frozen=True)
class ReleaseAsset:
    """A downloadable file attached to a release.

    Attributes:
        name: Asset filename
        browser_download_url: Direct download URL for the asset
        size: Asset size in bytes (0 when unknown)

    """

    name: str
    browser_download_url: str
    size: int = 0

    @classmethod
    def from_api_response(cls, data: dict[str, Any]) -> ReleaseAsset | None:
        """Create from GitHub API data; None if name or URL is missing."""
        name = data.get("name") or ""
        url = data.get("browser_download_url") or ""
        if not name or not url:
            return None
        size = data.get("size")
        return cls(
            name=name,
            browser_download_url=url,
            size=size if isinstance(size, int) else 0,
        )

    @property
    def is_installer(self) -> bool:
        """True for disk-image installers."""
        return self.name.lower().endswith(INSTALLER_EXTENSION)


@dataclass(slots=True, frozen=True)
class GitHubRelease:
    """The parts of a GitHub release the updater uses."""

    tag_name: str
    name: str = ""
    body: str = ""
    assets: tuple[ReleaseAsset, ...] = ()

    @classmethod
    def from_api_response(cls, data: Any) -> GitHubRelease:
        """Create from the ``releases/latest`` response.

        Raises:
            DecodeError: If the document is not an object with a tag

        """
        if not isinstance(data, dict) or not data.get("tag_name"):
            msg = "Release response has no tag_name"
            raise DecodeError(msg)
        raw_assets = data.get("assets") or []
        assets = tuple(
            asset
            for asset in (
                ReleaseAsset.from_api_response(item)
                for item in raw_assets
                if isinstance(item, dict)
            )
            if asset is not None
        )
        return cls(
            tag_name=data["tag_name"],
            name=data.get("name") or "",
            body=data.get("body") or "",
            assets=assets,
        )

    @property
    def version(self) -> str:
        """Tag without a leading ``v``."""
        return self.tag_name.lstrip("vV")

    @property
    def installer_asset(self) -> ReleaseAsset | None:
        """First disk-image asset, if any."""
        return next((a for a in self.assets if a.is_installer), None)


class ReleaseFeed:
    """Fetches the latest release of a GitHub repository."""

    def __init__(
        self,
        session: aiohttp.ClientSession,
        owner: str = DEFAULT_UPDATE_OWNER,
        repo: str = DEFAULT_UPDATE_REPO,
        token: str | None = None,
        api_url: str = GITHUB_API_URL,
    ) -> None:
        """Initialize the feed.

        Args:
            session: Shared aiohttp session
            owner: Repository owner
            repo: Repository name
            token: Optional GitHub token; defaults to ``GITHUB_TOKEN``
            api_url: GitHub API root

        """
        self.session = session
        self.owner = owner
        self.repo = repo
        self.token = token if token is not None else os.getenv("GITHUB_TOKEN")
        self.api_url = api_url.rstrip("/")

    @property
    def latest_url(self) -> str:
        """Endpoint of the latest release."""
        return f"{self.api_url}/repos/{self.owner}/{self.repo}/releases/latest"

    def _headers(self) -> dict[str, str]:
        headers = {"Accept": "application/vnd.github.v3+json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
            logger.debug("Applied GitHub authentication (token present)")
        return headers

    async def fetch_latest(self) -> GitHubRelease:
        """Fetch the latest published release.

        Raises:
            HTTPStatusError: For any status other than 200
            DecodeError: If the body is not a release document

        """
        async with self.session.get(
            self.latest_url, headers=self._headers()
        ) as response:
            if response.status != 200:
                raise HTTPStatusError(
                    response.status, target=f"{self.owner}/{self.repo}"
                )
            raw = await response.read()

        try:
            data = orjson.loads(raw)
        except orjson.JSONDecodeError as e:
            msg = f"Invalid release JSON: {e}"
            raise DecodeError(msg) from e

        release = GitHubRelease.from_api_response(data)
        logger.debug(
            "Latest release of %s/%s is %s with %d assets",
            self.owner,
            self.repo,
            release.tag_name,
            len(release.assets),
        )
        return release
