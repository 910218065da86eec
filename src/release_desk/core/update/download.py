"""Installer download for self-updates.

Progress is reported in fixed steps rather than as a byte fraction: every
downloaded MiB adds 0.1, capped at 0.9. The caller reports 1.0 once the
file is complete. This keeps progress meaningful for servers that omit
Content-Length.
"""

from __future__ import annotations

import contextlib
from collections.abc import Callable
from pathlib import Path

import aiofiles
import aiohttp

from release_desk.constants import (
    DOWNLOAD_CHUNK_SIZE,
    DOWNLOAD_PROGRESS_CAP,
    DOWNLOAD_PROGRESS_STEP,
    DOWNLOAD_PROGRESS_STEP_BYTES,
)
from release_desk.core.update.feed import ReleaseAsset
from release_desk.exceptions import HTTPStatusError
from release_desk.logger import get_logger

logger = get_logger(__name__)

ProgressCallback = Callable[[float], None]


class InstallerDownloader:
    """Streams a release asset into the temporary directory."""

    def __init__(self, session: aiohttp.ClientSession, tmp_dir: Path) -> None:
        """Initialize the downloader.

        Args:
            session: Shared aiohttp session
            tmp_dir: Directory receiving downloads

        """
        self.session = session
        self.tmp_dir = tmp_dir

    def destination_for(self, asset: ReleaseAsset) -> Path:
        """Path the asset is downloaded to."""
        return self.tmp_dir / Path(asset.name).name

    async def download(
        self,
        asset: ReleaseAsset,
        on_progress: ProgressCallback | None = None,
    ) -> Path:
        """Download ``asset``, replacing any stale copy.

        Args:
            asset: Asset to download
            on_progress: Called with the stepped progress value

        Returns:
            Path of the downloaded file

        Raises:
            HTTPStatusError: For any status other than 200
            aiohttp.ClientError: If the transfer fails

        """
        dest = self.destination_for(asset)
        if dest.exists():
            logger.debug("Removing stale download: %s", dest)
            dest.unlink()
        dest.parent.mkdir(parents=True, exist_ok=True)

        logger.debug("Downloading %s", asset.browser_download_url)
        try:
            async with self.session.get(
                asset.browser_download_url
            ) as response:
                if response.status != 200:
                    raise HTTPStatusError(response.status, target=asset.name)
                downloaded = await self._stream(response, dest, on_progress)
        except BaseException:
            if dest.exists():
                logger.debug("Removing partial download: %s", dest)
                with contextlib.suppress(OSError):
                    dest.unlink()
            raise

        logger.info("Downloaded %s (%s bytes)", dest.name, f"{downloaded:,}")
        return dest

    async def _stream(
        self,
        response: aiohttp.ClientResponse,
        dest: Path,
        on_progress: ProgressCallback | None,
    ) -> int:
        downloaded = 0
        since_step = 0
        progress = 0.0
        async with aiofiles.open(dest, mode="wb") as f:
            async for chunk in response.content.iter_chunked(
                DOWNLOAD_CHUNK_SIZE
            ):
                if not chunk:
                    continue
                await f.write(chunk)
                downloaded += len(chunk)
                since_step += len(chunk)
                while since_step >= DOWNLOAD_PROGRESS_STEP_BYTES:
                    since_step -= DOWNLOAD_PROGRESS_STEP_BYTES
                    stepped = min(
                        progress + DOWNLOAD_PROGRESS_STEP,
                        DOWNLOAD_PROGRESS_CAP,
                    )
                    if stepped != progress:
                        progress = round(stepped, 2)
                        if on_progress is not None:
                            on_progress(progress)
        return downloaded
