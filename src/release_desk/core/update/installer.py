"""Disk image installation through hdiutil.

Flow: attach the image without browsing or auto-open, read the mount
point from hdiutil's plist output, copy the first ``*.app`` bundle over
the installed one, then detach.
"""

from __future__ import annotations

import asyncio
import plistlib
import shutil
import sys
from pathlib import Path
from typing import Any

from release_desk.constants import HDIUTIL
from release_desk.exceptions import (
    AppNotFoundError,
    CopyFailedError,
    MountFailedError,
    VolumeNotFoundError,
)
from release_desk.logger import get_logger

logger = get_logger(__name__)

DEFAULT_INSTALL_DIR = Path("/Applications")


def default_install_dir(executable: str | None = None) -> Path:
    """Directory holding the running application bundle.

    Walks up from the interpreter path to the nearest ``*.app`` ancestor
    and returns its parent; falls back to /Applications.
    """
    path = Path(executable or sys.executable).resolve()
    for parent in path.parents:
        if parent.suffix == ".app":
            return parent.parent
    return DEFAULT_INSTALL_DIR


def mount_point_from_plist(data: bytes) -> Path | None:
    """Extract the first mount point from ``hdiutil attach -plist`` output."""
    try:
        document: Any = plistlib.loads(data)
    except (plistlib.InvalidFileException, ValueError) as e:
        logger.debug("Unreadable hdiutil plist: %s", e)
        return None
    if not isinstance(document, dict):
        return None
    for entity in document.get("system-entities") or []:
        if isinstance(entity, dict) and entity.get("mount-point"):
            return Path(entity["mount-point"])
    return None


def _replace_tree(source: Path, target: Path) -> None:
    if target.exists():
        shutil.rmtree(target)
    shutil.copytree(source, target, symlinks=True)


class DiskImageInstaller:
    """Installs the application bundle contained in a disk image."""

    def __init__(self, hdiutil: str = HDIUTIL) -> None:
        self.hdiutil = hdiutil

    async def _run(self, *args: str) -> tuple[int, bytes, bytes]:
        process = await asyncio.create_subprocess_exec(
            self.hdiutil,
            *args,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
        stdout, stderr = await process.communicate()
        return process.returncode or 0, stdout, stderr

    async def attach(self, image: Path) -> Path:
        """Attach ``image`` and return its mount point.

        Raises:
            MountFailedError: If hdiutil cannot be run or fails
            VolumeNotFoundError: If no mount point is reported

        """
        try:
            code, stdout, stderr = await self._run(
                "attach", str(image), "-nobrowse", "-noautoopen", "-plist"
            )
        except OSError as e:
            raise MountFailedError(str(e), target=image.name) from e
        if code != 0:
            message = (
                stderr.decode(errors="replace").strip() or f"exit {code}"
            )
            raise MountFailedError(message, target=image.name)

        mount_point = mount_point_from_plist(stdout)
        if mount_point is None:
            msg = "hdiutil reported no mount point"
            raise VolumeNotFoundError(msg, target=image.name)
        logger.debug("Attached %s at %s", image.name, mount_point)
        return mount_point

    async def detach(self, mount_point: Path) -> None:
        """Detach a mounted volume.

        Raises:
            MountFailedError: If hdiutil cannot be run or fails

        """
        try:
            code, _, stderr = await self._run("detach", str(mount_point))
        except OSError as e:
            raise MountFailedError(str(e), target=str(mount_point)) from e
        if code != 0:
            message = (
                stderr.decode(errors="replace").strip() or f"exit {code}"
            )
            raise MountFailedError(message, target=str(mount_point))
        logger.debug("Detached %s", mount_point)

    @staticmethod
    def find_app(mount_point: Path) -> Path:
        """Return the first application bundle on the volume.

        Raises:
            AppNotFoundError: If the volume contains no ``*.app``

        """
        apps = sorted(mount_point.glob("*.app"))
        if not apps:
            msg = "No application bundle on the volume"
            raise AppNotFoundError(msg, target=str(mount_point))
        return apps[0]

    @staticmethod
    async def replace_app(source: Path, install_dir: Path) -> Path:
        """Copy ``source`` into ``install_dir``, replacing an older bundle.

        Raises:
            CopyFailedError: If removing or copying fails

        """
        target = install_dir / source.name
        try:
            await asyncio.to_thread(_replace_tree, source, target)
        except (OSError, shutil.Error) as e:
            raise CopyFailedError(str(e), target=str(target)) from e
        logger.info("Installed %s to %s", source.name, install_dir)
        return target

    async def install(self, image: Path, install_dir: Path) -> Path:
        """Install the bundle from ``image`` into ``install_dir``.

        The volume is detached even when locating or copying fails; a
        detach error then is logged and the original error propagates.

        Returns:
            Path of the installed bundle

        """
        mount_point = await self.attach(image)
        try:
            app = self.find_app(mount_point)
            installed = await self.replace_app(app, install_dir)
        except BaseException:
            try:
                await self.detach(mount_point)
            except MountFailedError as detach_error:
                logger.warning(
                    "Could not detach after failure: %s", detach_error
                )
            raise
        await self.detach(mount_point)
        return installed
