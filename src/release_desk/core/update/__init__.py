"""Client self-update: release feed, download, install, state machine."""

from release_desk.core.update.controller import (
    SelfUpdateController,
    UpdateSnapshot,
    UpdateState,
)
from release_desk.core.update.download import InstallerDownloader
from release_desk.core.update.feed import (
    GitHubRelease,
    ReleaseAsset,
    ReleaseFeed,
)
from release_desk.core.update.installer import DiskImageInstaller

__all__ = [
    "DiskImageInstaller",
    "GitHubRelease",
    "InstallerDownloader",
    "ReleaseAsset",
    "ReleaseFeed",
    "SelfUpdateController",
    "UpdateSnapshot",
    "UpdateState",
]
