"""Typed dictionaries for release-desk configuration."""

from pathlib import Path
from typing import TypedDict


class NetworkConfig(TypedDict):
    """[network] section."""

    timeout_seconds: int


class UpdateConfig(TypedDict):
    """[update] section: release feed location and updater switches."""

    owner: str
    repo: str
    debug_updater: bool
    ignored_version: str


class DirectoryConfig(TypedDict):
    """[directory] section."""

    logs: Path
    tmp: Path


class Settings(TypedDict):
    """Complete settings.conf contents after type conversion."""

    log_level: str
    console_log_level: str
    max_concurrent_requests: int
    catalog_limit: int
    network: NetworkConfig
    update: UpdateConfig
    directory: DirectoryConfig
