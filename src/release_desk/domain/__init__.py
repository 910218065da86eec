"""Domain types for the App Store catalog.

Pure data: enums, records and comparison helpers without I/O.
"""

from release_desk.domain.models import (
    AppDetail,
    AppDetailPayload,
    AppRecord,
    AppSummary,
    LocalizedReleaseNote,
    ReleaseNote,
    VersionSummary,
    select_for_platform,
)
from release_desk.domain.platform import Platform, sorted_for_display
from release_desk.domain.results import BatchResult, ItemFailure
from release_desk.domain.status import AppStatus
from release_desk.domain.version import compare_versions, is_newer_version

__all__ = [
    "AppDetail",
    "AppDetailPayload",
    "AppRecord",
    "AppStatus",
    "AppSummary",
    "BatchResult",
    "ItemFailure",
    "LocalizedReleaseNote",
    "Platform",
    "ReleaseNote",
    "VersionSummary",
    "compare_versions",
    "is_newer_version",
    "select_for_platform",
    "sorted_for_display",
]
