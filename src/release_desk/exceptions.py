"""Exception classes for release-desk operations."""


class ReleaseDeskError(Exception):
    """Base exception for release-desk operations."""

    error_prefix: str = "Operation failed"

    def __init__(self, message: str, target: str | None = None) -> None:
        """Initialize error with message and optional target.

        Args:
            message: Error message describing the failure.
            target: Optional name of the target that failed.

        """
        super().__init__(message)
        self.message = message
        self.target = target

    def __str__(self) -> str:
        """Return formatted error message."""
        if self.target:
            return f"{self.error_prefix} for '{self.target}': {self.message}"
        return f"{self.error_prefix}: {self.message}"


class ConfigError(ReleaseDeskError):
    """Raised when settings or credentials cannot be read or written."""

    error_prefix = "Configuration error"


class NotConfiguredError(ReleaseDeskError):
    """Raised when no App Store Connect credentials are available."""

    error_prefix = "API not configured"

    def __init__(
        self,
        message: str = "Please set App Store Connect credentials first",
        target: str | None = None,
    ) -> None:
        """Initialize with a default hint message."""
        super().__init__(message, target)


class RemoteError(ReleaseDeskError):
    """Raised when the catalog API answers with a non-2xx status."""

    error_prefix = "Remote request failed"

    def __init__(
        self, status: int, body: str, target: str | None = None
    ) -> None:
        """Initialize with the HTTP status and response body.

        Args:
            status: HTTP status code.
            body: Raw response body (kept for diagnostics).
            target: Optional request path.

        """
        super().__init__(f"HTTP {status}: {body[:300]}", target)
        self.status = status
        self.body = body


class DecodeError(ReleaseDeskError):
    """Raised when a response body is malformed or has an unexpected shape."""

    error_prefix = "Unexpected response"


class MissingLocalizationError(ReleaseDeskError):
    """Raised when an update response lacks the localization attributes."""

    error_prefix = "Missing localization"


class ReadOnlyEditorError(ReleaseDeskError):
    """Raised when editing notes of a version that is no longer editable."""

    error_prefix = "Release notes are read-only"


class UpdateError(ReleaseDeskError):
    """Base class for self-update failures."""

    error_prefix = "Update failed"


class HTTPStatusError(UpdateError):
    """Raised when the release feed or asset download returns non-200."""

    def __init__(self, code: int, target: str | None = None) -> None:
        """Initialize with the HTTP status code."""
        super().__init__(f"HTTP {code}", target)
        self.code = code


class NoInstallerAssetError(UpdateError):
    """Raised when the latest release carries no installer image."""


class MountFailedError(UpdateError):
    """Raised when attaching or detaching the disk image fails."""


class VolumeNotFoundError(UpdateError):
    """Raised when the attached image exposes no mount point."""


class AppNotFoundError(UpdateError):
    """Raised when no application bundle exists inside the image."""


class CopyFailedError(UpdateError):
    """Raised when replacing the installed application fails."""
