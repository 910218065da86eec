"""Version review states owned by release-desk."""

from enum import Enum

from release_desk.logger import get_logger

logger = get_logger(__name__)


class AppStatus(Enum):
    """Review lifecycle state of an App Store version.

    Mirrors the ``appStoreState`` values of App Store Connect. Unknown
    values decode to NOT_APPLICABLE so new server states never break a
    catalog refresh.
    """

    ACCEPTED = "ACCEPTED"
    DEVELOPER_REMOVED_FROM_SALE = "DEVELOPER_REMOVED_FROM_SALE"
    DEVELOPER_REJECTED = "DEVELOPER_REJECTED"
    IN_REVIEW = "IN_REVIEW"
    INVALID_BINARY = "INVALID_BINARY"
    METADATA_REJECTED = "METADATA_REJECTED"
    PENDING_APPLE_RELEASE = "PENDING_APPLE_RELEASE"
    PENDING_CONTRACT = "PENDING_CONTRACT"
    PENDING_DEVELOPER_RELEASE = "PENDING_DEVELOPER_RELEASE"
    PREPARE_FOR_SUBMISSION = "PREPARE_FOR_SUBMISSION"
    PREORDER_READY_FOR_SALE = "PREORDER_READY_FOR_SALE"
    PROCESSING_FOR_APP_STORE = "PROCESSING_FOR_APP_STORE"
    READY_FOR_REVIEW = "READY_FOR_REVIEW"
    READY_FOR_SALE = "READY_FOR_SALE"
    REJECTED = "REJECTED"
    REMOVED_FROM_SALE = "REMOVED_FROM_SALE"
    WAITING_FOR_EXPORT_COMPLIANCE = "WAITING_FOR_EXPORT_COMPLIANCE"
    WAITING_FOR_REVIEW = "WAITING_FOR_REVIEW"
    REPLACED_WITH_NEW_VERSION = "REPLACED_WITH_NEW_VERSION"
    NOT_APPLICABLE = "NOT_APPLICABLE"

    @classmethod
    def from_wire(cls, value: str | None) -> "AppStatus":
        """Map an ``appStoreState`` value to an AppStatus."""
        if not value:
            return cls.NOT_APPLICABLE
        try:
            return cls(value)
        except ValueError:
            logger.debug("Unknown appStoreState %r", value)
            return cls.NOT_APPLICABLE

    @property
    def description(self) -> str:
        """Human readable label."""
        return _DESCRIPTIONS.get(
            self, self.value.replace("_", " ").title()
        )

    @property
    def is_editable(self) -> bool:
        """Release notes can only be edited before submission."""
        return self is AppStatus.PREPARE_FOR_SUBMISSION


_DESCRIPTIONS = {
    AppStatus.DEVELOPER_REMOVED_FROM_SALE: "Removed from Sale by Developer",
    AppStatus.DEVELOPER_REJECTED: "Rejected by Developer",
    AppStatus.PREPARE_FOR_SUBMISSION: "Prepare for Submission",
    AppStatus.PROCESSING_FOR_APP_STORE: "Processing for App Store",
    AppStatus.READY_FOR_REVIEW: "Ready for Review",
    AppStatus.READY_FOR_SALE: "Ready for Sale",
    AppStatus.PREORDER_READY_FOR_SALE: "Preorder Ready for Sale",
    AppStatus.WAITING_FOR_EXPORT_COMPLIANCE: "Waiting for Export Compliance",
    AppStatus.WAITING_FOR_REVIEW: "Waiting for Review",
    AppStatus.REPLACED_WITH_NEW_VERSION: "Replaced with New Version",
}
