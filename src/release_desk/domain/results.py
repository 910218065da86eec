"""Result container for best-effort batch operations."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Generic, TypeVar

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class ItemFailure:
    """One item that failed inside a batch.

    Attributes:
        key: Identifier of the failed item (app id, version id, locale)
        message: Error message

    """

    key: str
    message: str


@dataclass(slots=True)
class BatchResult(Generic[T]):
    """Successful items plus per-item failures of a batch operation.

    Batch loops never abort on a single item. Callers decide how to
    surface ``failures``.
    """

    items: list[T] = field(default_factory=list)
    failures: list[ItemFailure] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        """True when no item failed."""
        return not self.failures

    def add_failure(self, key: str, error: BaseException | str) -> None:
        """Record a failed item."""
        self.failures.append(ItemFailure(key=key, message=str(error)))

    def failed_keys(self) -> list[str]:
        """Keys of all failed items in failure order."""
        return [failure.key for failure in self.failures]
