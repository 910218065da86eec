"""Observable state publishing for core services."""

from __future__ import annotations

from collections.abc import Callable
from typing import Generic, TypeVar

from release_desk.logger import get_logger

logger = get_logger(__name__)

S = TypeVar("S")

Listener = Callable[[S], None]


class StatePublisher(Generic[S]):
    """Holds the latest snapshot and pushes every change to listeners.

    Listeners run synchronously, in subscription order, on the event loop
    thread. A listener that raises is logged and skipped; it never breaks
    the publishing service.
    """

    def __init__(self, initial: S) -> None:
        self._snapshot = initial
        self._listeners: list[Listener[S]] = []

    @property
    def snapshot(self) -> S:
        """Most recently published state."""
        return self._snapshot

    def subscribe(
        self, listener: Listener[S], *, replay: bool = True
    ) -> Callable[[], None]:
        """Register a listener.

        Args:
            listener: Called with each new snapshot
            replay: Immediately call the listener with the current state

        Returns:
            Function that removes the listener again

        """
        self._listeners.append(listener)
        if replay:
            self._notify(listener, self._snapshot)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def publish(self, snapshot: S) -> None:
        """Store ``snapshot`` and deliver it to all listeners."""
        self._snapshot = snapshot
        for listener in list(self._listeners):
            self._notify(listener, snapshot)

    def _notify(self, listener: Listener[S], snapshot: S) -> None:
        try:
            listener(snapshot)
        except Exception:
            logger.exception("State listener %r failed", listener)
