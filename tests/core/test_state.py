"""Tests for StatePublisher."""

from __future__ import annotations

import logging

import pytest

from release_desk.core.state import StatePublisher


class TestStatePublisher:
    """Snapshot storage and listener delivery."""

    def test_subscribe_replays_current_snapshot(self) -> None:
        """New listeners receive the current state immediately."""
        publisher = StatePublisher(1)
        seen: list[int] = []

        publisher.subscribe(seen.append)

        assert seen == [1]

    def test_subscribe_without_replay(self) -> None:
        """replay=False only delivers future snapshots."""
        publisher = StatePublisher(1)
        seen: list[int] = []

        publisher.subscribe(seen.append, replay=False)
        publisher.publish(2)

        assert seen == [2]

    def test_publish_updates_snapshot_and_listeners(self) -> None:
        """Every listener sees each published value in order."""
        publisher = StatePublisher("a")
        first: list[str] = []
        second: list[str] = []
        publisher.subscribe(first.append, replay=False)
        publisher.subscribe(second.append, replay=False)

        publisher.publish("b")
        publisher.publish("c")

        assert publisher.snapshot == "c"
        assert first == ["b", "c"]
        assert second == ["b", "c"]

    def test_unsubscribe_stops_delivery(self) -> None:
        """An unsubscribed listener is not called again."""
        publisher = StatePublisher(0)
        seen: list[int] = []
        unsubscribe = publisher.subscribe(seen.append, replay=False)

        publisher.publish(1)
        unsubscribe()
        unsubscribe()
        publisher.publish(2)

        assert seen == [1]

    def test_failing_listener_does_not_break_publishing(
        self, caplog: pytest.LogCaptureFixture
    ) -> None:
        """A raising listener is logged and the others still run."""
        publisher = StatePublisher(0)
        seen: list[int] = []

        def broken(_: int) -> None:
            raise RuntimeError("listener bug")

        publisher.subscribe(broken, replay=False)
        publisher.subscribe(seen.append, replay=False)

        with caplog.at_level(logging.ERROR):
            publisher.publish(5)

        assert seen == [5]
        assert publisher.snapshot == 5
        assert "State listener" in caplog.text
