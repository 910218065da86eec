"""FIFO counting gate that caps concurrent async operations."""

from __future__ import annotations

import asyncio
import contextlib
from collections import deque
from types import TracebackType

from release_desk.logger import get_logger

logger = get_logger(__name__)


class BoundedConcurrencyGate:
    """Counting semaphore that wakes waiters strictly in arrival order.

    ``asyncio.Semaphore`` lets a newly arriving task grab a permit that was
    just released ahead of tasks already waiting. This gate hands a
    released permit directly to the oldest waiter instead.

    Usage:
        >>> gate = BoundedConcurrencyGate(5)
        >>> async with gate:
        ...     await client.list_versions(app_id)

    There are no timeouts. A holder that never releases keeps its permit.
    """

    def __init__(self, capacity: int) -> None:
        """Initialize the gate.

        Args:
            capacity: Maximum number of concurrent holders

        Raises:
            ValueError: If capacity is not a positive integer

        """
        if isinstance(capacity, bool) or not isinstance(capacity, int):
            msg = f"capacity must be an int, got {type(capacity).__name__}"
            raise ValueError(msg)
        if capacity < 1:
            msg = f"capacity must be positive, got {capacity}"
            raise ValueError(msg)
        self._capacity = capacity
        self._available = capacity
        self._waiters: deque[asyncio.Future[None]] = deque()

    @property
    def capacity(self) -> int:
        """Maximum number of concurrent holders."""
        return self._capacity

    @property
    def available(self) -> int:
        """Permits that can be taken without waiting."""
        return self._available

    @property
    def waiting(self) -> int:
        """Number of callers queued for a permit."""
        return sum(1 for waiter in self._waiters if not waiter.done())

    async def acquire(self) -> None:
        """Take a permit, suspending in FIFO order until one is free."""
        if self._available > 0 and not self._waiters:
            self._available -= 1
            return

        waiter: asyncio.Future[None] = (
            asyncio.get_running_loop().create_future()
        )
        self._waiters.append(waiter)
        try:
            await waiter
        except asyncio.CancelledError:
            if waiter.done() and not waiter.cancelled():
                # Permit was handed over just before cancellation.
                self.release()
            raise
        finally:
            self._remove_waiter(waiter)

    def release(self) -> None:
        """Return a permit, handing it to the oldest live waiter if any."""
        while self._waiters:
            waiter = self._waiters.popleft()
            if not waiter.done():
                waiter.set_result(None)
                return

        if self._available >= self._capacity:
            logger.warning(
                "Gate released more often than acquired (capacity %d)",
                self._capacity,
            )
            return
        self._available += 1

    def _remove_waiter(self, waiter: asyncio.Future[None]) -> None:
        with contextlib.suppress(ValueError):
            self._waiters.remove(waiter)

    async def __aenter__(self) -> BoundedConcurrencyGate:
        await self.acquire()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.release()

    def __repr__(self) -> str:
        return (
            f"BoundedConcurrencyGate(capacity={self._capacity}, "
            f"available={self._available}, waiting={self.waiting})"
        )
