"""
In-memory ride session store with replay-latest broadcast.

Every subscriber owns an unbounded ``asyncio.Queue``.  ``replace`` swaps the
snapshot and pushes it onto each queue without awaiting, so a slow reader
never holds up the writer and a reader never sees a half-applied write.

A new subscription is seeded with the current snapshot at the moment it is
created, then receives every later snapshot in write order.
"""

from __future__ import annotations

import asyncio
import logging

from ride_lifecycle.domain.entities import RideLifecycleError, RideState
from ride_lifecycle.domain.transitions import initial_state

logger = logging.getLogger(__name__)

# Queued by close() to wake a reader blocked on an empty queue
_CLOSED = object()


class SubscriptionClosed(RideLifecycleError):
    """Raised by ``Subscription.get`` once the subscription is closed."""


class Subscription:
    """Live view onto a ``RideSessionStore``.

    Use as an async iterator (never ends on its own) or as an async context
    manager that closes itself on exit.  ``close`` may be called from any
    task: a reader blocked in ``get`` gets ``SubscriptionClosed`` and an
    ``async for`` loop ends once the snapshots queued before the close are
    consumed.
    """

    def __init__(self, store: RideSessionStore, first: RideState):
        self._store = store
        self._queue: asyncio.Queue = asyncio.Queue()
        self._queue.put_nowait(first)
        self.closed = False

    def _push(self, state: RideState) -> None:
        self._queue.put_nowait(state)

    async def get(self) -> RideState:
        state = await self._queue.get()
        if state is _CLOSED:
            self._queue.put_nowait(_CLOSED)
            raise SubscriptionClosed("Subscription is closed")
        return state

    def drain(self) -> list[RideState]:
        """Return every snapshot queued so far without waiting."""
        items = []
        while not self._queue.empty():
            state = self._queue.get_nowait()
            if state is _CLOSED:
                self._queue.put_nowait(_CLOSED)
                break
            items.append(state)
        return items

    def close(self) -> None:
        if not self.closed:
            self.closed = True
            self._store._unsubscribe(self)
            self._queue.put_nowait(_CLOSED)

    def __aiter__(self):
        return self

    async def __anext__(self) -> RideState:
        try:
            return await self.get()
        except SubscriptionClosed:
            raise StopAsyncIteration from None

    async def __aenter__(self):
        return self

    async def __aexit__(self, *args):
        self.close()


class RideSessionStore:
    def __init__(self, state: RideState | None = None):
        self._state = state or initial_state()
        self._subscribers: list[Subscription] = []

    def current(self) -> RideState:
        return self._state

    def subscribe(self) -> Subscription:
        sub = Subscription(self, self._state)
        self._subscribers.append(sub)
        return sub

    def replace(self, next_state: RideState) -> None:
        """Swap the snapshot and fan it out to all open subscriptions."""
        self._state = next_state
        for sub in list(self._subscribers):
            sub._push(next_state)
        logger.debug(
            "Store write: %s (%d subscribers)",
            next_state.current_event.value,
            len(self._subscribers),
        )

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    def _unsubscribe(self, sub: Subscription) -> None:
        try:
            self._subscribers.remove(sub)
        except ValueError:
            pass
