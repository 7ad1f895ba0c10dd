"""
Timed Progression Worker
========================

Drives the en-route phases (GET_TO_PICKUP, HEADING_TO_DROPOFF).

Each run is one ``asyncio.Task`` that:

1. Sleeps ``tick_seconds``, moves progress forward by ``increment`` and
   hands the new value to ``on_tick``.  ``on_tick`` returns ``False`` when
   the run is no longer current, which ends the run silently.
2. Once progress reaches 1.0, sleeps ``settle_seconds`` and calls
   ``on_complete`` exactly once, then stops.

Cancellation
------------
``stop()`` cancels the task and waits for it to unwind.  If the caller is
itself cancelled while waiting, the cancellation reaches the caller and is
not absorbed by the run.  Called from inside the run itself (the
auto-advance path) it only detaches, since a task cannot await its own
completion.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable

from ride_lifecycle.domain.entities import RideProgress
from ride_lifecycle.domain.enums import RideEvent
from ride_lifecycle.domain.progress import advance_progress, is_complete, ticks_to_complete

logger = logging.getLogger(__name__)

TickHandler = Callable[["ProgressionTask", RideProgress], Awaitable[bool]]
CompleteHandler = Callable[["ProgressionTask"], Awaitable[object]]


class ProgressionTask:
    def __init__(
        self,
        event: RideEvent,
        baseline: RideProgress,
        *,
        tick_seconds: float,
        increment: float,
        settle_seconds: float,
        on_tick: TickHandler,
        on_complete: CompleteHandler,
    ):
        self.event = event
        self.baseline = baseline
        self.tick_seconds = tick_seconds
        self.increment = increment
        self.settle_seconds = settle_seconds
        self._on_tick = on_tick
        self._on_complete = on_complete
        self._task: asyncio.Task | None = None
        self.ticks = 0
        self.completed = False

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        if self._task is not None:
            raise RuntimeError(f"Progression for {self.event.value} already started")
        self._task = asyncio.create_task(
            self._run(), name=f"progression-{self.event.value.lower()}"
        )
        logger.info(
            "Progression started for %s (%d ticks every %.3fs)",
            self.event.value,
            ticks_to_complete(self.baseline, self.increment),
            self.tick_seconds,
        )

    async def stop(self) -> None:
        task = self._task
        if task is None or task.done():
            return
        if task is asyncio.current_task():
            return
        task.cancel()
        # A cancelled caller stays cancelled; asyncio.wait does not forward into *task*.
        await asyncio.wait({task})
        logger.info("Progression stopped for %s after %d ticks", self.event.value, self.ticks)

    async def wait(self) -> None:
        """Wait for the run to finish (completion, staleness or cancellation)."""
        if self._task is None:
            return
        try:
            await asyncio.shield(self._task)
        except asyncio.CancelledError:
            if not self._task.cancelled():
                raise

    # ── Internals ─────────────────────────────────────────────────────

    async def _run(self) -> None:
        progress = self.baseline
        try:
            while not is_complete(progress):
                await asyncio.sleep(self.tick_seconds)
                progress = advance_progress(progress, self.baseline, self.increment)
                if not await self._on_tick(self, progress):
                    logger.debug("Progression for %s is stale - stopping", self.event.value)
                    return
                self.ticks += 1

            await asyncio.sleep(self.settle_seconds)
            self.completed = True
            await self._on_complete(self)
        except Exception:
            logger.exception("Unhandled error in progression for %s", self.event.value)
