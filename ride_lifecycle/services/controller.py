"""
Ride Lifecycle Controller
=========================

Owns one ride session: a ``RideSessionStore`` plus the tasks that move it
forward.  Callers issue commands; the controller checks them against the
transition table, writes the next snapshot and, for the en-route phases,
starts a timed progression that auto-advances once the vehicle arrives.

Concurrency safety
------------------
* **Single writer**: every store write happens under ``self._lock``, the
  progression ticks and auto-advance included.
* **Run identity**: a tick or auto-advance is dropped unless its run is
  still the controller's current run *and* the ride is still in the run's
  event.  Runs are cancelled under the same lock, so a cancelled run never
  writes again.
* **Scripts** (full simulation, new trip) are plain tasks that issue the
  same public commands; ``reset`` cancels them first.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, replace
from typing import Optional

from ride_lifecycle.config import Settings, settings as default_settings
from ride_lifecycle.domain.earnings import EarningsCalculator
from ride_lifecycle.domain.entities import (
    IllegalTransition,
    RideProgress,
    RideState,
    UnknownPassenger,
)
from ride_lifecycle.domain.enums import TIMED_EVENTS, RideCommand, RideEvent
from ride_lifecycle.domain.progress import baseline_for
from ride_lifecycle.domain.transitions import TransitionContext, apply_command, is_legal
from ride_lifecycle.infrastructure.store import RideSessionStore, Subscription
from ride_lifecycle.workers.progression import ProgressionTask

logger = logging.getLogger(__name__)

START_FULL_SIMULATION = "START_FULL_SIMULATION"
START_NEW_TRIP = "START_NEW_TRIP"


@dataclass(frozen=True)
class CommandResult:
    command: str
    accepted: bool
    event: RideEvent
    reason: Optional[str] = None
    unknown_passenger: bool = False


class RideLifecycleController:
    def __init__(
        self,
        store: RideSessionStore | None = None,
        settings: Settings | None = None,
        earnings: EarningsCalculator | None = None,
    ):
        self.store = store or RideSessionStore()
        self.settings = settings or default_settings
        self.earnings = earnings or EarningsCalculator.from_settings(self.settings)
        self._lock = asyncio.Lock()
        self._progression: ProgressionTask | None = None
        self._script: asyncio.Task | None = None
        self._new_trip_lock = asyncio.Lock()

    # ── Observation ───────────────────────────────────────────────────

    def current(self) -> RideState:
        return self.store.current()

    def subscribe(self) -> Subscription:
        return self.store.subscribe()

    @property
    def progression(self) -> ProgressionTask | None:
        return self._progression

    @property
    def simulation_running(self) -> bool:
        return self._script is not None and not self._script.done()

    # ── Commands ──────────────────────────────────────────────────────

    async def offer_ride(self) -> CommandResult:
        return await self._dispatch(RideCommand.OFFER_RIDE)

    async def advance(self) -> CommandResult:
        return await self._dispatch(RideCommand.ADVANCE)

    async def confirm_pickup(self) -> CommandResult:
        return await self._dispatch(RideCommand.CONFIRM_PICKUP)

    async def report_no_show(self, passenger_id: str) -> CommandResult:
        return await self._dispatch(RideCommand.REPORT_NO_SHOW, passenger_id=passenger_id)

    async def reset(self) -> CommandResult:
        await self._cancel_script()
        return await self._dispatch(RideCommand.RESET)

    async def start_full_simulation(self) -> CommandResult:
        """Run offer -> trip ended in the background with display delays."""
        event = self.current().current_event
        if self.simulation_running:
            return self._reject(START_FULL_SIMULATION, event, "Simulation already running")
        if not is_legal(event, RideCommand.OFFER_RIDE):
            return self._reject(
                START_FULL_SIMULATION, event, str(IllegalTransition(event, RideCommand.OFFER_RIDE))
            )
        self._script = asyncio.create_task(self._full_simulation(), name="full-simulation")
        logger.info("Full simulation started")
        return CommandResult(START_FULL_SIMULATION, True, event)

    async def start_new_trip(self) -> CommandResult:
        """Reset the session now, then run a full simulation after a short pause.

        The result (and any HTTP response built from it) already reflects the
        reset, so its event is IDLE.
        """
        # Back-to-back requests leave exactly one script behind.
        async with self._new_trip_lock:
            await self._cancel_script()
            if self.current().current_event is not RideEvent.IDLE:
                await self._dispatch(RideCommand.RESET)
            self._script = asyncio.create_task(self._new_trip(), name="new-trip")
        logger.info("New trip requested")
        return CommandResult(START_NEW_TRIP, True, self.current().current_event)

    async def wait_for_simulation(self) -> None:
        task = self._script
        if task is None:
            return
        try:
            await asyncio.shield(task)
        except asyncio.CancelledError:
            if not task.cancelled():
                raise

    async def shutdown(self) -> None:
        await self._cancel_script()
        async with self._lock:
            await self._stop_progression()
        logger.info("Ride controller shut down")

    # ── Internals: dispatch ───────────────────────────────────────────

    async def _dispatch(
        self,
        command: RideCommand,
        *,
        passenger_id: str | None = None,
        run: ProgressionTask | None = None,
    ) -> CommandResult:
        async with self._lock:
            state = self.store.current()
            if run is not None and not self._is_current(run, state):
                return self._reject(command.value, state.current_event, "Stale progression run")

            ctx = TransitionContext(
                earnings=self.earnings,
                max_vehicle_seats=self.settings.max_vehicle_seats,
                passenger_id=passenger_id,
            )
            try:
                next_state = apply_command(state, command, ctx)
            except UnknownPassenger as exc:
                return self._reject(
                    command.value, state.current_event, str(exc), unknown_passenger=True
                )
            except IllegalTransition as exc:
                return self._reject(command.value, state.current_event, str(exc))

            await self._stop_progression()
            self.store.replace(next_state)
            logger.info(
                "%s -> %s (%s%s)",
                state.current_event.value,
                next_state.current_event.value,
                command.value,
                ", auto" if run is not None else "",
            )
            if next_state.current_event in TIMED_EVENTS:
                self._start_progression(next_state.current_event)
            return CommandResult(command.value, True, next_state.current_event)

    def _reject(
        self, command: str, event: RideEvent, reason: str, unknown_passenger: bool = False
    ) -> CommandResult:
        logger.warning("Ignored %s in %s: %s", command, event.value, reason)
        return CommandResult(command, False, event, reason, unknown_passenger)

    # ── Internals: timed progression ──────────────────────────────────

    def _is_current(self, run: ProgressionTask, state: RideState) -> bool:
        return run is self._progression and state.current_event is run.event

    def _start_progression(self, event: RideEvent) -> None:
        s = self.settings
        if event is RideEvent.GET_TO_PICKUP:
            tick, increment = s.pickup_tick_seconds, s.pickup_increment
        else:
            tick, increment = s.dropoff_tick_seconds, s.dropoff_increment
        run = ProgressionTask(
            event,
            baseline_for(event),
            tick_seconds=tick,
            increment=increment,
            settle_seconds=s.settle_delay_seconds,
            on_tick=self._on_tick,
            on_complete=self._on_complete,
        )
        self._progression = run
        run.start()

    async def _stop_progression(self) -> None:
        run, self._progression = self._progression, None
        if run is not None:
            await run.stop()

    async def _on_tick(self, run: ProgressionTask, progress: RideProgress) -> bool:
        async with self._lock:
            state = self.store.current()
            if not self._is_current(run, state):
                return False
            self.store.replace(replace(state, progress=progress))
            logger.debug(
                "%s progress %.0f%% (%ds, %.2fkm left)",
                run.event.value,
                progress.progress_percentage * 100,
                progress.time_remaining,
                progress.distance_remaining,
            )
            return True

    async def _on_complete(self, run: ProgressionTask) -> None:
        await self._dispatch(RideCommand.ADVANCE, run=run)

    # ── Internals: scripts ────────────────────────────────────────────

    async def _cancel_script(self) -> None:
        task = self._script
        if task is None or task.done() or task is asyncio.current_task():
            return
        task.cancel()
        await asyncio.wait({task})
        if self._script is task:
            self._script = None
        logger.info("Simulation script cancelled")

    async def _wait_for(self, target: RideEvent) -> bool:
        """Wait until the ride reaches *target*; ``False`` if it resets first."""
        async with self.subscribe() as sub:
            async for state in sub:
                if state.current_event is target:
                    return True
                if state.current_event is RideEvent.IDLE:
                    return False
        return False

    async def _full_simulation(self) -> None:
        s = self.settings
        try:
            steps = (
                (self.offer_ride, s.offer_display_seconds),
                (self.advance, s.accept_display_seconds),
                (self.advance, None),
            )
            for command, pause in steps:
                if not (await command()).accepted:
                    return
                if pause:
                    await asyncio.sleep(pause)

            if not await self._wait_for(RideEvent.PICKUP_CONFIRMATION):
                return
            await asyncio.sleep(s.pickup_confirmation_display_seconds)
            if not (await self.confirm_pickup()).accepted:
                return

            if not await self._wait_for(RideEvent.TRIP_COMPLETED):
                return
            await asyncio.sleep(s.completed_display_seconds)
            if (await self.advance()).accepted:
                logger.info("Full simulation completed")
        except Exception:
            logger.exception("Unhandled error in full simulation")

    async def _new_trip(self) -> None:
        await asyncio.sleep(self.settings.new_trip_delay_seconds)
        await self._full_simulation()
