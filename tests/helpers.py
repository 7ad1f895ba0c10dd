"""Helpers shared by the controller and API tests."""

from __future__ import annotations

import asyncio
from typing import Callable

from ride_lifecycle.domain.entities import RideState
from ride_lifecycle.domain.enums import RideEvent
from ride_lifecycle.infrastructure.store import Subscription
from ride_lifecycle.services.controller import RideLifecycleController

LIFECYCLE = [
    RideEvent.IDLE,
    RideEvent.OFFER_RIDE_AVAILABLE,
    RideEvent.PASSENGERS_ACCEPTED,
    RideEvent.GET_TO_PICKUP,
    RideEvent.PICKUP_CONFIRMATION,
    RideEvent.HEADING_TO_DROPOFF,
    RideEvent.TRIP_COMPLETED,
    RideEvent.TRIP_ENDED,
]

# The command that moves the ride forward from each event
_FORWARD = {
    RideEvent.IDLE: "offer_ride",
    RideEvent.OFFER_RIDE_AVAILABLE: "advance",
    RideEvent.PASSENGERS_ACCEPTED: "advance",
    RideEvent.GET_TO_PICKUP: "advance",
    RideEvent.PICKUP_CONFIRMATION: "confirm_pickup",
    RideEvent.HEADING_TO_DROPOFF: "advance",
    RideEvent.TRIP_COMPLETED: "advance",
}


async def drive_to(controller: RideLifecycleController, target: RideEvent) -> RideState:
    """Issue forward commands until the ride is in *target*."""
    for _ in range(len(LIFECYCLE)):
        event = controller.current().current_event
        if event is target:
            break
        await getattr(controller, _FORWARD[event])()
    assert controller.current().current_event is target
    return controller.current()


async def wait_until(
    sub: Subscription, predicate: Callable[[RideState], bool], timeout: float = 2.0
) -> RideState:
    async def _wait():
        async for state in sub:
            if predicate(state):
                return state

    return await asyncio.wait_for(_wait(), timeout)


def distinct_events(states: list[RideState]) -> list[RideEvent]:
    """Collapse consecutive snapshots of the same event."""
    events: list[RideEvent] = []
    for s in states:
        if not events or events[-1] is not s.current_event:
            events.append(s.current_event)
    return events
