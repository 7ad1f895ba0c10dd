"""
Ride lifecycle transitions
==========================

One table (``RIDE_TRANSITIONS``) decides *whether* a command is legal from
the current event and *where* it leads; the effect functions below decide
*what else* changes on the way.  ``apply_command`` is the only entry point:
it is pure, never touches the store, and returns a brand-new ``RideState``.

Effects per target event
------------------------
* OFFER_RIDE_AVAILABLE -- sample driver / vehicle / passengers / route
* PASSENGERS_ACCEPTED  -- PENDING -> ACCEPTED
* HEADING_TO_DROPOFF   -- ACCEPTED -> PICKED_UP (or NO_SHOW for the
  reported passenger, freeing one seat)
* TRIP_COMPLETED       -- PICKED_UP -> DROPPED_OFF, earnings computed
* IDLE                 -- everything cleared
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Callable, Optional

from . import sample_data
from .earnings import EarningsCalculator
from .entities import IllegalTransition, Passenger, RideState, UnknownPassenger
from .enums import RIDE_TRANSITIONS, SETTLED_EVENTS, PassengerStatus, RideCommand, RideEvent
from .progress import baseline_for


@dataclass
class TransitionContext:
    earnings: EarningsCalculator = field(default_factory=EarningsCalculator)
    max_vehicle_seats: int = 4
    passenger_id: Optional[str] = None


Effect = Callable[[RideState, TransitionContext], RideState]


def initial_state() -> RideState:
    return RideState(current_event=RideEvent.IDLE, is_simulating=False)


def next_event(event: RideEvent, command: RideCommand) -> Optional[RideEvent]:
    """Target event for *command* from *event*, or ``None`` if illegal."""
    return RIDE_TRANSITIONS.get((event, command))


def is_legal(event: RideEvent, command: RideCommand) -> bool:
    return next_event(event, command) is not None


def apply_command(
    state: RideState,
    command: RideCommand,
    ctx: TransitionContext | None = None,
) -> RideState:
    """Compute the snapshot that follows *state* under *command*.

    Raises ``IllegalTransition`` when no edge exists and ``UnknownPassenger``
    when a no-show names a passenger not in the ride.
    """
    ctx = ctx or TransitionContext()
    target = next_event(state.current_event, command)
    if target is None:
        raise IllegalTransition(state.current_event, command)

    if command is RideCommand.RESET:
        return initial_state()

    effect = _EFFECTS.get((command, target), _no_effect)
    updated = effect(state, ctx)
    # Earnings exist only once the trip has settled
    earnings = updated.earnings if target in SETTLED_EVENTS else None
    return replace(
        updated, current_event=target, progress=baseline_for(target), earnings=earnings
    )


# ── Effects ───────────────────────────────────────────────────────────


def _no_effect(state: RideState, ctx: TransitionContext) -> RideState:
    return state


def _promote(
    passengers: tuple[Passenger, ...],
    src: PassengerStatus,
    dst: PassengerStatus,
) -> tuple[Passenger, ...]:
    return tuple(p.transition_to(dst) if p.status == src else p for p in passengers)


def _offer(state: RideState, ctx: TransitionContext) -> RideState:
    return replace(
        state,
        driver=sample_data.sample_driver(),
        vehicle=sample_data.sample_vehicle(),
        passengers=sample_data.sample_passengers(),
        route=sample_data.sample_route(),
        is_simulating=True,
    )


def _accept(state: RideState, ctx: TransitionContext) -> RideState:
    return replace(
        state,
        passengers=_promote(
            state.passengers, PassengerStatus.PENDING, PassengerStatus.ACCEPTED
        ),
    )


def _confirm_pickup(state: RideState, ctx: TransitionContext) -> RideState:
    return replace(
        state,
        passengers=_promote(
            state.passengers, PassengerStatus.ACCEPTED, PassengerStatus.PICKED_UP
        ),
    )


def _no_show(state: RideState, ctx: TransitionContext) -> RideState:
    pid = ctx.passenger_id
    if pid is None or state.passenger(pid) is None:
        raise UnknownPassenger(str(pid))

    passengers = tuple(
        p.transition_to(PassengerStatus.NO_SHOW)
        if p.id == pid
        else p.transition_to(PassengerStatus.PICKED_UP)
        if p.status == PassengerStatus.ACCEPTED
        else p
        for p in state.passengers
    )
    # One seat is freed per no-show, without reconciling against occupancy.
    vehicle = state.vehicle.free_seat(ctx.max_vehicle_seats) if state.vehicle else None
    return replace(state, passengers=passengers, vehicle=vehicle)


def _complete(state: RideState, ctx: TransitionContext) -> RideState:
    dropped = replace(
        state,
        passengers=_promote(
            state.passengers, PassengerStatus.PICKED_UP, PassengerStatus.DROPPED_OFF
        ),
    )
    return replace(dropped, earnings=ctx.earnings.calculate(dropped))


_EFFECTS: dict[tuple[RideCommand, RideEvent], Effect] = {
    (RideCommand.OFFER_RIDE, RideEvent.OFFER_RIDE_AVAILABLE): _offer,
    (RideCommand.ADVANCE, RideEvent.PASSENGERS_ACCEPTED): _accept,
    (RideCommand.CONFIRM_PICKUP, RideEvent.HEADING_TO_DROPOFF): _confirm_pickup,
    (RideCommand.REPORT_NO_SHOW, RideEvent.HEADING_TO_DROPOFF): _no_show,
    (RideCommand.ADVANCE, RideEvent.TRIP_COMPLETED): _complete,
}
