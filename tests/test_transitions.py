"""Unit tests for the lifecycle transition table and its effects."""

import itertools
from dataclasses import replace

import pytest

from ride_lifecycle.domain.earnings import EarningsCalculator, FixedEarnings
from ride_lifecycle.domain.entities import IllegalTransition, RideState, UnknownPassenger
from ride_lifecycle.domain.enums import (
    RIDE_TRANSITIONS,
    SETTLED_EVENTS,
    PassengerStatus,
    RideCommand,
    RideEvent,
)
from ride_lifecycle.domain.progress import baseline_for
from ride_lifecycle.domain.transitions import (
    TransitionContext,
    apply_command,
    initial_state,
    is_legal,
)

# Forward path through the lifecycle (happy path, pickup confirmed)
HAPPY_PATH = [
    RideCommand.OFFER_RIDE,
    RideCommand.ADVANCE,
    RideCommand.ADVANCE,
    RideCommand.ADVANCE,
    RideCommand.CONFIRM_PICKUP,
    RideCommand.ADVANCE,
    RideCommand.ADVANCE,
]


def state_at(event: RideEvent) -> RideState:
    state = initial_state()
    for command in HAPPY_PATH:
        if state.current_event is event:
            break
        state = apply_command(state, command)
    assert state.current_event is event
    return state


def statuses(state: RideState) -> list[PassengerStatus]:
    return [p.status for p in state.passengers]


class TestTransitionTable:
    def test_every_event_has_an_outgoing_edge(self):
        sources = {event for event, _ in RIDE_TRANSITIONS}
        assert sources == set(RideEvent)

    def test_trip_ended_only_resets(self):
        edges = {cmd for (event, cmd) in RIDE_TRANSITIONS if event is RideEvent.TRIP_ENDED}
        assert edges == {RideCommand.RESET}

    def test_reset_not_legal_from_idle(self):
        assert not is_legal(RideEvent.IDLE, RideCommand.RESET)

    @pytest.mark.parametrize(
        "event,command",
        [
            (e, c)
            for e, c in itertools.product(RideEvent, RideCommand)
            if (e, c) not in RIDE_TRANSITIONS
        ],
    )
    def test_illegal_commands_raise(self, event, command):
        state = state_at(event)
        with pytest.raises(IllegalTransition):
            apply_command(state, command, TransitionContext(passenger_id="passenger_001"))


class TestEffects:
    def test_offer_populates_session(self):
        state = apply_command(initial_state(), RideCommand.OFFER_RIDE)
        assert state.current_event is RideEvent.OFFER_RIDE_AVAILABLE
        assert state.driver is not None
        assert state.vehicle.available_seats == 2
        assert len(state.passengers) == 2
        assert statuses(state) == [PassengerStatus.PENDING] * 2
        assert state.route is not None
        assert state.is_simulating is True

    def test_advance_accepts_passengers(self):
        state = state_at(RideEvent.PASSENGERS_ACCEPTED)
        assert statuses(state) == [PassengerStatus.ACCEPTED] * 2

    def test_get_to_pickup_progress_baseline(self):
        progress = state_at(RideEvent.GET_TO_PICKUP).progress
        assert (progress.current_step, progress.total_steps) == (1, 4)
        assert progress.progress_percentage == pytest.approx(0.3)
        assert progress.time_remaining == 240

    def test_pickup_confirmation_baseline(self):
        progress = state_at(RideEvent.PICKUP_CONFIRMATION).progress
        assert (progress.current_step, progress.total_steps) == (2, 4)

    def test_confirm_pickup_boards_accepted(self):
        state = state_at(RideEvent.HEADING_TO_DROPOFF)
        assert statuses(state) == [PassengerStatus.PICKED_UP] * 2
        assert state.progress.current_step == 3

    def test_no_show_diverts_one_passenger(self):
        before = state_at(RideEvent.PICKUP_CONFIRMATION)
        state = apply_command(
            before,
            RideCommand.REPORT_NO_SHOW,
            TransitionContext(passenger_id="passenger_001"),
        )
        assert state.current_event is RideEvent.HEADING_TO_DROPOFF
        assert state.passenger("passenger_001").status is PassengerStatus.NO_SHOW
        assert state.passenger("passenger_002").status is PassengerStatus.PICKED_UP
        assert state.vehicle.available_seats == before.vehicle.available_seats + 1
        assert state.progress == baseline_for(RideEvent.HEADING_TO_DROPOFF)

    def test_no_show_seat_increment_is_capped(self):
        before = state_at(RideEvent.PICKUP_CONFIRMATION)
        state = apply_command(
            before,
            RideCommand.REPORT_NO_SHOW,
            TransitionContext(max_vehicle_seats=2, passenger_id="passenger_002"),
        )
        assert state.vehicle.available_seats == 2

    def test_no_show_unknown_passenger(self):
        before = state_at(RideEvent.PICKUP_CONFIRMATION)
        with pytest.raises(UnknownPassenger):
            apply_command(
                before,
                RideCommand.REPORT_NO_SHOW,
                TransitionContext(passenger_id="ghost"),
            )

    def test_no_show_checks_state_before_passenger(self):
        with pytest.raises(IllegalTransition):
            apply_command(
                initial_state(),
                RideCommand.REPORT_NO_SHOW,
                TransitionContext(passenger_id="ghost"),
            )

    def test_complete_drops_off_and_pays(self):
        state = state_at(RideEvent.TRIP_COMPLETED)
        assert statuses(state) == [PassengerStatus.DROPPED_OFF] * 2
        assert state.progress.progress_percentage == 1.0
        assert state.progress.current_step == 4
        assert state.earnings.total == 6500.0

    def test_no_show_passenger_stays_no_show_after_completion(self):
        state = apply_command(
            state_at(RideEvent.PICKUP_CONFIRMATION),
            RideCommand.REPORT_NO_SHOW,
            TransitionContext(passenger_id="passenger_002"),
        )
        state = apply_command(state, RideCommand.ADVANCE)
        assert state.passenger("passenger_001").status is PassengerStatus.DROPPED_OFF
        assert state.passenger("passenger_002").status is PassengerStatus.NO_SHOW

    def test_custom_earnings_strategy(self):
        ctx = TransitionContext(
            earnings=EarningsCalculator(FixedEarnings(base_amount=100.0, bonus=0.0, commission=300.0))
        )
        state = apply_command(state_at(RideEvent.HEADING_TO_DROPOFF), RideCommand.ADVANCE, ctx)
        assert state.earnings.total == -200.0

    def test_trip_ended_keeps_earnings(self):
        state = state_at(RideEvent.TRIP_ENDED)
        assert state.earnings is not None
        assert state.is_simulating is True

    @pytest.mark.parametrize("event", [e for e in RideEvent if e is not RideEvent.IDLE])
    def test_reset_clears_everything(self, event):
        assert apply_command(state_at(event), RideCommand.RESET) == initial_state()

    def test_earnings_cleared_outside_settled_events(self):
        stale = replace(
            state_at(RideEvent.OFFER_RIDE_AVAILABLE),
            earnings=state_at(RideEvent.TRIP_COMPLETED).earnings,
        )
        state = apply_command(stale, RideCommand.ADVANCE)
        assert state.current_event is RideEvent.PASSENGERS_ACCEPTED
        assert state.earnings is None

    @pytest.mark.parametrize("event", list(RideEvent))
    def test_earnings_only_when_settled(self, event):
        state = state_at(event)
        assert (state.earnings is not None) == (event in SETTLED_EVENTS)

    def test_input_state_is_untouched(self):
        before = state_at(RideEvent.PASSENGERS_ACCEPTED)
        snapshot = statuses(before)
        apply_command(before, RideCommand.ADVANCE)
        assert statuses(before) == snapshot
        assert before.current_event is RideEvent.PASSENGERS_ACCEPTED
