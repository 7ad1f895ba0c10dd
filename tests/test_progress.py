"""Unit tests for the linear progress model."""

import pytest

from ride_lifecycle.domain.entities import RideProgress
from ride_lifecycle.domain.enums import RideEvent
from ride_lifecycle.domain.progress import (
    PROGRESS_BASELINES,
    advance_progress,
    baseline_for,
    is_complete,
    ticks_to_complete,
)


def run(baseline: RideProgress, increment: float) -> list[RideProgress]:
    steps = [baseline]
    while not is_complete(steps[-1]):
        steps.append(advance_progress(steps[-1], baseline, increment))
    return steps


class TestBaselines:
    def test_every_event_has_a_baseline(self):
        assert set(PROGRESS_BASELINES) == set(RideEvent)

    def test_pickup_and_dropoff_baselines(self):
        pickup = baseline_for(RideEvent.GET_TO_PICKUP)
        dropoff = baseline_for(RideEvent.HEADING_TO_DROPOFF)
        assert (pickup.progress_percentage, pickup.time_remaining) == (0.3, 240)
        assert (dropoff.progress_percentage, dropoff.time_remaining) == (0.75, 480)

    def test_completed_is_full(self):
        assert is_complete(baseline_for(RideEvent.TRIP_COMPLETED))


class TestAdvanceProgress:
    def test_single_tick(self):
        baseline = baseline_for(RideEvent.GET_TO_PICKUP)
        nxt = advance_progress(baseline, baseline, 0.35)
        assert nxt.progress_percentage == pytest.approx(0.65)
        # half of the 0.7 span is left
        assert nxt.time_remaining == 120
        assert nxt.distance_remaining == pytest.approx(1.05)
        assert (nxt.current_step, nxt.total_steps) == (1, 4)

    def test_monotonic_and_ends_at_one(self):
        steps = run(baseline_for(RideEvent.HEADING_TO_DROPOFF), 0.005)
        pcts = [s.progress_percentage for s in steps]
        assert pcts == sorted(pcts)
        assert pcts[-1] == 1.0

    def test_remaining_reaches_zero(self):
        last = run(baseline_for(RideEvent.GET_TO_PICKUP), 0.01)[-1]
        assert last.time_remaining == 0
        assert last.distance_remaining == 0.0

    def test_overshoot_is_clamped(self):
        baseline = baseline_for(RideEvent.HEADING_TO_DROPOFF)
        nxt = advance_progress(baseline, baseline, 5.0)
        assert nxt.progress_percentage == 1.0

    def test_full_baseline_stays_full(self):
        baseline = RideProgress(progress_percentage=1.0)
        nxt = advance_progress(baseline, baseline, 0.1)
        assert nxt.progress_percentage == 1.0
        assert nxt.time_remaining == 0


class TestTicksToComplete:
    @pytest.mark.parametrize(
        "event,increment,expected",
        [
            (RideEvent.GET_TO_PICKUP, 0.01, 70),
            (RideEvent.HEADING_TO_DROPOFF, 0.005, 50),
            (RideEvent.HEADING_TO_DROPOFF, 0.1, 3),
        ],
    )
    def test_tick_count_matches_run(self, event, increment, expected):
        baseline = baseline_for(event)
        assert ticks_to_complete(baseline, increment) == expected
        assert len(run(baseline, increment)) - 1 == expected

    def test_non_positive_increment_rejected(self):
        with pytest.raises(ValueError):
            ticks_to_complete(RideProgress(), 0)
