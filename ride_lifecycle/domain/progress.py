"""
Linear progress model for the en-route phases.

Each lifecycle event has a baseline ``RideProgress``.  While a timed
progression runs, the percentage moves from the baseline towards 1.0 by a
fixed increment per tick, and the remaining time / distance shrink in
proportion to the remaining share of the run:

  remaining = baseline_remaining x (1 - p) / (1 - p0)

Complexity: O(1) per tick.
"""

from __future__ import annotations

import math

from .entities import RideProgress
from .enums import RideEvent

TOTAL_STEPS = 4
_EPSILON = 1e-9

PROGRESS_BASELINES: dict[RideEvent, RideProgress] = {
    RideEvent.IDLE: RideProgress(),
    RideEvent.OFFER_RIDE_AVAILABLE: RideProgress(),
    RideEvent.PASSENGERS_ACCEPTED: RideProgress(),
    RideEvent.GET_TO_PICKUP: RideProgress(
        current_step=1,
        total_steps=TOTAL_STEPS,
        progress_percentage=0.3,
        time_remaining=240,
        distance_remaining=2.1,
    ),
    RideEvent.PICKUP_CONFIRMATION: RideProgress(
        current_step=2,
        total_steps=TOTAL_STEPS,
        progress_percentage=0.5,
        time_remaining=285,
        distance_remaining=0.0,
    ),
    RideEvent.HEADING_TO_DROPOFF: RideProgress(
        current_step=3,
        total_steps=TOTAL_STEPS,
        progress_percentage=0.75,
        time_remaining=480,
        distance_remaining=3.2,
    ),
    RideEvent.TRIP_COMPLETED: RideProgress(
        current_step=TOTAL_STEPS,
        total_steps=TOTAL_STEPS,
        progress_percentage=1.0,
    ),
    RideEvent.TRIP_ENDED: RideProgress(
        current_step=TOTAL_STEPS,
        total_steps=TOTAL_STEPS,
        progress_percentage=1.0,
    ),
}


def baseline_for(event: RideEvent) -> RideProgress:
    return PROGRESS_BASELINES[event]


def is_complete(progress: RideProgress) -> bool:
    return progress.progress_percentage >= 1.0 - _EPSILON


def advance_progress(
    current: RideProgress, baseline: RideProgress, increment: float
) -> RideProgress:
    """Return *current* moved forward by one tick of *increment*.

    The percentage never decreases and snaps to exactly 1.0 once within
    float error of it.
    """
    pct = min(1.0, current.progress_percentage + increment)
    if pct >= 1.0 - _EPSILON:
        pct = 1.0

    span = 1.0 - baseline.progress_percentage
    left = (1.0 - pct) / span if span > 0 else 0.0

    return RideProgress(
        current_step=baseline.current_step,
        total_steps=baseline.total_steps,
        progress_percentage=pct,
        time_remaining=int(round(baseline.time_remaining * left)),
        distance_remaining=round(baseline.distance_remaining * left, 2),
    )


def ticks_to_complete(baseline: RideProgress, increment: float) -> int:
    """Number of ticks a run starting at *baseline* needs to reach 1.0."""
    if increment <= 0:
        raise ValueError("increment must be positive")
    return max(0, math.ceil((1.0 - baseline.progress_percentage) / increment - _EPSILON))
