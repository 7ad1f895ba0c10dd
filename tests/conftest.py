"""
Shared test fixtures.

Two timing profiles:

* ``slow_settings`` -- progression ticks every 60 s, so nothing moves on its
  own during a test.  Used for step-by-step command tests.
* ``fast_settings`` -- every delay in the millisecond range, so timed
  progressions and full simulations finish in well under a second.
"""

from typing import AsyncGenerator

import pytest
import pytest_asyncio

from ride_lifecycle.config import Settings
from ride_lifecycle.infrastructure.store import RideSessionStore
from ride_lifecycle.services.controller import RideLifecycleController


@pytest.fixture
def slow_settings() -> Settings:
    return Settings(
        pickup_tick_seconds=60.0,
        dropoff_tick_seconds=60.0,
        settle_delay_seconds=60.0,
    )


@pytest.fixture
def fast_settings() -> Settings:
    return Settings(
        pickup_tick_seconds=0.001,
        pickup_increment=0.1,
        dropoff_tick_seconds=0.001,
        dropoff_increment=0.1,
        settle_delay_seconds=0.01,
        offer_display_seconds=0.01,
        accept_display_seconds=0.01,
        pickup_confirmation_display_seconds=0.01,
        completed_display_seconds=0.01,
        new_trip_delay_seconds=0.01,
    )


@pytest_asyncio.fixture
async def controller(slow_settings) -> AsyncGenerator[RideLifecycleController, None]:
    """Controller whose progressions never tick on their own."""
    c = RideLifecycleController(RideSessionStore(), slow_settings)
    yield c
    await c.shutdown()


@pytest_asyncio.fixture
async def fast_controller(fast_settings) -> AsyncGenerator[RideLifecycleController, None]:
    """Controller with millisecond timings."""
    c = RideLifecycleController(RideSessionStore(), fast_settings)
    yield c
    await c.shutdown()
