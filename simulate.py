"""
Console simulation -- runs one full ride lifecycle and prints each event.

Run:
    python simulate.py            # real-time display delays (~1 minute)
    python simulate.py --fast     # compressed timings

Prints one line per lifecycle event plus a progress line every 10 %.
"""

import asyncio
import sys

from ride_lifecycle.config import Settings
from ride_lifecycle.domain.enums import RideEvent
from ride_lifecycle.services.controller import RideLifecycleController

FAST = {
    "pickup_tick_seconds": 0.01,
    "pickup_increment": 0.05,
    "dropoff_tick_seconds": 0.01,
    "dropoff_increment": 0.05,
    "settle_delay_seconds": 0.05,
    "offer_display_seconds": 0.2,
    "accept_display_seconds": 0.1,
    "pickup_confirmation_display_seconds": 0.2,
    "completed_display_seconds": 0.1,
}


async def main(fast: bool) -> None:
    settings = Settings(**FAST) if fast else Settings()
    controller = RideLifecycleController(settings=settings)

    sub = controller.subscribe()
    await controller.start_full_simulation()

    last_event = None
    last_decile = -1
    async for state in sub:
        pct = state.progress.progress_percentage
        if state.current_event is not last_event:
            last_event, last_decile = state.current_event, int(pct * 10)
            names = ", ".join(f"{p.name}={p.status.value}" for p in state.passengers)
            print(f"[{state.current_event.value}] {names}")
        elif int(pct * 10) > last_decile:
            last_decile = int(pct * 10)
            p = state.progress
            print(f"    {pct:4.0%}  {p.time_remaining:>3}s  {p.distance_remaining:.2f} km left")

        if state.current_event is RideEvent.TRIP_ENDED:
            e = state.earnings
            print(
                f"Earnings: {e.currency}{e.total:,.2f} "
                f"(base {e.base_amount:,.2f} + bonus {e.bonus:,.2f} "
                f"- commission {e.commission:,.2f}), "
                f"{e.carbon_emission_avoided} kg CO2 avoided"
            )
            break

    sub.close()
    await controller.shutdown()


if __name__ == "__main__":
    asyncio.run(main("--fast" in sys.argv))
