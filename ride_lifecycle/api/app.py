"""
FastAPI application factory.

* Creates one ride session (store + controller) per application instance.
* Cancels the session's background tasks on shutdown via lifespan events.
* Swagger / OpenAPI UI available at ``/docs``.
"""

from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI

from ride_lifecycle.api.routes import admin, ride
from ride_lifecycle.config import Settings, settings as default_settings
from ride_lifecycle.infrastructure.store import RideSessionStore
from ride_lifecycle.services.controller import RideLifecycleController


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Stop progression and simulation tasks on shutdown."""
    yield
    await app.state.controller.shutdown()


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or default_settings
    logging.basicConfig(level=settings.log_level)

    app = FastAPI(
        title="Ride Lifecycle Simulator API",
        description=(
            "Drives a single ride through offer, pickup, drop-off and "
            "completion.  Commands change the ride; the WebSocket stream "
            "publishes every snapshot."
        ),
        version="1.0.0",
        lifespan=lifespan,
    )

    app.state.controller = RideLifecycleController(RideSessionStore(), settings)

    # Routers
    app.include_router(ride.router, prefix="/api/v1")
    app.include_router(admin.router, prefix="/api/v1")

    return app
