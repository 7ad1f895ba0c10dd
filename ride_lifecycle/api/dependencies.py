"""FastAPI dependency injection helpers."""

from fastapi.requests import HTTPConnection

from ride_lifecycle.services.controller import RideLifecycleController


def get_controller(conn: HTTPConnection) -> RideLifecycleController:
    """Return the ride session owned by this application instance.

    Takes an ``HTTPConnection`` so HTTP routes and the WebSocket stream
    share it.
    """
    return conn.app.state.controller
