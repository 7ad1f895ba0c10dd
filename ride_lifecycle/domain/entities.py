"""
Domain entities for a single ride session.

Patterns used
-------------
- **Immutable snapshots**: every entity is a frozen dataclass and
  ``RideState`` is replaced wholesale on each change (``dataclasses.replace``).
- **State Pattern** on ``Passenger``: ``transition_to`` only follows
  PENDING -> ACCEPTED -> PICKED_UP -> DROPPED_OFF, or ACCEPTED -> NO_SHOW.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Optional

from .enums import PASSENGER_TRANSITIONS, PassengerStatus, RideCommand, RideEvent


# ── Errors ────────────────────────────────────────────────────────────


class RideLifecycleError(Exception):
    """Base class for recoverable lifecycle errors."""


class IllegalTransition(RideLifecycleError):
    """Raised when a command has no edge from the current event."""

    def __init__(self, event: RideEvent, command: RideCommand):
        self.event = event
        self.command = command
        super().__init__(f"Cannot apply {command.value} in state {event.value}")


class UnknownPassenger(RideLifecycleError):
    """Raised when a command references a passenger not in the ride."""

    def __init__(self, passenger_id: str):
        self.passenger_id = passenger_id
        super().__init__(f"Unknown passenger: {passenger_id}")


class InvalidPassengerTransition(RideLifecycleError):
    """Raised when a passenger status change would regress."""


# ── Value Objects ─────────────────────────────────────────────────────


@dataclass(frozen=True)
class Coordinates:
    latitude: float
    longitude: float


@dataclass(frozen=True)
class Location:
    coordinates: Coordinates
    address: str
    name: Optional[str] = None


@dataclass(frozen=True)
class RideProgress:
    current_step: int = 0
    total_steps: int = 0
    progress_percentage: float = 0.0
    time_remaining: int = 0  # seconds
    distance_remaining: float = 0.0  # km


@dataclass(frozen=True)
class RideEarnings:
    base_amount: float
    bonus: float = 0.0
    commission: float = 0.0
    currency: str = "₦"
    carbon_emission_avoided: float = 0.0  # kg CO2

    @property
    def total(self) -> float:
        # May be negative when commission exceeds base + bonus.
        return self.base_amount + self.bonus - self.commission


# ── Entities ──────────────────────────────────────────────────────────


@dataclass(frozen=True)
class Driver:
    id: str
    name: str
    rating: float
    vehicle_id: str
    current_location: Coordinates


@dataclass(frozen=True)
class Vehicle:
    id: str
    type: str
    license_plate: str
    current_location: Coordinates
    available_seats: int = 4

    def free_seat(self, max_seats: int) -> Vehicle:
        """Return a copy with one more available seat, capped at *max_seats*."""
        return replace(self, available_seats=min(self.available_seats + 1, max_seats))


@dataclass(frozen=True)
class Passenger:
    id: str
    name: str
    initials: str
    rating: float
    pickup_location: Location
    dropoff_location: Location
    status: PassengerStatus = PassengerStatus.PENDING

    def transition_to(self, new_status: PassengerStatus) -> Passenger:
        """Return a copy in *new_status* if the transition is legal, else raise."""
        allowed = PASSENGER_TRANSITIONS.get(self.status, set())
        if new_status not in allowed:
            raise InvalidPassengerTransition(
                f"Passenger {self.id}: cannot transition from "
                f"{self.status.value} to {new_status.value}"
            )
        return replace(self, status=new_status)


@dataclass(frozen=True)
class Route:
    start_location: Location
    end_location: Location
    waypoints: tuple[Location, ...] = ()
    estimated_duration: int = 0  # minutes
    estimated_distance: float = 0.0  # km

    @property
    def stops(self) -> tuple[Location, ...]:
        return (self.start_location, *self.waypoints, self.end_location)


@dataclass(frozen=True)
class RideState:
    current_event: RideEvent = RideEvent.IDLE
    driver: Optional[Driver] = None
    vehicle: Optional[Vehicle] = None
    passengers: tuple[Passenger, ...] = ()
    route: Optional[Route] = None
    progress: RideProgress = field(default_factory=RideProgress)
    earnings: Optional[RideEarnings] = None
    is_simulating: bool = False

    def passenger(self, passenger_id: str) -> Optional[Passenger]:
        for p in self.passengers:
            if p.id == passenger_id:
                return p
        return None
