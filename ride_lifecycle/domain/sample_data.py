"""
Synthetic ride data used when a ride is offered.

Creates:
  - 1 driver and 1 sedan parked in central Lagos
  - 2 passengers sharing a pickup on Ladipo Oluwole Street, each with
    their own drop-off (multi-stop trip)
  - 1 route: driver -> pickup -> first drop-off -> final drop-off
"""

from __future__ import annotations

from .entities import Coordinates, Driver, Location, Passenger, Route, Vehicle
from .enums import PassengerStatus

LAGOS_CENTER = Coordinates(6.5244, 3.3792)
LADIPO_OLUWOLE_STREET = Coordinates(6.5378, 3.3516)
AROMIRE_STREET = Coordinates(6.5287, 3.3478)  # first drop-off
COMMUNITY_ROAD = Coordinates(6.5198, 3.3441)  # second drop-off

OFFERED_SEATS = 2

PASSENGERS = [
    {
        "id": "passenger_001",
        "name": "Darrell Stewart",
        "initials": "DS",
        "rating": 4.7,
        "dropoff": (AROMIRE_STREET, "Aromire Street"),
    },
    {
        "id": "passenger_002",
        "name": "Hinata Chukwu",
        "initials": "HC",
        "rating": 4.7,
        "dropoff": (COMMUNITY_ROAD, "Community Road"),
    },
]


def sample_driver() -> Driver:
    return Driver(
        id="driver_001",
        name="Current Driver",
        rating=4.8,
        vehicle_id="vehicle_001",
        current_location=LAGOS_CENTER,
    )


def sample_vehicle() -> Vehicle:
    return Vehicle(
        id="vehicle_001",
        type="Sedan",
        license_plate="ABC-123-XY",
        current_location=LAGOS_CENTER,
        available_seats=OFFERED_SEATS,
    )


def sample_passengers() -> tuple[Passenger, ...]:
    pickup = Location(
        coordinates=LADIPO_OLUWOLE_STREET,
        address="Ladipo Oluwole Street",
        name="Ladipo Oluwole Street",
    )
    passengers = []
    for p in PASSENGERS:
        coords, street = p["dropoff"]
        passengers.append(
            Passenger(
                id=p["id"],
                name=p["name"],
                initials=p["initials"],
                rating=p["rating"],
                pickup_location=pickup,
                dropoff_location=Location(coordinates=coords, address=street, name=street),
                status=PassengerStatus.PENDING,
            )
        )
    return tuple(passengers)


def sample_route() -> Route:
    return Route(
        start_location=Location(
            coordinates=LAGOS_CENTER,
            address="Current Location",
            name="Driver Location",
        ),
        end_location=Location(
            coordinates=COMMUNITY_ROAD,
            address="Community Road",
            name="Final Destination",
        ),
        waypoints=(
            Location(
                coordinates=LADIPO_OLUWOLE_STREET,
                address="Ladipo Oluwole Street",
                name="Pickup Point",
            ),
            Location(
                coordinates=AROMIRE_STREET,
                address="Aromire Street",
                name="First Drop-off (Darrell Stewart)",
            ),
        ),
        estimated_duration=15,
        estimated_distance=5.3,
    )
