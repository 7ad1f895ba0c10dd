"""Domain enumerations and state-transition rules."""

import enum


class RideEvent(str, enum.Enum):
    IDLE = "IDLE"
    OFFER_RIDE_AVAILABLE = "OFFER_RIDE_AVAILABLE"
    PASSENGERS_ACCEPTED = "PASSENGERS_ACCEPTED"
    GET_TO_PICKUP = "GET_TO_PICKUP"
    PICKUP_CONFIRMATION = "PICKUP_CONFIRMATION"
    HEADING_TO_DROPOFF = "HEADING_TO_DROPOFF"
    TRIP_COMPLETED = "TRIP_COMPLETED"
    TRIP_ENDED = "TRIP_ENDED"


class PassengerStatus(str, enum.Enum):
    PENDING = "PENDING"
    ACCEPTED = "ACCEPTED"
    PICKED_UP = "PICKED_UP"
    DROPPED_OFF = "DROPPED_OFF"
    NO_SHOW = "NO_SHOW"


class RideCommand(str, enum.Enum):
    OFFER_RIDE = "OFFER_RIDE"
    ADVANCE = "ADVANCE"
    CONFIRM_PICKUP = "CONFIRM_PICKUP"
    REPORT_NO_SHOW = "REPORT_NO_SHOW"
    RESET = "RESET"


# State machine: (current event, command) -> next event
RIDE_TRANSITIONS: dict[tuple[RideEvent, RideCommand], RideEvent] = {
    (RideEvent.IDLE, RideCommand.OFFER_RIDE): RideEvent.OFFER_RIDE_AVAILABLE,
    (RideEvent.OFFER_RIDE_AVAILABLE, RideCommand.ADVANCE): RideEvent.PASSENGERS_ACCEPTED,
    (RideEvent.PASSENGERS_ACCEPTED, RideCommand.ADVANCE): RideEvent.GET_TO_PICKUP,
    (RideEvent.GET_TO_PICKUP, RideCommand.ADVANCE): RideEvent.PICKUP_CONFIRMATION,
    (RideEvent.PICKUP_CONFIRMATION, RideCommand.CONFIRM_PICKUP): RideEvent.HEADING_TO_DROPOFF,
    (RideEvent.PICKUP_CONFIRMATION, RideCommand.REPORT_NO_SHOW): RideEvent.HEADING_TO_DROPOFF,
    (RideEvent.HEADING_TO_DROPOFF, RideCommand.ADVANCE): RideEvent.TRIP_COMPLETED,
    (RideEvent.TRIP_COMPLETED, RideCommand.ADVANCE): RideEvent.TRIP_ENDED,
}

# Reset is legal from every non-idle event
RIDE_TRANSITIONS.update(
    {
        (event, RideCommand.RESET): RideEvent.IDLE
        for event in RideEvent
        if event is not RideEvent.IDLE
    }
)

# Events whose progress is driven by the timed-progression worker
TIMED_EVENTS: frozenset[RideEvent] = frozenset(
    {RideEvent.GET_TO_PICKUP, RideEvent.HEADING_TO_DROPOFF}
)

# Events that carry earnings
SETTLED_EVENTS: frozenset[RideEvent] = frozenset(
    {RideEvent.TRIP_COMPLETED, RideEvent.TRIP_ENDED}
)

PASSENGER_TRANSITIONS: dict[PassengerStatus, set[PassengerStatus]] = {
    PassengerStatus.PENDING: {PassengerStatus.ACCEPTED},
    PassengerStatus.ACCEPTED: {PassengerStatus.PICKED_UP, PassengerStatus.NO_SHOW},
    PassengerStatus.PICKED_UP: {PassengerStatus.DROPPED_OFF},
    PassengerStatus.DROPPED_OFF: set(),
    PassengerStatus.NO_SHOW: set(),
}
