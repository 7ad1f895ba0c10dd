"""Pydantic response schemas for the REST / WebSocket API."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel

from ride_lifecycle.domain.enums import PassengerStatus, RideEvent


class CoordinatesResponse(BaseModel):
    latitude: float
    longitude: float

    model_config = {"from_attributes": True}


class LocationResponse(BaseModel):
    coordinates: CoordinatesResponse
    address: str
    name: Optional[str] = None

    model_config = {"from_attributes": True}


class DriverResponse(BaseModel):
    id: str
    name: str
    rating: float
    vehicle_id: str
    current_location: CoordinatesResponse

    model_config = {"from_attributes": True}


class VehicleResponse(BaseModel):
    id: str
    type: str
    license_plate: str
    current_location: CoordinatesResponse
    available_seats: int

    model_config = {"from_attributes": True}


class PassengerResponse(BaseModel):
    id: str
    name: str
    initials: str
    rating: float
    pickup_location: LocationResponse
    dropoff_location: LocationResponse
    status: PassengerStatus

    model_config = {"from_attributes": True}


class RouteResponse(BaseModel):
    start_location: LocationResponse
    end_location: LocationResponse
    waypoints: list[LocationResponse] = []
    estimated_duration: int
    estimated_distance: float

    model_config = {"from_attributes": True}


class ProgressResponse(BaseModel):
    current_step: int
    total_steps: int
    progress_percentage: float
    time_remaining: int
    distance_remaining: float

    model_config = {"from_attributes": True}


class EarningsResponse(BaseModel):
    base_amount: float
    bonus: float
    commission: float
    total: float
    currency: str
    carbon_emission_avoided: float

    model_config = {"from_attributes": True}


class RideStateResponse(BaseModel):
    current_event: RideEvent
    driver: Optional[DriverResponse] = None
    vehicle: Optional[VehicleResponse] = None
    passengers: list[PassengerResponse] = []
    route: Optional[RouteResponse] = None
    progress: ProgressResponse
    earnings: Optional[EarningsResponse] = None
    is_simulating: bool

    model_config = {"from_attributes": True}


class CommandResponse(BaseModel):
    command: str
    accepted: bool
    event: RideEvent
    state: RideStateResponse


class HealthResponse(BaseModel):
    status: str = "ok"
    subscribers: int = 0


class ErrorResponse(BaseModel):
    detail: str
