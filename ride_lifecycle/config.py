"""Centralised application settings loaded from environment / .env file."""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    log_level: str = "INFO"

    # Timed progression (per tick)
    pickup_tick_seconds: float = 0.1
    pickup_increment: float = 0.01
    dropoff_tick_seconds: float = 0.15
    dropoff_increment: float = 0.005
    settle_delay_seconds: float = 0.5  # pause at 100 % before auto-advance

    # Full simulation script
    offer_display_seconds: float = 3.0
    accept_display_seconds: float = 1.0
    pickup_confirmation_display_seconds: float = 5.0
    completed_display_seconds: float = 1.0
    new_trip_delay_seconds: float = 0.5

    # Vehicle
    max_vehicle_seats: int = 4

    # Earnings
    base_amount: float = 6500.0  # NGN
    bonus: float = 500.0
    commission: float = 500.0
    carbon_emission_avoided: float = 1.2  # kg CO2

    model_config = {"env_prefix": "RIDE_", "env_file": ".env", "extra": "ignore"}


settings = Settings()
