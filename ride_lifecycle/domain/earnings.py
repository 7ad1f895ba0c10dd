"""
Trip Earnings  (Strategy Pattern)
=================================

Formula
-------
Total = Base_Amount + Bonus - Commission

The total is not clamped: a commission larger than base + bonus yields a
negative total, which is reported as-is.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from ride_lifecycle.config import Settings

from .entities import RideEarnings, RideState


# ── Strategy hierarchy ────────────────────────────────────────────────


class EarningsStrategy(ABC):
    @abstractmethod
    def calculate(self, state: RideState) -> RideEarnings: ...


class FixedEarnings(EarningsStrategy):
    """Assigns the same constants to every trip."""

    def __init__(
        self,
        base_amount: float = 6500.0,
        bonus: float = 500.0,
        commission: float = 500.0,
        carbon_emission_avoided: float = 0.0,
        currency: str = "₦",
    ):
        self.base_amount = base_amount
        self.bonus = bonus
        self.commission = commission
        self.carbon_emission_avoided = carbon_emission_avoided
        self.currency = currency

    def calculate(self, state: RideState) -> RideEarnings:
        return RideEarnings(
            base_amount=self.base_amount,
            bonus=self.bonus,
            commission=self.commission,
            currency=self.currency,
            carbon_emission_avoided=self.carbon_emission_avoided,
        )


# ── Facade ────────────────────────────────────────────────────────────


class EarningsCalculator:
    """High-level API used by the transition table at trip completion."""

    def __init__(self, strategy: EarningsStrategy | None = None):
        self.strategy = strategy or FixedEarnings()

    @classmethod
    def from_settings(cls, settings: Settings) -> EarningsCalculator:
        return cls(
            FixedEarnings(
                base_amount=settings.base_amount,
                bonus=settings.bonus,
                commission=settings.commission,
                carbon_emission_avoided=settings.carbon_emission_avoided,
            )
        )

    def calculate(self, state: RideState) -> RideEarnings:
        return self.strategy.calculate(state)
