"""Shared configuration for pool arithmetic and simulations."""

from dataclasses import dataclass
import logging
import os
from typing import Optional


@dataclass(frozen=True)
class PoolSettings:
    fee_numerator: int
    fee_denominator: int
    price_scale: int
    max_amount: int
    event_log_size: int = 1024

    def __post_init__(self) -> None:
        if self.fee_denominator <= 0:
            raise ValueError(f"fee_denominator must be > 0, got {self.fee_denominator}")
        if not 0 < self.fee_numerator <= self.fee_denominator:
            raise ValueError(
                f"fee_numerator must be in (0, {self.fee_denominator}], got {self.fee_numerator}"
            )
        if self.price_scale <= 0:
            raise ValueError(f"price_scale must be > 0, got {self.price_scale}")
        if self.max_amount <= 0:
            raise ValueError(f"max_amount must be > 0, got {self.max_amount}")
        if self.event_log_size < 0:
            raise ValueError(f"event_log_size must be >= 0, got {self.event_log_size}")

    @property
    def fee_bps(self) -> int:
        """Swap fee in basis points (30 for the default 997/1000)."""
        return (self.fee_denominator - self.fee_numerator) * 10_000 // self.fee_denominator


# 0.3% swap fee, 18-decimal fixed-point prices, uint256 amount domain,
# last 1024 events retained
DEFAULT_SETTINGS = PoolSettings(
    fee_numerator=997,
    fee_denominator=1000,
    price_scale=10**18,
    max_amount=2**256 - 1,
)


@dataclass(frozen=True)
class SimulationSettings:
    n_steps: int
    initial_x: int
    initial_y: int
    retail_arrival_rate: float
    retail_mean_size: float
    retail_size_sigma: float
    retail_x_to_y_prob: float
    liquidity_event_prob: float


DEFAULT_SIMULATION = SimulationSettings(
    n_steps=1000,
    initial_x=1_000_000,
    initial_y=1_000_000,
    retail_arrival_rate=0.8,
    retail_mean_size=1_000.0,
    retail_size_sigma=1.2,
    retail_x_to_y_prob=0.5,
    liquidity_event_prob=0.02,
)


def resolve_log_level() -> int:
    """Resolve log level from the DEX_POOL_LOG_LEVEL environment variable."""
    name = os.environ.get("DEX_POOL_LOG_LEVEL", "WARNING").upper()
    level = logging.getLevelName(name)
    return level if isinstance(level, int) else logging.WARNING


def resolve_seed() -> Optional[int]:
    """Resolve the simulation seed from DEX_POOL_SEED, if set."""
    value = os.environ.get("DEX_POOL_SEED")
    return int(value) if value else None
