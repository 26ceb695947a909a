"""Pool configuration."""

import os
from collections.abc import Mapping
from dataclasses import dataclass

from dex.constants import (
    BPS_BASE,
    EVENT_HISTORY_LIMIT,
    FEE_DENOMINATOR,
    FEE_NUMERATOR,
    PRICE_SCALE,
)


@dataclass(frozen=True)
class PoolConfig:
    """Fixed parameters of a pool, set once at construction.

    Attributes:
        fee_numerator: Share of each swap input that is priced (default: 997)
        fee_denominator: Fee ratio denominator (default: 1000)
        price_scale: Fixed-point scale for get_price (default: 1e18)
        event_history: Committed events kept in Pool.events (default: 10000)
    """

    fee_numerator: int = FEE_NUMERATOR
    fee_denominator: int = FEE_DENOMINATOR
    price_scale: int = PRICE_SCALE
    event_history: int = EVENT_HISTORY_LIMIT

    def __post_init__(self) -> None:
        if self.fee_denominator <= 0:
            raise ValueError(f"fee_denominator must be positive: {self.fee_denominator}")
        if self.fee_numerator <= 0:
            raise ValueError(f"fee_numerator must be positive: {self.fee_numerator}")
        if self.fee_numerator > self.fee_denominator:
            raise ValueError(
                f"fee_numerator ({self.fee_numerator}) cannot exceed "
                f"fee_denominator ({self.fee_denominator})"
            )
        if self.price_scale <= 0:
            raise ValueError(f"price_scale must be positive: {self.price_scale}")
        if self.event_history <= 0:
            raise ValueError(f"event_history must be positive: {self.event_history}")

    @property
    def fee_bps(self) -> int:
        """Trading fee in basis points (30 for 997/1000)."""
        return (self.fee_denominator - self.fee_numerator) * BPS_BASE // self.fee_denominator

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "PoolConfig":
        """Build a config from DEX_* environment variables.

        Reads DEX_FEE_NUMERATOR, DEX_FEE_DENOMINATOR, DEX_PRICE_SCALE and
        DEX_EVENT_HISTORY. Unset variables fall back to the defaults.
        """
        env = os.environ if environ is None else environ
        return cls(
            fee_numerator=int(env.get("DEX_FEE_NUMERATOR", FEE_NUMERATOR)),
            fee_denominator=int(env.get("DEX_FEE_DENOMINATOR", FEE_DENOMINATOR)),
            price_scale=int(env.get("DEX_PRICE_SCALE", PRICE_SCALE)),
            event_history=int(env.get("DEX_EVENT_HISTORY", EVENT_HISTORY_LIMIT)),
        )


# Default configuration instance
DEFAULT_POOL_CONFIG = PoolConfig()
