"""Pydantic models for pool events and shared types."""

from dex.models.events import (
    LiquidityAdded,
    LiquidityRemoved,
    PoolEvent,
    PoolSnapshot,
    Swap,
    SwapDirection,
)
from dex.models.types import Address, Uint256, is_valid_address, normalize_address

__all__ = [
    # Types
    "Address",
    "Uint256",
    "is_valid_address",
    "normalize_address",
    # Events
    "LiquidityAdded",
    "LiquidityRemoved",
    "Swap",
    "SwapDirection",
    "PoolEvent",
    "PoolSnapshot",
]
