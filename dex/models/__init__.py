"""Pydantic models for pool events and the HTTP API."""

from dex.models.events import (
    LiquidityAdded,
    LiquidityRemoved,
    PoolEvent,
    Swap,
    SwapDirection,
)
from dex.models.types import Address, Uint256, is_valid_address, normalize_address

__all__ = [
    # Events
    "LiquidityAdded",
    "LiquidityRemoved",
    "Swap",
    "SwapDirection",
    "PoolEvent",
    # Types
    "Address",
    "Uint256",
    "normalize_address",
    "is_valid_address",
]
