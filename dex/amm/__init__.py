"""Constant product AMM: pool engine and its pure math."""

from dex.amm.math import (
    constant_product,
    get_amount_in,
    get_amount_out,
    initial_shares,
    quote_liquidity,
    spot_price,
    subsequent_shares,
    withdrawal_amounts,
)
from dex.amm.pool import EventListener, Pool, PoolState

__all__ = [
    # Engine
    "Pool",
    "PoolState",
    "EventListener",
    # Math
    "get_amount_out",
    "get_amount_in",
    "initial_shares",
    "subsequent_shares",
    "withdrawal_amounts",
    "spot_price",
    "quote_liquidity",
    "constant_product",
]
