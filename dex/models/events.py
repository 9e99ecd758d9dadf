"""Pydantic models for pool notifications.

Each successful mutating pool operation emits exactly one event. Event and
field names are a contract with external observers.
"""

from enum import Enum
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field


class SwapDirection(str, Enum):
    """Which reserve a swap sells into."""

    A_TO_B = "a_to_b"
    B_TO_A = "b_to_a"


class _PoolEventBase(BaseModel):
    model_config = ConfigDict(frozen=True)


class LiquidityAdded(_PoolEventBase):
    """A provider deposited both tokens and received liquidity shares."""

    kind: Literal["liquidity_added"] = "liquidity_added"
    provider: str = Field(description="Depositor address (lowercase)")
    amount_a: int = Field(ge=0)
    amount_b: int = Field(ge=0)
    shares_minted: int = Field(ge=0)


class LiquidityRemoved(_PoolEventBase):
    """A provider burned liquidity shares for a proportional payout."""

    kind: Literal["liquidity_removed"] = "liquidity_removed"
    provider: str = Field(description="Share owner address (lowercase)")
    amount_a: int = Field(ge=0)
    amount_b: int = Field(ge=0)
    shares_burned: int = Field(ge=0)


class Swap(_PoolEventBase):
    """A trader sold one token into the pool for the other."""

    kind: Literal["swap"] = "swap"
    trader: str = Field(description="Trader address (lowercase)")
    direction: SwapDirection
    token_in: str = Field(description="Address of the token sold into the pool")
    token_out: str = Field(description="Address of the token paid out")
    amount_in: int = Field(ge=0)
    amount_out: int = Field(ge=0)


PoolEvent = Annotated[
    LiquidityAdded | LiquidityRemoved | Swap,
    Field(discriminator="kind"),
]
