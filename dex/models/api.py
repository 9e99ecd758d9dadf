"""Pydantic request/response models for the pool HTTP API.

Amounts are uint256 decimal strings on the wire and plain ints inside the
engine.
"""

from pydantic import BaseModel, Field

from dex.models.events import SwapDirection
from dex.models.types import Address, Uint256


class AddLiquidityRequest(BaseModel):
    """Deposit both tokens into the pool."""

    provider: Address
    amount_a: Uint256 = Field(alias="amountA")
    amount_b: Uint256 = Field(alias="amountB")

    model_config = {"populate_by_name": True}


class AddLiquidityResponse(BaseModel):
    shares_minted: Uint256 = Field(alias="sharesMinted")

    model_config = {"populate_by_name": True}


class RemoveLiquidityRequest(BaseModel):
    """Burn liquidity shares for a proportional payout."""

    provider: Address
    shares: Uint256


class RemoveLiquidityResponse(BaseModel):
    amount_a: Uint256 = Field(alias="amountA")
    amount_b: Uint256 = Field(alias="amountB")

    model_config = {"populate_by_name": True}


class SwapRequest(BaseModel):
    """Sell one pool token for the other."""

    trader: Address
    direction: SwapDirection
    amount_in: Uint256 = Field(alias="amountIn")

    model_config = {"populate_by_name": True}


class SwapResponse(BaseModel):
    amount_out: Uint256 = Field(alias="amountOut")

    model_config = {"populate_by_name": True}


class ReservesResponse(BaseModel):
    reserve_a: Uint256 = Field(alias="reserveA")
    reserve_b: Uint256 = Field(alias="reserveB")

    model_config = {"populate_by_name": True}


class PriceResponse(BaseModel):
    price: Uint256 = Field(description="reserveB / reserveA scaled by priceScale")
    price_scale: Uint256 = Field(alias="priceScale")

    model_config = {"populate_by_name": True}


class QuoteResponse(BaseModel):
    amount_out: Uint256 = Field(alias="amountOut")

    model_config = {"populate_by_name": True}


class LiquidityResponse(BaseModel):
    owner: Address
    shares: Uint256
    total_liquidity: Uint256 = Field(alias="totalLiquidity")

    model_config = {"populate_by_name": True}


class PoolSummary(BaseModel):
    """Snapshot of a pool's public state."""

    address: Address
    token_a: Address = Field(alias="tokenA")
    token_b: Address = Field(alias="tokenB")
    reserve_a: Uint256 = Field(alias="reserveA")
    reserve_b: Uint256 = Field(alias="reserveB")
    total_liquidity: Uint256 = Field(alias="totalLiquidity")
    k: Uint256
    price: Uint256 | None = Field(
        default=None,
        description="reserveB / reserveA scaled by 1e18; null while reserve A is empty",
    )

    model_config = {"populate_by_name": True}


class MintRequest(BaseModel):
    to: Address
    amount: Uint256


class ApproveRequest(BaseModel):
    owner: Address
    spender: Address
    amount: Uint256


class BalanceResponse(BaseModel):
    token: Address
    owner: Address
    balance: Uint256


class AllowanceResponse(BaseModel):
    token: Address
    owner: Address
    spender: Address
    allowance: Uint256
