"""API endpoints for the pool service.

Handlers are `async def` with no await points, so each pool operation runs
to completion on the event loop before the next request touches the pool.
"""

from typing import Annotated

import structlog
from fastapi import APIRouter, Depends, HTTPException, Path, Query

from dex.constants import UINT256_MAX
from dex.errors import ZeroReservesError
from dex.exchange import Exchange, get_default_exchange
from dex.models.api import (
    AddLiquidityRequest,
    AddLiquidityResponse,
    AllowanceResponse,
    ApproveRequest,
    BalanceResponse,
    LiquidityResponse,
    MintRequest,
    PoolSummary,
    PriceResponse,
    QuoteResponse,
    RemoveLiquidityRequest,
    RemoveLiquidityResponse,
    ReservesResponse,
    SwapRequest,
    SwapResponse,
)
from dex.models.events import PoolEvent
from dex.token import Token

logger = structlog.get_logger()

router = APIRouter()


def get_exchange() -> Exchange:
    """Dependency provider for the exchange instance.

    Override this in tests to inject a fresh exchange:
        app.dependency_overrides[get_exchange] = lambda: exchange
    """
    return get_default_exchange()


ExchangeDep = Annotated[Exchange, Depends(get_exchange)]
OwnerPath = Annotated[str, Path(pattern=r"^0x[a-fA-F0-9]{40}$")]


def _token_or_404(exchange: Exchange, symbol: str) -> Token:
    try:
        return exchange.token(symbol)
    except KeyError:
        raise HTTPException(status_code=404, detail=f"Unknown token: {symbol}") from None


# --- Pool queries ---


@router.get("/pool", response_model=PoolSummary)
async def pool_summary(exchange: ExchangeDep) -> PoolSummary:
    """Reserves, total liquidity, k and price (null while unseeded)."""
    pool = exchange.pool
    reserve_a, reserve_b = pool.get_reserves()
    try:
        price: int | None = pool.get_price()
    except ZeroReservesError:
        price = None
    return PoolSummary(
        address=pool.address,
        token_a=exchange.token_a.address,
        token_b=exchange.token_b.address,
        reserve_a=reserve_a,
        reserve_b=reserve_b,
        total_liquidity=pool.total_liquidity,
        k=pool.k,
        price=price,
    )


@router.get("/pool/reserves", response_model=ReservesResponse)
async def reserves(exchange: ExchangeDep) -> ReservesResponse:
    reserve_a, reserve_b = exchange.pool.get_reserves()
    return ReservesResponse(reserve_a=reserve_a, reserve_b=reserve_b)


@router.get("/pool/price", response_model=PriceResponse)
async def price(exchange: ExchangeDep) -> PriceResponse:
    pool = exchange.pool
    return PriceResponse(price=pool.get_price(), price_scale=pool.config.price_scale)


@router.get("/pool/quote", response_model=QuoteResponse)
async def quote(
    exchange: ExchangeDep,
    amount_in: Annotated[int, Query(alias="amountIn", ge=0, le=UINT256_MAX)],
    reserve_in: Annotated[int, Query(alias="reserveIn", ge=0, le=UINT256_MAX)],
    reserve_out: Annotated[int, Query(alias="reserveOut", ge=0, le=UINT256_MAX)],
) -> QuoteResponse:
    """Pure swap quote for arbitrary reserves."""
    amount_out = exchange.pool.get_amount_out(amount_in, reserve_in, reserve_out)
    return QuoteResponse(amount_out=amount_out)


@router.get("/pool/liquidity/{owner}", response_model=LiquidityResponse)
async def liquidity(owner: OwnerPath, exchange: ExchangeDep) -> LiquidityResponse:
    pool = exchange.pool
    return LiquidityResponse(
        owner=owner,
        shares=pool.liquidity_of(owner),
        total_liquidity=pool.total_liquidity,
    )


@router.get("/pool/events", response_model=list[PoolEvent])
async def events(exchange: ExchangeDep) -> list[PoolEvent]:
    return exchange.pool.events


# --- Pool operations ---


@router.post("/pool/liquidity/add", response_model=AddLiquidityResponse)
async def add_liquidity(
    request: AddLiquidityRequest, exchange: ExchangeDep
) -> AddLiquidityResponse:
    logger.info(
        "received_add_liquidity",
        provider=request.provider,
        amount_a=request.amount_a,
        amount_b=request.amount_b,
    )
    shares = exchange.pool.add_liquidity(
        request.provider, int(request.amount_a), int(request.amount_b)
    )
    return AddLiquidityResponse(shares_minted=shares)


@router.post("/pool/liquidity/remove", response_model=RemoveLiquidityResponse)
async def remove_liquidity(
    request: RemoveLiquidityRequest, exchange: ExchangeDep
) -> RemoveLiquidityResponse:
    logger.info("received_remove_liquidity", provider=request.provider, shares=request.shares)
    amount_a, amount_b = exchange.pool.remove_liquidity(request.provider, int(request.shares))
    return RemoveLiquidityResponse(amount_a=amount_a, amount_b=amount_b)


@router.post("/pool/swap", response_model=SwapResponse)
async def swap(request: SwapRequest, exchange: ExchangeDep) -> SwapResponse:
    logger.info(
        "received_swap",
        trader=request.trader,
        direction=request.direction.value,
        amount_in=request.amount_in,
    )
    amount_out = exchange.pool.swap(request.trader, request.direction, int(request.amount_in))
    return SwapResponse(amount_out=amount_out)


# --- Token ledgers ---


@router.post("/tokens/{symbol}/mint", response_model=BalanceResponse)
async def mint(symbol: str, request: MintRequest, exchange: ExchangeDep) -> BalanceResponse:
    token = _token_or_404(exchange, symbol)
    token.mint(request.to, int(request.amount))
    return BalanceResponse(
        token=token.address,
        owner=request.to,
        balance=token.balance_of(request.to),
    )


@router.post("/tokens/{symbol}/approve", response_model=AllowanceResponse)
async def approve(symbol: str, request: ApproveRequest, exchange: ExchangeDep) -> AllowanceResponse:
    token = _token_or_404(exchange, symbol)
    token.approve(request.owner, request.spender, int(request.amount))
    return AllowanceResponse(
        token=token.address,
        owner=request.owner,
        spender=request.spender,
        allowance=token.allowance(request.owner, request.spender),
    )


@router.get("/tokens/{symbol}/balances/{owner}", response_model=BalanceResponse)
async def balance(symbol: str, owner: OwnerPath, exchange: ExchangeDep) -> BalanceResponse:
    token = _token_or_404(exchange, symbol)
    return BalanceResponse(token=token.address, owner=owner, balance=token.balance_of(owner))
