"""Two-asset constant product liquidity pool.

The pool owns two reserves, a total-shares counter and a per-owner share
ledger. Every mutating operation is all-or-nothing: on any error the pool,
its event log and both token ledgers are restored to their state before the
call. Within an operation, bookkeeping is always updated before tokens are
paid out.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field, replace

import structlog

from dex.amm import math as pool_math
from dex.config import DEFAULT_DEX_CONFIG, DexConfig
from dex.errors import (
    InvalidAmountError,
    InvariantViolationError,
    ZeroAmountError,
    ZeroAmountsError,
    ZeroReservesError,
)
from dex.models.events import (
    LiquidityAdded,
    LiquidityRemoved,
    PoolEvent,
    Swap,
    SwapDirection,
)
from dex.models.types import normalize_address
from dex.safe_int import S
from dex.token import TokenLedger

logger = structlog.get_logger()

EventListener = Callable[[PoolEvent], None]


@dataclass
class PoolState:
    """Mutable bookkeeping of a pool."""

    reserve_a: int = 0
    reserve_b: int = 0
    total_liquidity: int = 0
    liquidity: dict[str, int] = field(default_factory=dict)

    def copy(self) -> PoolState:
        return replace(self, liquidity=dict(self.liquidity))


class Pool:
    """Constant product AMM pool for one token pair.

    A pool with zero total liquidity is unseeded: the next deposit mints
    isqrt(amount_a * amount_b) shares, including after a full drain.

    Example:
        pool = Pool(POOL, token_a, token_b)
        token_a.approve(alice, pool.address, MAX_ALLOWANCE)
        token_b.approve(alice, pool.address, MAX_ALLOWANCE)
        pool.add_liquidity(alice, 100, 400)  # mints 200 shares
    """

    def __init__(
        self,
        address: str,
        token_a: TokenLedger,
        token_b: TokenLedger,
        config: DexConfig = DEFAULT_DEX_CONFIG,
    ) -> None:
        if normalize_address(token_a.address) == normalize_address(token_b.address):
            raise ValueError(f"Pool tokens must differ, got {token_a.address} twice")
        self.address = normalize_address(address, validate=True)
        self.token_a = token_a
        self.token_b = token_b
        self.config = config
        self._state = PoolState()
        self._events: list[PoolEvent] = []
        self._listeners: list[EventListener] = []
        self._depth = 0

    def __repr__(self) -> str:
        return (
            f"Pool({self.token_a.symbol}/{self.token_b.symbol}, "
            f"reserves=({self._state.reserve_a}, {self._state.reserve_b}), "
            f"total_liquidity={self._state.total_liquidity})"
        )

    # --- Liquidity ---

    def add_liquidity(self, provider: str, amount_a: int, amount_b: int) -> int:
        """Deposit both tokens and mint liquidity shares to the provider.

        The first deposit (total liquidity zero) mints isqrt(amount_a * amount_b).
        Later deposits mint amount_a * total_liquidity // reserve_a; amount_b is
        not checked against the reserve ratio.

        Returns:
            Number of shares minted

        Raises:
            ZeroAmountsError: If either amount is zero
            InsufficientValueError: If the provider's balance or allowance is short
        """
        if amount_a <= 0 or amount_b <= 0:
            raise ZeroAmountsError("Zero amounts")

        provider = normalize_address(provider)
        with self._atomic("add_liquidity", provider):
            state = self._state
            if state.total_liquidity == 0:
                shares = pool_math.initial_shares(amount_a, amount_b)
            else:
                shares = pool_math.subsequent_shares(
                    amount_a, state.reserve_a, state.total_liquidity
                )

            self._transfer_in(self.token_a, provider, amount_a)
            self._transfer_in(self.token_b, provider, amount_b)

            state.reserve_a = (S(state.reserve_a) + amount_a).to_uint256()
            state.reserve_b = (S(state.reserve_b) + amount_b).to_uint256()
            state.total_liquidity = (S(state.total_liquidity) + shares).to_uint256()
            state.liquidity[provider] = state.liquidity.get(provider, 0) + shares

            event = LiquidityAdded(
                provider=provider,
                amount_a=amount_a,
                amount_b=amount_b,
                shares_minted=shares,
            )
            self._events.append(event)

        logger.info(
            "liquidity_added",
            pool=self.address,
            provider=provider,
            amount_a=amount_a,
            amount_b=amount_b,
            shares_minted=shares,
        )
        return shares

    def remove_liquidity(self, provider: str, shares: int) -> tuple[int, int]:
        """Burn shares for a proportional share of both reserves.

        Returns:
            (amount_a, amount_b) paid out, each rounded down

        Raises:
            InvalidAmountError: If shares is zero or exceeds the provider's balance
        """
        provider = normalize_address(provider)
        if shares <= 0 or shares > self.liquidity_of(provider):
            raise InvalidAmountError("Invalid amount")

        with self._atomic("remove_liquidity", provider):
            state = self._state
            amount_a, amount_b = pool_math.withdrawal_amounts(
                shares, state.reserve_a, state.reserve_b, state.total_liquidity
            )

            state.liquidity[provider] = (S(state.liquidity[provider]) - shares).value
            state.total_liquidity = (S(state.total_liquidity) - shares).value
            state.reserve_a = (S(state.reserve_a) - amount_a).value
            state.reserve_b = (S(state.reserve_b) - amount_b).value

            self._transfer_out(self.token_a, provider, amount_a)
            self._transfer_out(self.token_b, provider, amount_b)

            event = LiquidityRemoved(
                provider=provider,
                amount_a=amount_a,
                amount_b=amount_b,
                shares_burned=shares,
            )
            self._events.append(event)

        logger.info(
            "liquidity_removed",
            pool=self.address,
            provider=provider,
            amount_a=amount_a,
            amount_b=amount_b,
            shares_burned=shares,
        )
        return amount_a, amount_b

    # --- Swaps ---

    def swap_a_for_b(self, trader: str, amount_in: int) -> int:
        """Sell amount_in of token A for token B. Returns amount of B received."""
        return self.swap(trader, SwapDirection.A_TO_B, amount_in)

    def swap_b_for_a(self, trader: str, amount_in: int) -> int:
        """Sell amount_in of token B for token A. Returns amount of A received."""
        return self.swap(trader, SwapDirection.B_TO_A, amount_in)

    def swap(self, trader: str, direction: SwapDirection | str, amount_in: int) -> int:
        """Sell amount_in of one token for the other.

        There is no slippage guard: any positive amount is accepted and large
        trades simply get a poor rate.

        Returns:
            Output amount paid to the trader

        Raises:
            ZeroAmountError: If amount_in is zero
            ZeroReservesError: If the pool holds no reserves
            InsufficientValueError: If the trader's balance or allowance is short
        """
        direction = SwapDirection(direction)
        if amount_in <= 0:
            raise ZeroAmountError("Zero amount")

        trader = normalize_address(trader)
        if direction is SwapDirection.A_TO_B:
            token_in, token_out = self.token_a, self.token_b
        else:
            token_in, token_out = self.token_b, self.token_a

        with self._atomic("swap", trader):
            state = self._state
            reserve_in, reserve_out = self._reserves_for(direction)
            if reserve_in == 0 or reserve_out == 0:
                raise ZeroReservesError("Zero reserves")

            k_before = pool_math.constant_product(state.reserve_a, state.reserve_b)
            amount_out = pool_math.get_amount_out(amount_in, reserve_in, reserve_out)

            self._transfer_in(token_in, trader, amount_in)

            new_reserve_in = (S(reserve_in) + amount_in).to_uint256()
            new_reserve_out = (S(reserve_out) - amount_out).value
            if direction is SwapDirection.A_TO_B:
                state.reserve_a, state.reserve_b = new_reserve_in, new_reserve_out
            else:
                state.reserve_a, state.reserve_b = new_reserve_out, new_reserve_in

            k_after = pool_math.constant_product(state.reserve_a, state.reserve_b)
            if k_after <= k_before:
                raise InvariantViolationError(
                    f"Invariant violated: k went from {k_before} to {k_after}"
                )

            self._transfer_out(token_out, trader, amount_out)

            event = Swap(
                trader=trader,
                direction=direction,
                token_in=token_in.address,
                token_out=token_out.address,
                amount_in=amount_in,
                amount_out=amount_out,
            )
            self._events.append(event)

        logger.info(
            "swap_executed",
            pool=self.address,
            trader=trader,
            direction=direction.value,
            amount_in=amount_in,
            amount_out=amount_out,
        )
        return amount_out

    # --- Queries ---

    @staticmethod
    def get_amount_out(amount_in: int, reserve_in: int, reserve_out: int) -> int:
        """Quote a swap output; identical to the arithmetic swaps execute."""
        return pool_math.get_amount_out(amount_in, reserve_in, reserve_out)

    @staticmethod
    def get_amount_in(amount_out: int, reserve_in: int, reserve_out: int) -> int:
        """Quote the minimum input needed for a desired output."""
        return pool_math.get_amount_in(amount_out, reserve_in, reserve_out)

    def get_price(self) -> int:
        """Price of token A in token B (reserve_b / reserve_a), scaled by config.price_scale.

        Raises:
            ZeroReservesError: If reserve A is zero
        """
        return pool_math.spot_price(
            self._state.reserve_a, self._state.reserve_b, self.config.price_scale
        )

    def get_reserves(self) -> tuple[int, int]:
        """Current (reserve_a, reserve_b); (0, 0) for an unseeded pool."""
        return self._state.reserve_a, self._state.reserve_b

    def quote_liquidity(self, amount_a: int) -> int:
        """Token B amount that matches amount_a at the current reserve ratio."""
        return pool_math.quote_liquidity(amount_a, self._state.reserve_a, self._state.reserve_b)

    def liquidity_of(self, owner: str) -> int:
        return self._state.liquidity.get(normalize_address(owner), 0)

    def liquidity_providers(self) -> dict[str, int]:
        """Copy of the owner -> shares ledger."""
        return dict(self._state.liquidity)

    @property
    def total_liquidity(self) -> int:
        return self._state.total_liquidity

    @property
    def k(self) -> int:
        return pool_math.constant_product(self._state.reserve_a, self._state.reserve_b)

    @property
    def is_seeded(self) -> bool:
        return self._state.total_liquidity > 0

    @property
    def events(self) -> list[PoolEvent]:
        return list(self._events)

    def subscribe(self, listener: EventListener) -> None:
        """Register a callback invoked with each event after its operation commits.

        Exceptions raised by a listener are logged and do not reach the caller.
        """
        self._listeners.append(listener)

    # --- Internals ---

    def _reserves_for(self, direction: SwapDirection) -> tuple[int, int]:
        if direction is SwapDirection.A_TO_B:
            return self._state.reserve_a, self._state.reserve_b
        return self._state.reserve_b, self._state.reserve_a

    def _transfer_in(self, token: TokenLedger, owner: str, amount: int) -> None:
        token.transfer_from(self.address, owner, self.address, amount)

    def _transfer_out(self, token: TokenLedger, to: str, amount: int) -> None:
        token.transfer(self.address, to, amount)

    @contextmanager
    def _atomic(self, operation: str, caller: str) -> Iterator[None]:
        """Run an operation, reverting pool and ledger state if it raises.

        Operations may nest when a token ledger calls back into the pool.
        Listeners hear about committed events only once the outermost
        operation completes, so a rolled back call is never announced.
        """
        state = self._state.copy()
        event_count = len(self._events)
        ledger_a = self.token_a.snapshot()
        ledger_b = self.token_b.snapshot()
        self._depth += 1
        try:
            yield
        except Exception as e:
            self._state = state
            del self._events[event_count:]
            self.token_a.restore(ledger_a)
            self.token_b.restore(ledger_b)
            logger.warning(
                "pool_operation_reverted",
                pool=self.address,
                operation=operation,
                caller=caller,
                error=str(e),
                error_type=type(e).__name__,
            )
            raise
        finally:
            self._depth -= 1

        if self._depth == 0:
            for event in self._events[event_count:]:
                self._notify(event)

    def _notify(self, event: PoolEvent) -> None:
        """Deliver an event to every listener; a failing listener is logged and skipped."""
        for listener in self._listeners:
            try:
                listener(event)
            except Exception:
                logger.exception(
                    "event_listener_failed",
                    pool=self.address,
                    event=event.kind,
                    listener=getattr(listener, "__qualname__", repr(listener)),
                )


__all__ = ["Pool", "PoolState", "EventListener"]
