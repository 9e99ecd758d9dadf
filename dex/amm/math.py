"""Constant product pool math.

All functions are pure and use integer floor division, so rounding dust
always stays in the pool.

Swap formula (0.3% fee retained in the pool):
    amount_out = (amount_in * 997 * reserve_out) / (reserve_in * 1000 + amount_in * 997)
"""

from __future__ import annotations

from dex.constants import FEE_DENOMINATOR, FEE_NUMERATOR, PRICE_SCALE
from dex.errors import InsufficientLiquidityError, InvalidAmountError, ZeroReservesError
from dex.safe_int import S


def _require_non_negative(**amounts: int) -> None:
    for name, amount in amounts.items():
        if amount < 0:
            raise InvalidAmountError(f"Invalid amount: {name}={amount}")


def get_amount_out(amount_in: int, reserve_in: int, reserve_out: int) -> int:
    """Calculate swap output using the fee-inclusive constant product rule.

    The pool's own swaps call this function, so an external quote and the
    executed output never diverge.

    Args:
        amount_in: Input token amount
        reserve_in: Reserve of input token in pool
        reserve_out: Reserve of output token in pool

    Returns:
        Output token amount, rounded down

    Raises:
        InvalidAmountError: If any argument is negative
        ZeroReservesError: If both amount_in and reserve_in are zero
    """
    _require_non_negative(amount_in=amount_in, reserve_in=reserve_in, reserve_out=reserve_out)

    amount_in_with_fee = S(amount_in) * S(FEE_NUMERATOR)
    numerator = amount_in_with_fee * S(reserve_out)
    denominator = S(reserve_in) * S(FEE_DENOMINATOR) + amount_in_with_fee
    if not denominator:
        raise ZeroReservesError("Zero reserves")

    return (numerator // denominator).value


def get_amount_in(amount_out: int, reserve_in: int, reserve_out: int) -> int:
    """Calculate the minimum input that yields at least amount_out.

    Formula: amount_in = (res_in * out * 1000) / ((res_out - out) * 997) + 1

    Raises:
        InvalidAmountError: If any argument is negative
        ZeroReservesError: If either reserve is zero
        InsufficientLiquidityError: If amount_out is not below reserve_out
    """
    _require_non_negative(amount_out=amount_out, reserve_in=reserve_in, reserve_out=reserve_out)
    if reserve_in == 0 or reserve_out == 0:
        raise ZeroReservesError("Zero reserves")
    if amount_out >= reserve_out:
        raise InsufficientLiquidityError(
            f"Insufficient liquidity: requested {amount_out}, reserve is {reserve_out}"
        )

    numerator = S(reserve_in) * S(amount_out) * S(FEE_DENOMINATOR)
    denominator = (S(reserve_out) - S(amount_out)) * S(FEE_NUMERATOR)

    return (numerator // denominator + S(1)).value


def initial_shares(amount_a: int, amount_b: int) -> int:
    """Shares minted by the first deposit into an empty pool: isqrt(a * b)."""
    return (S(amount_a) * S(amount_b)).isqrt().value


def subsequent_shares(amount_a: int, reserve_a: int, total_shares: int) -> int:
    """Shares minted by a deposit into a seeded pool.

    Only the A side is priced. Any B amount beyond the current ratio is
    donated to the pool without extra shares.
    """
    return (S(amount_a) * S(total_shares) // S(reserve_a)).value


def withdrawal_amounts(
    shares: int,
    reserve_a: int,
    reserve_b: int,
    total_shares: int,
) -> tuple[int, int]:
    """Proportional payout for burning shares out of total_shares."""
    amount_a = S(reserve_a) * S(shares) // S(total_shares)
    amount_b = S(reserve_b) * S(shares) // S(total_shares)
    return amount_a.value, amount_b.value


def spot_price(reserve_a: int, reserve_b: int, scale: int = PRICE_SCALE) -> int:
    """Price of token A in units of token B, scaled by `scale`.

    Raises:
        ZeroReservesError: If reserve_a is zero
    """
    if reserve_a == 0:
        raise ZeroReservesError("Zero reserves")
    return (S(reserve_b) * S(scale) // S(reserve_a)).value


def quote_liquidity(amount_a: int, reserve_a: int, reserve_b: int) -> int:
    """Amount of token B that matches amount_a at the current reserve ratio.

    Raises:
        ZeroReservesError: If the pool holds no reserves
    """
    if reserve_a == 0 or reserve_b == 0:
        raise ZeroReservesError("Zero reserves")
    return (S(amount_a) * S(reserve_b) // S(reserve_a)).value


def constant_product(reserve_a: int, reserve_b: int) -> int:
    """The pool constant k = reserve_a * reserve_b."""
    return (S(reserve_a) * S(reserve_b)).value


__all__ = [
    "get_amount_out",
    "get_amount_in",
    "initial_shares",
    "subsequent_shares",
    "withdrawal_amounts",
    "spot_price",
    "quote_liquidity",
    "constant_product",
]
