"""Tests for constant product pool math."""

import pytest

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
from dex.errors import InsufficientLiquidityError, InvalidAmountError, ZeroReservesError
from tests.helpers import ether


class TestGetAmountOut:
    """Tests for the fee-inclusive swap quote."""

    def test_exact_formula(self):
        """10 in against (100, 200) reserves returns floor(10*997*200 / (100*1000 + 10*997))."""
        expected = (10 * 997 * 200) // (100 * 1000 + 10 * 997)
        assert get_amount_out(10, 100, 200) == expected == 18

    def test_exact_formula_with_18_decimals(self):
        amount_in = ether(10)
        expected = (amount_in * 997 * ether(200)) // (ether(100) * 1000 + amount_in * 997)
        assert get_amount_out(amount_in, ether(100), ether(200)) == expected

    def test_output_below_no_fee_output(self):
        """The fee always leaves the trader with less than the fee-free rate."""
        no_fee = (ether(1) * ether(200)) // (ether(100) + ether(1))
        assert get_amount_out(ether(1), ether(100), ether(200)) < no_fee

    def test_output_never_reaches_reserve(self):
        """Even an enormous input cannot drain the output reserve."""
        assert get_amount_out(ether(10**9), ether(100), ether(200)) < ether(200)

    def test_zero_input_returns_zero(self):
        assert get_amount_out(0, 100, 200) == 0

    def test_empty_input_reserve_with_zero_input_raises(self):
        with pytest.raises(ZeroReservesError, match="Zero reserves"):
            get_amount_out(0, 0, 100)

    def test_empty_output_reserve_returns_zero(self):
        assert get_amount_out(10, 100, 0) == 0

    def test_negative_amount_raises(self):
        with pytest.raises(InvalidAmountError):
            get_amount_out(-1, 100, 200)
        with pytest.raises(InvalidAmountError):
            get_amount_out(1, -100, 200)


class TestGetAmountIn:
    """Tests for the exact-output quote."""

    def test_basic(self):
        # (100 * 18 * 1000) // ((200 - 18) * 997) + 1 = 9 + 1
        assert get_amount_in(18, 100, 200) == 10

    def test_round_trip_consistency(self):
        """Feeding get_amount_in's answer into get_amount_out yields at least the target."""
        reserve_in, reserve_out = ether(100), 250_000 * 10**6
        desired = 2467 * 10**6
        required = get_amount_in(desired, reserve_in, reserve_out)
        assert get_amount_out(required, reserve_in, reserve_out) >= desired
        assert get_amount_out(required - 1, reserve_in, reserve_out) < desired

    def test_output_at_reserve_raises(self):
        with pytest.raises(InsufficientLiquidityError):
            get_amount_in(200, 100, 200)

    def test_zero_reserves_raise(self):
        with pytest.raises(ZeroReservesError):
            get_amount_in(1, 0, 200)
        with pytest.raises(ZeroReservesError):
            get_amount_in(1, 100, 0)


class TestShareMath:
    """Tests for minting and burning share arithmetic."""

    def test_initial_shares_is_integer_sqrt(self):
        assert initial_shares(100, 400) == 200
        assert initial_shares(ether(100), ether(400)) == ether(200)

    def test_initial_shares_rounds_down(self):
        assert initial_shares(2, 3) == 2  # isqrt(6)
        assert initial_shares(1000, 3000) == 1732

    def test_subsequent_shares_uses_only_a_side(self):
        assert subsequent_shares(50, 100, 150) == 75

    def test_subsequent_shares_rounds_down(self):
        assert subsequent_shares(1, 3, 2) == 0

    def test_withdrawal_amounts_floor(self):
        # floor(1000 * 500 / 1732), floor(3000 * 500 / 1732)
        assert withdrawal_amounts(500, 1000, 3000, 1732) == (288, 866)

    def test_full_withdrawal_returns_everything(self):
        assert withdrawal_amounts(1732, 1000, 3000, 1732) == (1000, 3000)


class TestPriceMath:
    """Tests for price and ratio helpers."""

    def test_spot_price_scaled(self):
        assert spot_price(ether(100), ether(200)) == ether(2)

    def test_spot_price_rounds_down(self):
        assert spot_price(3, 1) == 333_333_333_333_333_333

    def test_spot_price_custom_scale(self):
        assert spot_price(4, 10, scale=100) == 250

    def test_spot_price_zero_reserve_a_raises(self):
        with pytest.raises(ZeroReservesError, match="Zero reserves"):
            spot_price(0, 5)

    def test_quote_liquidity(self):
        assert quote_liquidity(50, 100, 200) == 100

    def test_quote_liquidity_empty_pool_raises(self):
        with pytest.raises(ZeroReservesError):
            quote_liquidity(50, 0, 0)

    def test_constant_product(self):
        assert constant_product(3, 4) == 12
        assert constant_product(0, 0) == 0
