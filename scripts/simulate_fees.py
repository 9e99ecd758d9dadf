#!/usr/bin/env python3
"""Simulate fee accrual for a liquidity provider.

Seeds a pool, runs a series of alternating swaps from a trader, then
withdraws all liquidity and reports what the provider got back.

Usage:
    python scripts/simulate_fees.py --reserve-a 1000 --reserve-b 2000 --swaps 20 --swap-size 50
"""

import argparse
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from dex.constants import MAX_ALLOWANCE, PRICE_SCALE
from dex.exchange import create_exchange, derive_address

UNIT = 10**18


def main() -> int:
    parser = argparse.ArgumentParser(
        description="Simulate LP fee accrual on a constant product pool"
    )
    parser.add_argument(
        "--reserve-a", type=int, default=1000, help="Initial token A deposit (whole tokens)"
    )
    parser.add_argument(
        "--reserve-b", type=int, default=2000, help="Initial token B deposit (whole tokens)"
    )
    parser.add_argument(
        "--swaps", type=int, default=20, help="Number of swaps (alternating direction)"
    )
    parser.add_argument("--swap-size", type=int, default=50, help="Input per swap (whole tokens)")
    args = parser.parse_args()

    if min(args.reserve_a, args.reserve_b, args.swap_size) <= 0 or args.swaps < 0:
        parser.error("amounts must be positive and --swaps non-negative")

    exchange = create_exchange()
    pool = exchange.pool
    provider = derive_address("account:provider")
    trader = derive_address("account:trader")

    for token in (exchange.token_a, exchange.token_b):
        token.mint(provider, max(args.reserve_a, args.reserve_b) * UNIT)
        token.mint(trader, args.swaps * args.swap_size * UNIT)
        token.approve(provider, pool.address, MAX_ALLOWANCE)
        token.approve(trader, pool.address, MAX_ALLOWANCE)

    shares = pool.add_liquidity(provider, args.reserve_a * UNIT, args.reserve_b * UNIT)
    k_start = pool.k
    print(
        f"Seeded pool with {args.reserve_a} A / {args.reserve_b} B, "
        f"minted {shares / UNIT:.4f} shares"
    )
    print(f"Initial price: {pool.get_price() / PRICE_SCALE:.6f} B per A")

    for i in range(args.swaps):
        if i % 2 == 0:
            pool.swap_a_for_b(trader, args.swap_size * UNIT)
        else:
            pool.swap_b_for_a(trader, args.swap_size * UNIT)

    reserve_a, reserve_b = pool.get_reserves()
    print(f"\nAfter {args.swaps} swaps:")
    print(f"  Reserves: {reserve_a / UNIT:.6f} A / {reserve_b / UNIT:.6f} B")
    print(f"  Price:    {pool.get_price() / PRICE_SCALE:.6f} B per A")
    print(f"  k growth: {pool.k / k_start:.6f}x")

    amount_a, amount_b = pool.remove_liquidity(provider, shares)
    print("\nProvider withdrew everything:")
    print(f"  A: {amount_a / UNIT:.6f} (deposited {args.reserve_a})")
    print(f"  B: {amount_b / UNIT:.6f} (deposited {args.reserve_b})")
    print(f"  Pool reserves now: {pool.get_reserves()}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
