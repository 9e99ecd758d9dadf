"""Test helpers module for shared test utilities.

- constants: Account/token addresses and amount helpers
- factories: Token, pool and funding factory functions
"""

from tests.helpers.constants import (
    ALICE,
    BOB,
    INITIAL_BALANCE,
    OWNER,
    POOL,
    TOKEN_A,
    TOKEN_B,
    ether,
)
from tests.helpers.factories import fund, make_pool, make_tokens

__all__ = [
    # Constants
    "OWNER",
    "ALICE",
    "BOB",
    "POOL",
    "TOKEN_A",
    "TOKEN_B",
    "INITIAL_BALANCE",
    "ether",
    # Factories
    "make_tokens",
    "make_pool",
    "fund",
]
