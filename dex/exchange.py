"""A pool bundled with the two token ledgers it trades.

The HTTP service and the simulation script both work against an Exchange:
one Pool plus its Token ledgers, addressable by symbol.
"""

from __future__ import annotations

import hashlib
from dataclasses import dataclass

import structlog

from dex.amm.pool import Pool
from dex.config import DEFAULT_DEX_CONFIG, DexConfig
from dex.token import Token

logger = structlog.get_logger()


def derive_address(label: str) -> str:
    """Deterministic 20-byte address for a label (e.g. "token:TKA")."""
    return "0x" + hashlib.sha256(label.encode()).hexdigest()[:40]


@dataclass
class Exchange:
    """A pool and the token ledgers it trades, keyed by symbol."""

    pool: Pool
    token_a: Token
    token_b: Token

    @property
    def tokens(self) -> dict[str, Token]:
        return {token.symbol: token for token in (self.token_a, self.token_b)}

    def token(self, symbol: str) -> Token:
        """Look up a pool token by symbol (case-insensitive).

        Raises:
            KeyError: If the symbol is not one of the pool's tokens
        """
        for token in (self.token_a, self.token_b):
            if token.symbol.lower() == symbol.lower():
                return token
        raise KeyError(symbol)


def create_exchange(config: DexConfig = DEFAULT_DEX_CONFIG) -> Exchange:
    """Build an exchange with fresh, empty token ledgers and an unseeded pool."""
    token_a = Token(
        address=derive_address(f"token:{config.token_a_symbol}"),
        symbol=config.token_a_symbol,
    )
    token_b = Token(
        address=derive_address(f"token:{config.token_b_symbol}"),
        symbol=config.token_b_symbol,
    )
    pool = Pool(
        address=derive_address(f"pool:{token_a.symbol}/{token_b.symbol}"),
        token_a=token_a,
        token_b=token_b,
        config=config,
    )
    logger.info(
        "exchange_created",
        pool=pool.address,
        token_a=token_a.symbol,
        token_b=token_b.symbol,
    )
    return Exchange(pool=pool, token_a=token_a, token_b=token_b)


_default_exchange: Exchange | None = None


def get_default_exchange() -> Exchange:
    """Process-wide exchange used by the API server, created on first use."""
    global _default_exchange
    if _default_exchange is None:
        _default_exchange = create_exchange(DexConfig.from_env())
    return _default_exchange
