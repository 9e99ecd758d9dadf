"""Configuration for the pool engine and its HTTP service."""

import os
from dataclasses import dataclass

from dex.constants import PRICE_SCALE


@dataclass(frozen=True)
class DexConfig:
    """Centralized configuration.

    The swap fee is not configurable; it is the 997/1000 constant in
    dex.constants.

    Attributes:
        price_scale: Fixed-point scale for get_price() (default: 1e18)
        host: Host the API server binds to (default: 0.0.0.0)
        port: Port the API server binds to (default: 8000)
        debug: Enable uvicorn reload mode (default: False)
        token_a_symbol: Symbol of the service pool's first token
        token_b_symbol: Symbol of the service pool's second token
    """

    price_scale: int = PRICE_SCALE

    # API server
    host: str = "0.0.0.0"
    port: int = 8000
    debug: bool = False

    # Token pair served by the API
    token_a_symbol: str = "TKA"
    token_b_symbol: str = "TKB"

    def __post_init__(self) -> None:
        if self.price_scale <= 0:
            raise ValueError(f"price_scale must be positive, got {self.price_scale}")

    @classmethod
    def from_env(cls) -> "DexConfig":
        """Build a config from DEX_* environment variables, with defaults."""
        return cls(
            host=os.environ.get("DEX_HOST", cls.host),
            port=int(os.environ.get("DEX_PORT", str(cls.port))),
            debug=os.environ.get("DEX_DEBUG", "false").lower() in ("true", "1", "yes"),
            token_a_symbol=os.environ.get("DEX_TOKEN_A_SYMBOL", cls.token_a_symbol),
            token_b_symbol=os.environ.get("DEX_TOKEN_B_SYMBOL", cls.token_b_symbol),
        )


# Default configuration instance
DEFAULT_DEX_CONFIG = DexConfig()
