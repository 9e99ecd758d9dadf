"""Two-asset constant product AMM pool engine."""

from dex.amm.pool import Pool
from dex.token import Token

__version__ = "0.1.0"
__all__ = ["Pool", "Token", "__version__"]
