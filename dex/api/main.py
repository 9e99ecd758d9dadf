"""FastAPI application serving one pool and its two token ledgers."""

import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from dex import __version__
from dex.api.endpoints import router
from dex.config import DexConfig
from dex.errors import DexError, UndefinedComputationError
from dex.safe_int import SafeIntError

app = FastAPI(
    title="DEX Pool Engine",
    description="Two-asset constant product AMM pool",
    version=__version__,
)


@app.exception_handler(DexError)
async def dex_error_handler(request: Request, exc: DexError) -> JSONResponse:
    """Rejected pool or ledger operations. Undefined computations are 409, the rest 400."""
    status_code = 409 if isinstance(exc, UndefinedComputationError) else 400
    return JSONResponse(
        status_code=status_code,
        content={"detail": exc.message, "error": type(exc).__name__},
    )


@app.exception_handler(SafeIntError)
async def arithmetic_error_handler(request: Request, exc: SafeIntError) -> JSONResponse:
    """Amounts whose result does not fit the ledger (e.g. uint256 overflow)."""
    return JSONResponse(
        status_code=400,
        content={"detail": str(exc), "error": type(exc).__name__},
    )


app.include_router(router)


@app.get("/health")
async def health() -> dict[str, object]:
    """Health check endpoint."""
    return {"status": "ok", "version": __version__}


def run() -> None:
    """Run the pool API server.

    Configuration via environment variables:
    - DEX_HOST: Host to bind to (default: 0.0.0.0)
    - DEX_PORT: Port to bind to (default: 8000)
    - DEX_DEBUG: Enable debug/reload mode (default: false)
    - DEX_TOKEN_A_SYMBOL / DEX_TOKEN_B_SYMBOL: Pool token symbols (default: TKA / TKB)
    """
    config = DexConfig.from_env()
    uvicorn.run(
        "dex.api.main:app",
        host=config.host,
        port=config.port,
        reload=config.debug,
    )


if __name__ == "__main__":
    run()
