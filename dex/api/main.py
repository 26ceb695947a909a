"""FastAPI application serving a single pool."""

import os

import structlog
import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from dex import __version__
from dex.api.endpoints import router
from dex.api.schemas import ErrorResponse
from dex.errors import PoolError, ReentrantCall

logger = structlog.get_logger()

# Configuration from environment variables with sensible defaults
HOST = os.environ.get("DEX_HOST", "0.0.0.0")
PORT = int(os.environ.get("DEX_PORT", "8000"))
DEBUG = os.environ.get("DEX_DEBUG", "false").lower() in ("true", "1", "yes")

# Maximum request body size (10 MB)
MAX_REQUEST_SIZE = 10 * 1024 * 1024

app = FastAPI(
    title="Constant-Product Pool",
    description="Two-asset constant-product automated market maker",
    version=__version__,
)


@app.middleware("http")
async def limit_request_size(request: Request, call_next):  # type: ignore[no-untyped-def]
    """Reject requests with body larger than MAX_REQUEST_SIZE."""
    content_length = request.headers.get("content-length")
    if content_length and int(content_length) > MAX_REQUEST_SIZE:
        return JSONResponse(status_code=413, content={"detail": "Request too large"})
    return await call_next(request)


@app.exception_handler(PoolError)
async def pool_error_handler(request: Request, exc: PoolError) -> JSONResponse:
    """Map a rejected pool operation to a 4xx response."""
    status_code = 409 if isinstance(exc, ReentrantCall) else 400
    logger.warning(
        "pool_request_rejected",
        path=request.url.path,
        error=type(exc).__name__,
        detail=str(exc),
    )
    body = ErrorResponse(error=type(exc).__name__, detail=str(exc))
    return JSONResponse(status_code=status_code, content=body.model_dump())


app.include_router(router)


@app.get("/health")
async def health() -> dict[str, str]:
    """Health check endpoint."""
    return {"status": "ok"}


def run() -> None:
    """Run the pool API server.

    Configuration via environment variables:
    - DEX_HOST: Host to bind to (default: 0.0.0.0)
    - DEX_PORT: Port to bind to (default: 8000)
    - DEX_DEBUG: Enable debug/reload mode (default: false)
    - DEX_DEPLOYER: Account funded with both assets at startup (optional)
    - DEX_FEE_NUMERATOR / DEX_FEE_DENOMINATOR / DEX_PRICE_SCALE: pool parameters
    """
    uvicorn.run(
        "dex.api.main:app",
        host=HOST,
        port=PORT,
        reload=DEBUG,
    )


if __name__ == "__main__":
    run()
