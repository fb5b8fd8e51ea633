"""FastAPI application for the pool engine.

Note: Authentication is not implemented at the application level. The
optional CPSWAP_ADMIN check guards privileged operations only; callers
are identified by the owner names in request bodies.
"""

import logging
import os

import structlog
import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from cpswap import __version__
from cpswap.api.endpoints import router
from cpswap.errors import AlreadyExists, AmmError, NotFound, PoolExists, Unauthorized
from cpswap.models.responses import ErrorResponse

logger = structlog.get_logger()

# Configuration from environment variables with sensible defaults
HOST = os.environ.get("CPSWAP_HOST", "0.0.0.0")
PORT = int(os.environ.get("CPSWAP_PORT", "8000"))
DEBUG = os.environ.get("CPSWAP_DEBUG", "false").lower() in ("true", "1", "yes")

ERROR_STATUS_CODES: dict[type[AmmError], int] = {
    NotFound: 404,
    Unauthorized: 403,
    AlreadyExists: 409,
    PoolExists: 409,
}

app = FastAPI(
    title="Constant Product Swap",
    description="Constant-product liquidity pools with transfer-fee aware accounting",
    version=__version__,
)


@app.exception_handler(AmmError)
async def amm_error_handler(request: Request, exc: AmmError) -> JSONResponse:
    """Map engine errors to HTTP status codes."""
    status_code = ERROR_STATUS_CODES.get(type(exc), 400)
    logger.warning(
        "operation_rejected",
        method=request.method,
        path=request.url.path,
        error=type(exc).__name__,
        detail=str(exc),
    )
    body = ErrorResponse(error=type(exc).__name__, detail=str(exc))
    return JSONResponse(status_code=status_code, content=body.model_dump())


app.include_router(router)


@app.get("/health")
async def health() -> dict[str, object]:
    """Health check endpoint."""
    return {"status": "ok", "version": __version__}


def configure_logging(debug: bool = DEBUG) -> None:
    """Install the structlog processor chain used by the server."""
    log_level = logging.DEBUG if debug else logging.INFO
    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
    )


def run() -> None:
    """Run the pool engine API server.

    Configuration via environment variables:
    - CPSWAP_HOST: Host to bind to (default: 0.0.0.0)
    - CPSWAP_PORT: Port to bind to (default: 8000)
    - CPSWAP_DEBUG: Enable debug logging and reload mode (default: false)
    - CPSWAP_ADMIN: Owner allowed to run privileged operations
    - CPSWAP_FEE_COLLECTOR: Account receiving pool creation fees
    """
    configure_logging()
    uvicorn.run(
        "cpswap.api.main:app",
        host=HOST,
        port=PORT,
        reload=DEBUG,
    )


if __name__ == "__main__":
    run()
