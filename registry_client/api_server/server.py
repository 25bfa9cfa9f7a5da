"""
FastAPI server — HTTP surface over one registry connection.

The lifespan opens a Connection (node signer, web3 ledger, reconciliation
session), stores it on app.state, and starts the first reconciliation in the
background; shutdown closes it. Domain errors map to HTTP status codes here.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Any, Awaitable, Callable

from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse

from registry_client import __version__
from registry_client.api_server.routes import router
from registry_client.config import Settings, get_settings
from registry_client.connection import Connection, connect
from registry_client.core.exceptions import (
    AssetResolutionFailed,
    InvalidInput,
    LedgerReadFailed,
    LedgerWriteFailed,
    NotConnected,
    NotOwned,
    OwnershipStale,
    RegistryClientError,
)
from registry_client.registry_logging import get_logger

logger = get_logger(__name__)

ConnectFn = Callable[[Settings], Awaitable[Connection]]

# Most specific first; RegistryClientError is the fallback
ERROR_STATUS: list[tuple[type[RegistryClientError], int]] = [
    (NotOwned, 403),
    (OwnershipStale, 409),
    (NotConnected, 409),
    (InvalidInput, 400),
    (LedgerWriteFailed, 400),
    (AssetResolutionFailed, 502),
    (LedgerReadFailed, 502),
    (RegistryClientError, 500),
]


def status_for(exc: RegistryClientError) -> int:
    for exc_type, status in ERROR_STATUS:
        if isinstance(exc, exc_type):
            return status
    return 500


def registry_error_handler(request: Request, exc: RegistryClientError) -> JSONResponse:
    """Consistent JSON error body for domain errors: detail + error_code."""
    status = status_for(exc)
    log = logger.warning if status < 500 else logger.error
    log(
        "api_request_failed",
        path=request.url.path,
        status=status,
        error_code=exc.error_code,
        error=str(exc),
    )
    return JSONResponse(
        status_code=status,
        content={"detail": str(exc), "error_code": exc.error_code},
    )


def http_exception_handler(request: Any, exc: HTTPException) -> JSONResponse:
    """Consistent JSON error response for HTTPException."""
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail},
    )


def create_app(connect_fn: ConnectFn = connect) -> FastAPI:
    """Build the app; connect_fn opens the Connection during lifespan startup."""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        settings = get_settings()
        connection = await connect_fn(settings)
        app.state.connection = connection
        if connection.session.schedule_refresh() is not None:
            logger.info("api_initial_reconciliation_scheduled")
        else:
            logger.info("api_started_without_account")

        yield

        await connection.close()
        logger.info("api_connection_closed")

    app = FastAPI(
        title="Registry Client API",
        description="Profile, owned assets and history for the connected account on the registry contract.",
        version=__version__,
        lifespan=lifespan,
    )
    app.include_router(router)
    app.add_exception_handler(RegistryClientError, registry_error_handler)
    app.add_exception_handler(HTTPException, http_exception_handler)

    @app.get("/health")
    def health() -> dict[str, str]:
        """Liveness probe: API is up."""
        return {"status": "ok"}

    return app


app = create_app()
