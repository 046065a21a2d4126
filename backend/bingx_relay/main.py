"""
PURPOSE: Main FastAPI application factory and lifecycle management for BingX Relay.

Initializes the FastAPI application with:
- The webhook router
- Exception handlers mapping relay errors to the webhook response envelope
- Startup events (logging, shared BingX client, account health check)
- Shutdown events (HTTP client cleanup)
"""

from contextlib import asynccontextmanager
from typing import Optional

import httpx
from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from bingx_relay import __version__
from bingx_relay.api import api_router
from bingx_relay.config.settings import Settings, settings as default_settings
from bingx_relay.core.errors import (
    ConfigurationError,
    ExchangeTransportError,
    HealthCheckError,
    RelayError,
    ShapeValidationError,
)
from bingx_relay.exchange.client import BingXClient
from bingx_relay.exchange.health_check import check_account_balance
from bingx_relay.utils.logger import get_logger, setup_logging

logger = get_logger(__name__)

SERVICE_NAME = "BingX Relay"

_ERROR_STATUS = {
    ShapeValidationError: status.HTTP_400_BAD_REQUEST,
    ConfigurationError: status.HTTP_500_INTERNAL_SERVER_ERROR,
    ExchangeTransportError: status.HTTP_502_BAD_GATEWAY,
    HealthCheckError: status.HTTP_503_SERVICE_UNAVAILABLE,
}


# ════════════════════════════════════════════════════════════════
# Exception Handlers
# ════════════════════════════════════════════════════════════════


async def relay_exception_handler(request: Request, exc: RelayError) -> JSONResponse:
    """
    PURPOSE: Turn relay errors into the {status, message, data} webhook envelope.

    CALLED BY: FastAPI when a route raises a RelayError subclass

    Args:
        request: HTTP request that failed
        exc: The relay error

    Returns:
        JSONResponse: Error envelope with the status mapped from the error type
    """
    status_code = _ERROR_STATUS.get(type(exc), status.HTTP_500_INTERNAL_SERVER_ERROR)
    logger.error(
        "relay_request_failed",
        path=request.url.path,
        method=request.method,
        status_code=status_code,
        error=str(exc),
        exception_type=type(exc).__name__,
    )
    return JSONResponse(
        status_code=status_code,
        content={"status": "error", "message": str(exc), "data": None},
    )


async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    PURPOSE: Handle unexpected exceptions with logging and safe error response.

    CALLED BY: FastAPI exception handler middleware

    Args:
        request: HTTP request that raised exception
        exc: Exception that was raised

    Returns:
        JSONResponse: Safe error response without exposing internals
    """
    logger.error(
        "unhandled_exception",
        path=request.url.path,
        method=request.method,
        error=str(exc),
        exception_type=type(exc).__name__,
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"status": "error", "message": "Internal server error", "data": None},
    )


# ════════════════════════════════════════════════════════════════
# FastAPI Application Factory
# ════════════════════════════════════════════════════════════════


def create_app(
    app_settings: Optional[Settings] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> FastAPI:
    """
    PURPOSE: Create and configure FastAPI application with router, lifespan and handlers.

    CALLED BY: Application entrypoint (uvicorn) and tests

    Args:
        app_settings: Settings to use instead of the environment-loaded defaults.
        transport: Optional httpx transport for the BingX client (tests).

    Returns:
        FastAPI: Configured FastAPI application ready to run
    """
    cfg = app_settings or default_settings

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """
        PURPOSE: Build the shared BingX client, run the health check, close on shutdown.

        A failed health check aborts startup so the server never accepts alerts
        it cannot place.
        """
        setup_logging(cfg.LOG_LEVEL)
        logger.info(
            "application_startup_starting",
            version=__version__,
            base_url=cfg.BINGX_BASE_URL,
            health_check=cfg.STARTUP_HEALTH_CHECK,
        )
        if not cfg.has_credentials():
            logger.warning("bingx_credentials_missing")

        client = BingXClient(cfg.client_config(), transport=transport)
        app.state.settings = cfg
        app.state.bingx_client = client

        try:
            if cfg.STARTUP_HEALTH_CHECK:
                await check_account_balance(client)
            logger.info("application_startup_complete")
            yield
        except HealthCheckError as e:
            logger.critical("application_startup_failed", error=str(e))
            raise
        finally:
            await client.aclose()
            logger.info("application_shutdown_complete")

    app = FastAPI(
        title=SERVICE_NAME,
        description="TradingView alert to BingX perpetual swap order relay",
        version=__version__,
        lifespan=lifespan,
    )

    app.include_router(api_router)

    @app.get("/", tags=["root"])
    async def root():
        """
        PURPOSE: Root endpoint for API availability check.

        Returns:
            dict: Service information and version
        """
        return {"status": "ok", "service": SERVICE_NAME, "version": __version__}

    app.add_exception_handler(RelayError, relay_exception_handler)
    app.add_exception_handler(Exception, general_exception_handler)

    return app


# Create the application
app = create_app()


def main() -> None:
    """
    PURPOSE: Run the relay with Uvicorn.

    Usage:
        python -m bingx_relay.main
        OR
        bingx-relay
    """
    import uvicorn

    uvicorn.run(
        "bingx_relay.main:app",
        host=default_settings.HOST,
        port=default_settings.PORT,
        log_level=default_settings.LOG_LEVEL.lower(),
    )


if __name__ == "__main__":
    main()
