"""
FastAPI application factory and configuration.

This module creates the FastAPI application instance,
configures exception handlers and lifespan events.
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from datetime import timedelta

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from psycopg_pool import ConnectionPool

from src.adapters.delivery import ConsoleCodeSender, HttpCodeSender
from src.adapters.guard import InMemoryRateGuard
from src.adapters.repository.postgres import run_migrations
from src.adapters.tokens import JwtTokenIssuer
from src.api.routers import router as api_router
from src.config.settings import Settings, get_settings
from src.domain.ports import CodeSender

logger = logging.getLogger(__name__)

# OpenAPI tags for documentation grouping
tags_metadata = [
    {"name": "auth", "description": "Citizen registration and two-phase OTP login"},
    {"name": "officer", "description": "Officer login and data requests"},
    {"name": "user", "description": "Profile read and update for authenticated sessions"},
]


def build_code_sender(settings: Settings) -> CodeSender:
    """HTTP gateway when CODE_DELIVERY_URL is set, console logging otherwise."""
    if settings.code_delivery_url:
        logger.info("Delivering one-time codes via HTTP gateway")
        return HttpCodeSender(
            settings.code_delivery_url,
            timeout_seconds=settings.code_delivery_timeout_seconds,
        )
    logger.info("Delivering one-time codes to console log")
    return ConsoleCodeSender()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    FastAPI lifespan context manager.

    Manages application startup and shutdown:
    - Loads settings (fails without JWT_SECRET)
    - Creates database connection pool and runs migrations
    - Creates token issuer, code sender and rate guard
    - Closes the code sender and connection pool on shutdown
    """
    settings = get_settings()

    logger.info("Starting application...")
    logger.info("Connecting to database...")

    # Create connection pool with explicit sizing
    pool = ConnectionPool(
        conninfo=settings.database_url,
        min_size=settings.pool_min_size,
        max_size=settings.pool_max_size,
    )

    # Run migrations
    logger.info("Running database migrations...")
    run_migrations(pool)

    # Store collaborators in app state for dependency injection
    app.state.settings = settings
    app.state.pool = pool
    app.state.token_issuer = JwtTokenIssuer(
        settings.jwt_secret,
        algorithm=settings.jwt_algorithm,
        ttl=timedelta(seconds=settings.token_ttl_seconds),
    )
    app.state.code_sender = build_code_sender(settings)
    app.state.rate_guard = InMemoryRateGuard(
        max_requests=settings.rate_limit_requests,
        window_seconds=settings.rate_limit_window_seconds,
    )

    logger.info("Application startup complete")

    yield

    # Shutdown
    logger.info("Shutting down application...")
    close_sender = getattr(app.state.code_sender, "close", None)
    if close_sender is not None:
        close_sender()
    pool.close()
    logger.info("Database connection pool closed")


app = FastAPI(
    title="fraud-portal-identity",
    description="Identity verification and session issuance for the cyber-fraud reporting portal",
    version="0.1.0",
    openapi_tags=tags_metadata,
    lifespan=lifespan,
)

app.include_router(api_router, prefix="/api")


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Malformed or incomplete request bodies are 400, not FastAPI's default 422."""
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": "Invalid request", "errors": jsonable_encoder(exc.errors())},
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Log unexpected failures with context; never return their details."""
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error"},
    )


@app.get("/health")
def health_check(request: Request) -> dict[str, str]:
    """
    Health check endpoint with database validation.

    Returns 200 OK if application and database are healthy.
    Raises exception if database connection fails.
    """
    # Validate database connectivity
    pool = request.app.state.pool
    with pool.connection() as conn:
        conn.execute("SELECT 1")

    return {"status": "healthy"}
