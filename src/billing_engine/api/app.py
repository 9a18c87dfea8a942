"""FastAPI application factory."""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from billing_engine.api.routes import (
    advisory_router,
    billing_router,
    health_router,
    payments_router,
    payroll_router,
    subscriptions_router,
    team_router,
)
from billing_engine.config import configure_logging, get_settings
from billing_engine.database import create_schema, dispose_db, init_db
from billing_engine.services.errors import BillingError

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler."""
    settings = get_settings()
    configure_logging(settings.log_level)

    engine, _ = init_db()
    if settings.create_schema:
        await create_schema(engine)
        logger.info("Database schema created")
    yield
    await dispose_db()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()
    app = FastAPI(
        title="Billing Engine API",
        description="Service tiers, payroll billing and advisory scheduling",
        version=settings.version,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.cors_origins),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Exception handlers
    @app.exception_handler(BillingError)
    async def billing_error_handler(request: Request, exc: BillingError) -> JSONResponse:
        """Render domain errors with their remediation context."""
        return JSONResponse(
            status_code=exc.status_code,
            content={"message": exc.message, "code": exc.code, **exc.context},
        )

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        """Malformed input is a client error, reported as 400."""
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={
                "message": "Invalid request",
                "code": "VALIDATION_ERROR",
                "errors": jsonable_encoder(exc.errors()),
            },
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(
        request: Request, exc: Exception
    ) -> JSONResponse:
        """Handle unexpected exceptions."""
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "message": "An unexpected error occurred",
                "code": "INTERNAL_ERROR",
            },
        )

    # Include routers
    app.include_router(health_router, prefix="/api")
    app.include_router(team_router, prefix="/api")
    app.include_router(subscriptions_router, prefix="/api")
    app.include_router(payroll_router, prefix="/api")
    app.include_router(payments_router, prefix="/api")
    app.include_router(billing_router, prefix="/api")
    app.include_router(advisory_router, prefix="/api")

    return app


# Default app instance for uvicorn
app = create_app()
