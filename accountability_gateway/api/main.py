"""FastAPI application factory"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.responses import Response

from accountability_gateway.api.dependencies import get_request_id
from accountability_gateway.api.middleware import MetricsMiddleware, RequestIDMiddleware
from accountability_gateway.api.responses import error_response
from accountability_gateway.api.routes import balance, bonus, cardio, dashboard, debt, quick, reconciliation, workout
from accountability_gateway.config import settings
from accountability_gateway.domain.exceptions import DomainException
from accountability_gateway.infrastructure.database.session import init_db
from accountability_gateway.infrastructure.observability.logging import setup_logging

# Setup structured logging
setup_logging(settings.log_level, settings.service_name)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    yield


def register_exception_handlers(app: FastAPI) -> None:
    """Every error leaves as {status: error, message}"""

    @app.exception_handler(DomainException)
    async def domain_exception_handler(request: Request, exc: DomainException):
        logger.error(
            f"{type(exc).__name__}: {exc}",
            extra={"request_id": get_request_id(request), "path": request.url.path},
        )
        return error_response(500, str(exc))

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        messages = "; ".join(
            f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}" for error in exc.errors()
        )
        return error_response(422, messages or "Invalid request")

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        if exc.status_code == 404:
            return error_response(404, "Endpoint not found")
        return error_response(exc.status_code, str(exc.detail))

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.error(f"Unexpected error: {exc}", extra={"request_id": get_request_id(request)})
        return error_response(500, str(exc) or "Internal server error")


def create_app() -> FastAPI:
    """Create and configure FastAPI application"""
    app = FastAPI(
        title="Accountability Gateway",
        description="Cardio, debt, workout, bonus and balance tracking with nightly reconciliation",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    # Add middleware (order matters: last added = first executed)
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(RequestIDMiddleware)

    register_exception_handlers(app)

    # Health check endpoint
    @app.get("/health")
    def health_check():
        return {"status": "ok", "service": settings.service_name}

    # Prometheus metrics endpoint
    @app.get("/metrics")
    def metrics():
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    # Register API routers
    app.include_router(cardio.router, tags=["cardio"])
    app.include_router(debt.router, tags=["debt"])
    app.include_router(workout.router, tags=["workout"])
    app.include_router(bonus.router, tags=["bonus"])
    app.include_router(balance.router, tags=["balance"])
    app.include_router(reconciliation.router, tags=["reconciliation"])
    app.include_router(dashboard.router, tags=["dashboard"])
    app.include_router(quick.router, tags=["quick"])

    return app


app = create_app()
