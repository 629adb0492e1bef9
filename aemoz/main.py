"""Application entry point and FastAPI app factory."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler
import sys
from pathlib import Path

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest
from starlette.exceptions import HTTPException as StarletteHTTPException

from .config.settings import Settings, settings as default_settings
from .controllers import admin, auth, draw, participants, reports
from .database import Database
from .middleware import (
    RateLimitMiddleware,
    StructuredLoggingMiddleware,
    TelemetryMiddleware,
)
from .services import AccessGate, GroupStore, ServiceError, Unavailable
from .views import HealthResponse, StatsResponse

logger = logging.getLogger(__name__)


def _configure_logging(settings: Settings) -> None:
    """Ensure logs stream to stdout and a rotating file."""

    logging.getLogger().handlers.clear()

    formatter = logging.Formatter("%(asctime)s | %(levelname)s | %(name)s | %(message)s")

    stdout_handler = logging.StreamHandler(sys.stdout)
    stdout_handler.setFormatter(formatter)

    log_path = Path(settings.log_file)
    log_path.parent.mkdir(parents=True, exist_ok=True)
    file_handler = RotatingFileHandler(
        log_path,
        maxBytes=1_000_000,
        backupCount=5,
        encoding="utf-8",
    )
    file_handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.addHandler(stdout_handler)
    root_logger.addHandler(file_handler)
    root_logger.setLevel(logging.DEBUG if settings.debug else logging.INFO)

    middleware_logger = logging.getLogger("aemoz.middleware.structured")
    middleware_logger.handlers.clear()
    middleware_stdout = logging.StreamHandler(sys.stdout)
    middleware_stdout.setFormatter(logging.Formatter("%(message)s"))
    middleware_logger.addHandler(middleware_stdout)
    middleware_logger.addHandler(file_handler)
    middleware_logger.setLevel(logging.DEBUG if settings.debug else logging.INFO)
    middleware_logger.propagate = False

    noisy_loggers = [
        "sqlalchemy.engine",
        "asyncpg",
        "aiosqlite",
    ]
    for name in noisy_loggers:
        logging.getLogger(name).setLevel(logging.WARNING)


def _field_errors(exc: RequestValidationError) -> dict[str, str]:
    fields: dict[str, str] = {}
    for error in exc.errors():
        location = [
            str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path")
        ]
        fields[".".join(location) or "body"] = error.get("msg", "invalid")
    return fields


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create and configure the FastAPI application."""

    settings = settings or default_settings
    _configure_logging(settings)

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        debug=settings.debug,
        description="AEMOZ participant registration and group draw API",
    )

    app.state.settings = settings
    app.state.database = Database(settings.database, debug=settings.debug)
    app.state.access_gate = AccessGate(settings.security)

    app.add_middleware(TelemetryMiddleware)
    app.add_middleware(RateLimitMiddleware, config=settings.rate_limit)
    app.add_middleware(StructuredLoggingMiddleware)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=settings.cors_allow_credentials,
        allow_methods=settings.cors_allow_methods,
        allow_headers=settings.cors_allow_headers,
    )

    app.include_router(participants.router)
    app.include_router(auth.router)
    app.include_router(admin.router)
    app.include_router(draw.router)
    app.include_router(reports.router)

    @app.get("/", include_in_schema=False)
    async def root() -> dict[str, str]:
        """Root endpoint."""

        return {
            "message": f"Welcome to {settings.app_name}",
            "version": settings.app_version,
            "status": "operational",
        }

    @app.get("/health", response_model=HealthResponse)
    async def health_check(request: Request):
        """Liveness plus a round-trip to the database."""

        database: Database = request.app.state.database
        payload = {
            "status": "OK",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "database": "reachable",
            "service": settings.app_name,
            "version": settings.app_version,
        }
        try:
            await database.ping()
        except Unavailable:
            payload.update(status="ERROR", database="unreachable")
            return JSONResponse(status_code=503, content=payload)
        return HealthResponse(**payload)

    @app.get("/stats", response_model=StatsResponse)
    async def stats(request: Request) -> StatsResponse:
        """Public aggregate counts."""

        result = await GroupStore(request.app.state.database).get_stats()
        return StatsResponse(
            participants=result.participants,
            courses=result.courses,
            groups=result.groups,
        )

    @app.get("/metrics", include_in_schema=False)
    async def metrics() -> Response:
        """Expose application metrics for Prometheus scraping."""

        return Response(generate_latest(), media_type=CONTENT_TYPE_LATEST)

    @app.exception_handler(ServiceError)
    async def service_error_handler(request: Request, exc: ServiceError):
        if exc.status_code >= 500:
            logger.error(
                "%s %s failed with %s: %s",
                request.method,
                request.url.path,
                exc.code,
                exc.message,
            )
        return JSONResponse(status_code=exc.status_code, content=exc.to_payload())

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=400,
            content={
                "detail": "Invalid input",
                "code": "validation_failed",
                "fields": _field_errors(exc),
            },
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content={"detail": exc.detail},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=500,
            content={"detail": "Internal server error", "code": "internal"},
        )

    @app.on_event("startup")
    async def startup_event() -> None:
        await app.state.database.init_models()

    @app.on_event("shutdown")
    async def shutdown_event() -> None:
        await app.state.database.dispose()

    return app


app = create_app()


if __name__ == "__main__":
    uvicorn.run(
        "aemoz.main:app",
        host=default_settings.host,
        port=default_settings.port,
        reload=default_settings.debug,
    )
