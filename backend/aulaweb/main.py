"""
Aula Web Backend — FastAPI Application Factory
================================================

What:  Creates and configures the FastAPI application instance.
Why:   Centralizes middleware registration, route mounting, exception
       handling and resource lifecycle in one place.
How:   Factory pattern: create_app() returns a configured FastAPI instance.
Who:   uvicorn (`uvicorn aulaweb.main:app`, or the `aulaweb` console script)
       and the test suite, which builds apps with its own Settings.

Routes (registration order matters, the SPA fallback goes last):
    GET  /weather          → OpenWeatherMap proxy
    GET  /api/students     → list students
    POST /api/students     → create student
    GET  /api/health       → {"ok": true}
    GET  /{path}           → static file or SPA entry document

Lifecycle:
    Startup:
    1. Configure logging
    2. Warn if OPENWEATHER_KEY is missing (the server still starts)
    3. Build the StudentStore, create data dir + table if absent
    4. Open the shared httpx client for the weather proxy

    Shutdown:
    1. Close the httpx client
    2. Dispose the database engine
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

import httpx
import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse, Response
from starlette.exceptions import HTTPException as StarletteHTTPException

from aulaweb import __version__
from aulaweb.config import Settings, settings as default_settings
from aulaweb.exceptions import (
    AulaWebError,
    ConfigurationError,
    FetchError,
    NotFoundError,
    StorageError,
    UpstreamError,
    ValidationError,
)
from aulaweb.middleware.logging import RequestLoggingMiddleware
from aulaweb.middleware.request_id import RequestIDMiddleware, request_id_var
from aulaweb.routes import health, spa, students, weather
from aulaweb.services.student_store import StudentStore
from aulaweb.services.weather_service import WeatherService

logger = logging.getLogger(__name__)

INVALID_BODY_MESSAGE = "Cuerpo JSON inválido"
INTERNAL_ERROR_MESSAGE = "Error interno del servidor"


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging(log_level: str = "INFO") -> None:
    """
    Configure logging for the entire application.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s
    Called once during startup, before any other initialization.
    """
    logging.basicConfig(
        level=getattr(logging, log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # Per-request noise from third-party libraries
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

def build_lifespan(
    settings: Settings,
    http_transport: Optional[httpx.AsyncBaseTransport] = None,
):
    """
    Build the lifespan context manager for one Settings instance.

    Args:
        settings: Configuration the store and weather proxy are built from.
        http_transport: Optional httpx transport for the weather client;
            tests pass an httpx.MockTransport here.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        # ── Startup ───────────────────────────────────────────────────────
        setup_logging(settings.log_level)
        logger.info("Aula Web backend %s starting up...", __version__)

        # A missing key only disables /weather; everything else keeps working
        try:
            settings.validate_weather_config()
        except ValueError as e:
            logger.warning("%s", e)

        store = StudentStore(
            settings.resolved_database_url,
            echo=settings.log_level == "DEBUG",
        )
        await store.init_schema()
        app.state.store = store

        client = httpx.AsyncClient(
            timeout=settings.openweather_timeout,
            transport=http_transport,
        )
        app.state.weather_service = WeatherService(settings, client=client)

        logger.info("Serving static files from %s", settings.public_path)
        logger.info("Server ready at http://%s:%d", settings.host, settings.port)

        yield

        # ── Shutdown ──────────────────────────────────────────────────────
        logger.info("Aula Web backend shutting down...")
        await app.state.weather_service.aclose()
        await store.dispose()
        logger.info("Shutdown complete.")

    return lifespan


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


def register_exception_handlers(app: FastAPI) -> None:
    """
    Map exception types to HTTP status codes.

    Handler hierarchy:
        ValidationError          → 400
        RequestValidationError   → 400 (body is not a JSON object)
        NotFoundError            → 404
        ConfigurationError       → 500
        StorageError             → 500 (driver message in body)
        FetchError               → 500
        UpstreamError            → upstream status, upstream body verbatim
        HTTPException            → its own status (e.g. 405 Method Not Allowed)
        AulaWebError (base)      → 500
        Exception (fallback)     → 500, details logged only

    Every JSON body has the shape {"error": "<message>"}.
    """

    @app.exception_handler(ValidationError)
    async def handle_validation_error(request: Request, exc: ValidationError):
        rid = request_id_var.get("")
        logger.warning("[%s] Validation error: %s | Context: %s", rid, exc.message, exc.context)
        return _error(400, exc.message)

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation_error(request: Request, exc: RequestValidationError):
        rid = request_id_var.get("")
        logger.warning("[%s] Malformed request: %s", rid, exc.errors())
        return _error(400, INVALID_BODY_MESSAGE)

    @app.exception_handler(NotFoundError)
    async def handle_not_found(request: Request, exc: NotFoundError):
        return _error(404, exc.message)

    @app.exception_handler(ConfigurationError)
    async def handle_configuration_error(request: Request, exc: ConfigurationError):
        rid = request_id_var.get("")
        logger.error("[%s] Configuration error: %s", rid, exc.message)
        return _error(500, exc.message)

    @app.exception_handler(StorageError)
    async def handle_storage_error(request: Request, exc: StorageError):
        rid = request_id_var.get("")
        logger.error("[%s] Storage error: %s | Context: %s", rid, exc.message, exc.context)
        return _error(500, exc.message)

    @app.exception_handler(FetchError)
    async def handle_fetch_error(request: Request, exc: FetchError):
        rid = request_id_var.get("")
        logger.error("[%s] Weather fetch error | Context: %s", rid, exc.context)
        return _error(500, exc.message)

    @app.exception_handler(UpstreamError)
    async def handle_upstream_error(request: Request, exc: UpstreamError):
        """Replay the provider's answer unchanged."""
        return Response(
            content=exc.body,
            status_code=exc.status_code,
            media_type=exc.content_type,
        )

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_exception(request: Request, exc: StarletteHTTPException):
        """Framework errors (405 on a known path, etc.) in the common body shape."""
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": str(exc.detail)},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(AulaWebError)
    async def handle_app_error(request: Request, exc: AulaWebError):
        rid = request_id_var.get("")
        logger.error("[%s] Application error: %s | Context: %s", rid, exc.message, exc.context)
        return _error(500, exc.message)

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        """Stack trace goes to the log only; the client gets a generic message."""
        rid = request_id_var.get("")
        logger.error("[%s] Unexpected error: %s", rid, exc, exc_info=True)
        return _error(500, INTERNAL_ERROR_MESSAGE)


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(
    settings: Optional[Settings] = None,
    http_transport: Optional[httpx.AsyncBaseTransport] = None,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        settings: Defaults to the environment-loaded settings singleton.
        http_transport: Optional transport for the outbound weather client.

    Interactive docs (/docs, /redoc) are disabled: every unmatched GET path
    belongs to the SPA. The schema stays available at /openapi.json.
    """
    settings = settings or default_settings

    app = FastAPI(
        title="Aula Web API",
        description="Student registry and weather proxy backing the Aula Web SPA.",
        version=__version__,
        docs_url=None,
        redoc_url=None,
        openapi_url="/openapi.json",
        lifespan=build_lifespan(settings, http_transport),
    )
    app.state.settings = settings

    # ── Register Middleware ───────────────────────────────────────────────
    # Executes in REVERSE order of addition: RequestID → Logging → GZip → CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )
    app.add_middleware(GZipMiddleware, minimum_size=500)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    # ── Register Exception Handlers ───────────────────────────────────────
    register_exception_handlers(app)

    # ── Register Routes ───────────────────────────────────────────────────
    app.include_router(weather.router)
    app.include_router(students.router)
    app.include_router(health.router)
    # Catch-all: must stay last so it never shadows the API routes
    app.include_router(spa.router)

    return app


app = create_app()


def run() -> None:
    """Console entry point: serve the default app on HOST:PORT."""
    uvicorn.run(
        "aulaweb.main:app",
        host=default_settings.host,
        port=default_settings.port,
        log_level=default_settings.log_level.lower(),
    )


if __name__ == "__main__":
    run()
