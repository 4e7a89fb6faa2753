"""FastAPI main application with app factory and route configuration."""

import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .config import Settings
from .deps import get_settings
from .routes import tasks
from .schemas import HealthResponse
from .services.task_service import create_task_service
from .utils.logging import (
    configure_request_logging,
    log_shutdown_info,
    log_startup_info,
    setup_logging,
)
from .utils.middleware import BodySizeLimitMiddleware

logger = logging.getLogger(__name__)

API_PREFIX = "/api"

SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "SAMEORIGIN",
    "Referrer-Policy": "no-referrer",
    "Cross-Origin-Opener-Policy": "same-origin",
    "Cross-Origin-Resource-Policy": "same-origin",
    "X-DNS-Prefetch-Control": "off",
}


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager for startup and shutdown events.

    Args:
        app: FastAPI application instance
    """
    settings: Settings = app.state.settings

    setup_logging(settings)
    log_startup_info(settings)

    try:
        # First run creates the data file
        app.state.task_service.list_tasks()
    except Exception as e:
        logger.error(f"Error during application startup: {str(e)}")
        raise

    yield

    log_shutdown_info()


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


def _is_api_path(path: str) -> bool:
    return path == API_PREFIX or path.startswith(API_PREFIX + "/")


def _resolve_static(static_dir: Path, relative: str) -> Optional[Path]:
    """Return the static file for ``relative`` if it exists inside ``static_dir``."""
    if not relative:
        return None
    root = static_dir.resolve()
    candidate = (root / relative).resolve()
    if candidate != root and root not in candidate.parents:
        return None
    return candidate if candidate.is_file() else None


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        settings: Settings to use; read from the environment when omitted

    Returns:
        Configured FastAPI application instance
    """
    settings = settings or get_settings()

    app = FastAPI(
        title="Task Board",
        description="A small task board: REST API over a JSON file plus a browser UI",
        version="1.0.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.task_service = create_task_service(settings)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=[settings.origin],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_middleware(BodySizeLimitMiddleware, max_body_bytes=settings.max_body_bytes)

    @app.middleware("http")
    async def add_security_headers(request: Request, call_next):
        """Attach conservative security headers to every response."""
        response = await call_next(request)
        for header, value in SECURITY_HEADERS.items():
            response.headers.setdefault(header, value)
        return response

    app.middleware("http")(configure_request_logging())

    # Custom exception handlers
    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        """Render HTTP errors as {"error": message}."""
        if exc.status_code >= 500:
            logger.error(f"HTTP {exc.status_code}: {exc.detail} for {request.method} {request.url.path}")
        else:
            logger.warning(f"HTTP {exc.status_code}: {exc.detail} for {request.method} {request.url.path}")

        return JSONResponse(
            status_code=exc.status_code,
            content={"error": exc.detail},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        """Malformed request bodies are client errors."""
        logger.warning(f"Validation error for {request.method} {request.url.path}: {exc.errors()}")

        errors = exc.errors()
        if any(error.get("type") == "json_invalid" for error in errors):
            return _error(status.HTTP_400_BAD_REQUEST, "invalid JSON body")
        message = errors[0].get("msg", "invalid request") if errors else "invalid request"
        return _error(status.HTTP_400_BAD_REQUEST, message)

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        """Handle unexpected exceptions."""
        logger.error(
            f"Unexpected error for {request.method} {request.url.path}: {str(exc)}",
            exc_info=True,
        )
        return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, "internal server error")

    @app.get("/healthz", tags=["health"], response_model=HealthResponse)
    async def health_check() -> HealthResponse:
        """Liveness check."""
        return HealthResponse(ok=True)

    app.include_router(tasks.router, prefix=API_PREFIX)

    @app.api_route(
        API_PREFIX + "/{rest:path}",
        methods=["GET", "POST", "PUT", "PATCH", "DELETE", "HEAD", "OPTIONS"],
        include_in_schema=False,
    )
    async def api_not_found(rest: str):
        """Unknown API paths are real 404s, never the app shell."""
        return _error(status.HTTP_404_NOT_FOUND, "not found")

    # Registered last so it only sees paths no other route claimed
    @app.get("/{full_path:path}", include_in_schema=False)
    async def serve_ui(full_path: str):
        """Serve UI assets, falling back to the app shell for client-side routes."""
        if _is_api_path("/" + full_path):
            return _error(status.HTTP_404_NOT_FOUND, "not found")

        static_file = _resolve_static(settings.static_dir, full_path)
        if static_file is not None:
            return FileResponse(static_file)

        index = settings.static_dir / "index.html"
        if not index.is_file():
            logger.error(f"UI entry document missing: {index}")
            return _error(status.HTTP_404_NOT_FOUND, "not found")
        return FileResponse(index)

    logger.info("FastAPI application created and configured")

    return app


# Create the app instance
app = create_app()
