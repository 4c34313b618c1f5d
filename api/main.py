"""
api/main.py -- FastAPI application factory for Stockroom.

create_app(settings) builds the whole service from an explicitly constructed
Settings object. Nothing in the app reads the environment on its own:
asgi.py builds Settings from the environment for production, and tests build
Settings by hand.

Run with:  uvicorn asgi:app --reload

Middleware stack (outermost to innermost):
  1. CORSMiddleware -- adds CORS headers for the configured browser origins
  2. log_requests   -- one log line per request with status and latency

Lifespan builds the stores and the token issuer on startup and disposes the
stores on shutdown.

Every error leaves the API as {"success": false, "message": ...}. Domain
errors carry their own status; validation failures are 400; anything
unexpected is a logged 500 with a generic message.
"""

from __future__ import annotations

import logging
import time
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from api.models import ErrorResponse, HealthResponse
from api.routes.v1.auth import router as auth_router
from api.routes.v1.products import router as products_router
from auth.store import UserStore
from auth.tokens import TokenIssuer
from core.config import Settings
from core.errors import StockroomError
from products.store import ProductStore

__version__ = "1.0.0"

logger = logging.getLogger("stockroom.api")


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=ErrorResponse(message=message).model_dump())


def _validation_message(errors: list[dict]) -> str:
    """Collapse pydantic errors into one human-readable sentence.

    Missing fields are listed together; otherwise the first error wins.
    """
    missing = [str(e["loc"][-1]) for e in errors if e.get("type") == "missing" and e.get("loc")]
    if missing:
        return f"Please provide all required fields: {', '.join(missing)}"
    first = errors[0]
    field = str(first["loc"][-1]) if first.get("loc") else "request"
    return f"Invalid value for {field}: {first.get('msg', 'invalid')}"


# ---------------------------------------------------------------------------
# Lifespan
# ---------------------------------------------------------------------------


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Build shared components from app.state.settings; dispose them on shutdown.

    Startup order: stores first, then the token issuer. Request handlers find
    all three on app.state.
    """
    settings: Settings = app.state.settings
    logger.info("Stockroom API starting up")
    app.state.user_store = UserStore(settings.database_url)
    app.state.product_store = ProductStore(settings.database_url)
    app.state.tokens = TokenIssuer(settings.secret_key, settings.token_expire_seconds)
    logger.info("Stores initialized (token lifetime %ds)", settings.token_expire_seconds)

    yield

    app.state.product_store.close()
    app.state.user_store.close()
    logger.info("Stockroom API shutdown complete")


# ---------------------------------------------------------------------------
# Factory
# ---------------------------------------------------------------------------


def create_app(settings: Settings) -> FastAPI:
    """Assemble the FastAPI app around the given settings."""
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)-5s %(name)s %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    app = FastAPI(
        title="Stockroom API",
        description="Per-user product inventory with token authentication.",
        version=__version__,
        lifespan=lifespan,
        docs_url="/docs" if settings.debug else None,
        redoc_url=None,
    )
    app.state.settings = settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["GET", "POST", "PUT", "DELETE"],
        allow_headers=["Content-Type", "Authorization"],
        max_age=3600,
    )

    # -----------------------------------------------------------------------
    # Request logging middleware
    # -----------------------------------------------------------------------

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        start = time.perf_counter()
        response = await call_next(request)
        ms = (time.perf_counter() - start) * 1000
        logger.info(
            "%s %s %d %.1fms %s",
            request.method,
            request.url.path,
            response.status_code,
            ms,
            request.client.host if request.client else "unknown",
        )
        return response

    # -----------------------------------------------------------------------
    # Routers
    # -----------------------------------------------------------------------

    app.include_router(auth_router, prefix="/api/v1", tags=["Auth"])
    app.include_router(products_router, prefix="/api/v1", tags=["Products"])

    # -----------------------------------------------------------------------
    # Exception handlers
    #
    # All handlers return the same ErrorResponse envelope so clients can read
    # .message without inspecting the status code first.
    # -----------------------------------------------------------------------

    @app.exception_handler(StockroomError)
    async def stockroom_error_handler(request: Request, exc: StockroomError) -> JSONResponse:
        return _error(exc.status_code, exc.message)

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        """400 for bad bodies; 404 when a path id cannot name a record at all."""
        errors = exc.errors()
        if any(e.get("loc", ("",))[0] == "path" for e in errors):
            return _error(404, "Not found")
        return _error(400, _validation_message(errors))

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        """Unknown routes, wrong methods and other framework-level errors."""
        return _error(exc.status_code, str(exc.detail))

    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """Catch-all for unexpected failures, storage errors included.

        The traceback goes to the log only, never to the response body.
        """
        logger.exception("Unhandled exception on %s %s", request.method, request.url.path)
        return _error(500, "Server error")

    # -----------------------------------------------------------------------
    # Health endpoint
    # -----------------------------------------------------------------------

    @app.get("/api/v1/health", tags=["Health"])
    async def health() -> HealthResponse:
        """Return API liveness and current version. No auth."""
        return HealthResponse(version=__version__)

    return app
