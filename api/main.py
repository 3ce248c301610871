"""
api/main.py -- Standalone documentation server built around the gateway.

Serves a single schema file with the Swagger UI, optionally gated by a
key/value credential, without any API of its own. Everything is driven by
core.config.Settings (environment variables or .env).

Run with:  uvicorn asgi:app --reload
           python main.py swagger.json --key token --value s3cret

Middleware stack (outermost to innermost):
  1. log_requests       -- one log line per request with latency
  2. FastAPIFramework   -- documentation routes, assets, authorization

Lifespan runs a background task that purges expired file cache entries and
cancels it on shutdown.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException

from api.models import ErrorDetail, ErrorResponse, HealthResponse
from core.config import Settings, get_settings
from frameworks.fastapi_framework import FastAPIFramework

__version__ = "0.1.0"

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)-5s %(name)s %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger("swaggerinjector.api")

# ---------------------------------------------------------------------------
# Background purge task
# ---------------------------------------------------------------------------


async def _purge_loop(docs: FastAPIFramework, interval: int) -> None:
    """Purge expired file cache entries every `interval` seconds.

    CancelledError from task.cancel() during shutdown propagates out of
    asyncio.sleep and unwinds the coroutine.
    """
    while True:
        await asyncio.sleep(interval)
        removed = docs.file_cache.purge_expired()
        if removed:
            logger.info("Purged %d expired file cache entries", removed)


# ---------------------------------------------------------------------------
# App factory
# ---------------------------------------------------------------------------


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Build the documentation server.

    Raises ConfigurationError when the configured schema cannot be loaded,
    so a misconfigured server fails at startup rather than on first request.
    """
    settings = settings or get_settings()
    docs = FastAPIFramework(settings.gateway_options(), settings=settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        logger.info("Documentation available at %s", docs.route)
        app.state.purge_task = asyncio.create_task(_purge_loop(docs, settings.cache_purge_interval))

        yield

        app.state.purge_task.cancel()
        docs.file_cache.clear()
        logger.info("swagger-injector shutdown complete")

    app = FastAPI(
        title="swagger-injector",
        version=__version__,
        lifespan=lifespan,
        # The gateway serves the documentation; FastAPI's own would only
        # describe /health.
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )
    app.state.docs = docs

    # Registration order: the gateway is added first so log_requests, added
    # last, is outermost and also times documentation requests.
    docs.install(app)

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

    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
        """Return the structured error envelope for HTTP exceptions (e.g. 404)."""
        return JSONResponse(
            status_code=exc.status_code,
            content=ErrorResponse(
                error=ErrorDetail(
                    code=f"http_{exc.status_code}",
                    message=str(exc.detail),
                )
            ).model_dump(),
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """Catch-all handler. The traceback goes to the log, never to the client."""
        logger.exception("Unhandled exception on %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=500,
            content=ErrorResponse(
                error=ErrorDetail(
                    code="internal_error",
                    message="An unexpected error occurred.",
                )
            ).model_dump(),
        )

    @app.get("/health", include_in_schema=False)
    async def health() -> HealthResponse:
        """Return liveness, version and the documentation route."""
        return HealthResponse(version=__version__, documentation=docs.route)

    return app
