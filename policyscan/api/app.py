"""FastAPI application factory.

Lifespan
--------
On startup the app builds a single :class:`ComplianceAnalyzer` from the
settings it was created with (unless one was injected) and keeps it on
``app.state.analyzer``.  The analyzer holds no per-request state, so all
requests share it.

Error mapping
-------------
Pipeline failures carry their own status code and body; the handlers here
only log them and serialise them.  Anything else becomes a generic 500.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from policyscan import __version__
from policyscan.analysis.orchestrator import ComplianceAnalyzer
from policyscan.api.routers import webpage as webpage_router
from policyscan.config import Settings
from policyscan.config import settings as default_settings
from policyscan.errors import PipelineError
from policyscan.logging_config import setup_logging

logger = logging.getLogger(__name__)


async def pipeline_error_handler(request: Request, exc: PipelineError) -> JSONResponse:
    logger.error(
        "%s %s failed with %d: %s",
        request.method,
        request.url.path,
        exc.status_code,
        exc.details or exc.message,
    )
    return JSONResponse(status_code=exc.status_code, content=exc.to_payload())


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        "Unhandled error on %s %s", request.method, request.url.path, exc_info=exc
    )
    return JSONResponse(
        status_code=500,
        content={
            "error": "Internal server error",
            "message": "An unexpected error occurred",
        },
    )


def create_app(
    settings: Settings | None = None,
    analyzer: ComplianceAnalyzer | None = None,
) -> FastAPI:
    """Return a fully-configured FastAPI application instance."""
    settings = settings or default_settings

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        if not logging.getLogger().handlers:
            setup_logging(settings.log_level)
        if not settings.proxy_token:
            logger.warning(
                "RENDER_PROXY_TOKEN is not set; calling the rendering proxy anonymously"
            )
        if getattr(app.state, "analyzer", None) is None:
            app.state.analyzer = ComplianceAnalyzer(settings)
        yield

    app = FastAPI(
        title="policyscan API",
        description=(
            "Fetches a web page through a rendering proxy and checks its "
            "content against a compliance-policy document with a language model."
        ),
        version=__version__,
        lifespan=lifespan,
    )
    app.state.analyzer = analyzer

    app.add_exception_handler(PipelineError, pipeline_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)

    app.include_router(webpage_router.router, prefix="/webpage", tags=["webpage"])

    @app.get("/health", tags=["health"])
    def health() -> dict[str, str]:
        return {"status": "ok"}

    return app


# Module-level instance used by uvicorn:
#   uvicorn policyscan.api.app:app --port 8080
app = create_app()
