from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from starlette.responses import JSONResponse

from api.deps import get_upstream
from api.router import api_router
from core.config import settings
from core.logging import setup_logging
from core.upstream import UpstreamClient, UpstreamError, UpstreamUnavailableError, close_upstream
from grid.policy import BlockedWindowError
from services.section_forms import SectionFormError


logger = logging.getLogger(__name__)


@asynccontextmanager
async def _lifespan(_app: FastAPI):
    yield
    close_upstream()


def create_app() -> FastAPI:
    setup_logging(environment=settings.environment, level=settings.log_level, log_dir=settings.log_dir)
    is_production = settings.environment.lower() == "production"
    app = FastAPI(
        title="Course Scheduling Portal API",
        version="0.1.0",
        docs_url=None if is_production else "/docs",
        redoc_url=None if is_production else "/redoc",
        openapi_url=None if is_production else "/openapi.json",
        lifespan=_lifespan,
    )

    @app.exception_handler(UpstreamUnavailableError)
    def _upstream_unavailable(_request, exc: UpstreamUnavailableError):
        logger.warning("Scheduling service unavailable (503)", exc_info=exc)
        return JSONResponse(
            status_code=503,
            content={
                "code": "UPSTREAM_UNAVAILABLE",
                "message": "Scheduling service temporarily unavailable. Please retry.",
            },
        )

    @app.exception_handler(UpstreamError)
    def _upstream_error(_request, exc: UpstreamError):
        return JSONResponse(
            status_code=exc.status_code,
            content={"code": "UPSTREAM_ERROR", "message": exc.message},
        )

    @app.exception_handler(BlockedWindowError)
    def _blocked_window(_request, exc: BlockedWindowError):
        return JSONResponse(
            status_code=422,
            content={"code": "BLOCKED_WINDOW", "message": exc.message, "reason": exc.reason},
        )

    @app.exception_handler(SectionFormError)
    def _section_form(_request, exc: SectionFormError):
        return JSONResponse(status_code=422, content={"code": exc.code, "message": exc.message})

    allow_origins = [settings.frontend_origin]
    allow_origin_regex = None
    if not is_production:
        # Dev-friendly: allow the configured origin and any localhost port.
        allow_origins.extend(["http://localhost:5173", "http://127.0.0.1:5173"])
        allow_origin_regex = r"^https?://(localhost|127\.0\.0\.1)(:\d+)?$"

    app.add_middleware(
        CORSMiddleware,
        allow_origins=allow_origins,
        allow_origin_regex=allow_origin_regex,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/health")
    def health(upstream: UpstreamClient = Depends(get_upstream)) -> dict:
        # Always respond; reflect upstream reachability without failing.
        upstream_status = "ok" if upstream.ping() else "down"
        return {"app": "ok", "upstream": upstream_status}

    app.include_router(api_router, prefix="/api")
    return app


app = create_app()
