"""IdeaFlow backend: FastAPI application entry point."""

import signal
import uuid
from contextlib import asynccontextmanager

# configure_structlog must run before any other ideaflow import creates a logger
from ideaflow.core.logging import configure_structlog, get_correlation_id, setup_request_tracing
from ideaflow.core.config import get_settings as _get_settings_early

_early_settings = _get_settings_early()
configure_structlog(
    log_level="DEBUG" if _early_settings.debug else _early_settings.log_level,
    json_logs=not _early_settings.debug,
)

import structlog

from fastapi import FastAPI, Request, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from ideaflow.api.routes import api_router
from ideaflow.core.config import get_settings
from ideaflow.core.exceptions import StoreUnavailableError
from ideaflow.db import close_db, init_db

logger = structlog.get_logger(__name__)

APP_VERSION = "0.1.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    app.state.shutting_down = False

    def handle_sigterm(signum, frame):
        app.state.shutting_down = True
        logger.info("sigterm_received", action="readiness_draining")

    signal.signal(signal.SIGTERM, handle_sigterm)

    logger.info(
        "startup_begin",
        app_name=settings.app_name,
        version=APP_VERSION,
        transition_policy=settings.transition_policy,
    )
    # Schema is owned by alembic outside debug
    await init_db(create_tables=settings.debug)
    logger.info("db_initialized", create_tables=settings.debug)

    yield

    await close_db()
    logger.info("shutdown_complete")


def _error_response(request: Request, status_code: int, detail, event: str, **log_fields) -> JSONResponse:
    """Log with a fresh debug_id and return only ``detail`` and the id to the client."""
    debug_id = str(uuid.uuid4())
    log = logger.error if status_code >= 500 else logger.warning
    log(
        event,
        status_code=status_code,
        debug_id=debug_id,
        correlation_id=get_correlation_id(),
        path=request.url.path,
        method=request.method,
        user_id=getattr(request.state, "user_id", None),
        **log_fields,
    )
    return JSONResponse(status_code=status_code, content={"detail": detail, "debug_id": debug_id})


async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    return _error_response(
        request, exc.status_code, exc.detail, "http_exception", error_detail=exc.detail
    )


async def store_unavailable_handler(request: Request, exc: StoreUnavailableError) -> JSONResponse:
    """A store outage that escaped a route: 503 without driver details."""
    return _error_response(
        request,
        503,
        "Workflow data is temporarily unavailable",
        "store_unavailable",
        error=str(exc),
    )


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    return _error_response(
        request,
        500,
        "Internal server error",
        "unhandled_exception",
        error=str(exc),
        error_type=type(exc).__name__,
        exc_info=True,
    )


def create_app() -> FastAPI:
    settings = get_settings()

    app = FastAPI(
        title=settings.app_name,
        description="Idea workflow: stage criteria, admin status changes and history",
        version=APP_VERSION,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=sorted({settings.frontend_url, *settings.allowed_origins}),
        allow_credentials=True,
        allow_methods=["GET", "POST"],
        allow_headers=["Authorization", "Content-Type", "X-Request-ID"],
        expose_headers=["X-Request-ID"],
    )
    setup_request_tracing(app)

    app.exception_handler(HTTPException)(http_exception_handler)
    app.exception_handler(StoreUnavailableError)(store_unavailable_handler)
    app.exception_handler(Exception)(generic_exception_handler)

    app.include_router(api_router, prefix="/api")

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("ideaflow.main:app", host="0.0.0.0", port=8000, reload=_early_settings.debug)
