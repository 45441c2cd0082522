"""Structured logging and request tracing.

Every log line is a structlog event (JSON in production, ConsoleRenderer in
debug). Third-party stdlib loggers (SQLAlchemy, uvicorn, asyncpg) are routed
through the same formatter. Within a request each line carries the request's
X-Request-ID as ``correlation_id`` plus the method and path, bound through
structlog contextvars.
"""

import logging
import sys
import uuid
from typing import TextIO

import structlog
from asgi_correlation_id import CorrelationIdMiddleware
from asgi_correlation_id.context import correlation_id
from fastapi import FastAPI, Request

SERVICE_NAME = "ideaflow-backend"
REQUEST_ID_HEADER = "X-Request-ID"
QUIET_LOGGERS = ("uvicorn.access", "sqlalchemy.engine", "asyncpg")


def add_correlation_id(logger, method, event_dict):
    """Inject correlation_id from the asgi-correlation-id context var."""
    cid = correlation_id.get(None)
    if cid:
        event_dict["correlation_id"] = cid
    return event_dict


def add_service(logger, method, event_dict):
    event_dict.setdefault("service", SERVICE_NAME)
    return event_dict


def configure_structlog(log_level: str = "INFO", json_logs: bool = True, stream: TextIO | None = None) -> None:
    """Route structlog and stdlib logging through one structlog formatter.

    Must run before any ideaflow module calls ``structlog.get_logger``:
    loggers cache the processor chain on first use.
    """
    pre_chain = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        add_correlation_id,
        add_service,
        structlog.processors.TimeStamper(fmt="iso"),
    ]

    handler = logging.StreamHandler(stream or sys.stdout)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=pre_chain,
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                structlog.processors.JSONRenderer() if json_logs else structlog.dev.ConsoleRenderer(),
            ],
        )
    )

    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel(log_level)
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    structlog.configure(
        processors=pre_chain + [structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def setup_request_tracing(app: FastAPI) -> None:
    """Attach X-Request-ID handling and per-request log context to ``app``.

    A client-supplied X-Request-ID is echoed back unchanged; otherwise a UUID
    is generated. The correlation middleware is added last so it wraps the
    context-binding middleware and the id is set before binding.
    """

    @app.middleware("http")
    async def bind_request_context(request: Request, call_next):
        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(method=request.method, path=request.url.path)
        try:
            return await call_next(request)
        finally:
            structlog.contextvars.clear_contextvars()

    app.add_middleware(
        CorrelationIdMiddleware,
        header_name=REQUEST_ID_HEADER,
        generator=lambda: str(uuid.uuid4()),
        validator=None,
        transformer=lambda a: a,
    )


def get_correlation_id() -> str | None:
    """Current request's correlation ID, or None outside a request."""
    return correlation_id.get(None)
