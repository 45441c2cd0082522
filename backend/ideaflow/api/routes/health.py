"""Liveness and readiness probes."""

import structlog
from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from sqlalchemy import select, text

from ideaflow.core.config import get_settings
from ideaflow.db.base import get_session_factory
from ideaflow.db.models.workflow_transition import WorkflowTransition

logger = structlog.get_logger(__name__)

router = APIRouter()

SERVICE = "ideaflow-backend"


@router.get("/health")
async def health_check(request: Request):
    """Liveness. Returns 503 once SIGTERM was received so traffic drains."""
    if getattr(request.app.state, "shutting_down", False):
        return JSONResponse(status_code=503, content={"status": "shutting_down", "service": SERVICE})
    return {"status": "healthy", "service": SERVICE}


@router.get("/ready")
async def readiness_check():
    """Readiness: the database answers and the workflow schema is migrated."""
    checks = {"database": False, "schema": False}

    try:
        async with get_session_factory()() as session:
            await session.execute(text("SELECT 1"))
            checks["database"] = True
            await session.execute(select(WorkflowTransition.id).limit(1))
            checks["schema"] = True
    except Exception as e:
        logger.error(
            "readiness_check_failed",
            checks=checks,
            error=str(e),
            error_type=type(e).__name__,
        )

    ready = all(checks.values())
    return JSONResponse(
        status_code=200 if ready else 503,
        content={
            "status": "ready" if ready else "degraded",
            "checks": checks,
            "transition_policy": get_settings().transition_policy,
        },
    )
