from fastapi import APIRouter

from ideaflow.api.routes import health, ideas, workflow

api_router = APIRouter()

api_router.include_router(health.router, tags=["health"])
api_router.include_router(workflow.router, prefix="/workflow", tags=["workflow"])
api_router.include_router(ideas.router, prefix="/ideas", tags=["ideas"])
