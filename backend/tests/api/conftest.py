"""API-specific test fixtures."""

import uuid

import pytest
from fastapi import FastAPI, HTTPException
from fastapi.testclient import TestClient

from ideaflow.api.deps import get_transition_policy, get_workflow_store
from ideaflow.api.routes import api_router
from ideaflow.core.auth import AuthUser, require_auth
from ideaflow.core.exceptions import StoreUnavailableError
from ideaflow.domain.stages import TransitionPolicy
from ideaflow.main import generic_exception_handler, http_exception_handler, store_unavailable_handler


@pytest.fixture
def api_app(fake_store) -> FastAPI:
    """FastAPI app wired to the in-memory store, without lifespan or database."""
    app = FastAPI()
    app.exception_handler(HTTPException)(http_exception_handler)
    app.exception_handler(StoreUnavailableError)(store_unavailable_handler)
    app.exception_handler(Exception)(generic_exception_handler)
    app.include_router(api_router, prefix="/api")

    app.dependency_overrides[get_workflow_store] = lambda: fake_store
    app.dependency_overrides[get_transition_policy] = lambda: TransitionPolicy.ADMIN_OVERRIDE
    return app


@pytest.fixture
def login_as(api_app):
    """Authenticate subsequent requests as the given profile id."""

    def _login(user_id: uuid.UUID) -> None:
        api_app.dependency_overrides[require_auth] = lambda: AuthUser(
            user_id=str(user_id), claims={"sub": str(user_id)}
        )

    return _login


@pytest.fixture
def api_client(api_app):
    with TestClient(api_app) as client:
        yield client
