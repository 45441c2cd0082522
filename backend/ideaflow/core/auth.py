"""Bearer-token authentication and admin capability for FastAPI.

Session tokens are HS256 JWTs issued by the auth backend and signed with the
project's JWT secret. Admin rights come from the caller's profile row, never
from token claims alone.
"""

import uuid
from dataclasses import dataclass

import jwt as pyjwt
from fastapi import Depends, HTTPException, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from ideaflow.api.deps import get_workflow_store
from ideaflow.core.config import get_settings
from ideaflow.core.exceptions import StoreUnavailableError
from ideaflow.db.workflow_store import WorkflowStore

_bearer_scheme = HTTPBearer(auto_error=False)

ADMIN_ROLE = "admin"


@dataclass(frozen=True)
class AuthUser:
    """Authenticated user extracted from a session JWT."""

    user_id: str
    claims: dict


@dataclass(frozen=True)
class AdminCapability:
    """Proof that ``user_id`` was verified as an administrator.

    Status-changing operations take this as an explicit argument; only
    ``require_admin`` (or a test) should construct one.
    """

    user_id: uuid.UUID


def decode_session_jwt(token: str) -> AuthUser:
    """Verify and decode a session JWT.

    Raises ``HTTPException(401)`` on any validation failure.
    """
    settings = get_settings()
    if not settings.jwt_secret:
        raise HTTPException(status_code=500, detail="Authentication is misconfigured")

    options = {"verify_exp": True, "require": ["sub", "exp"]}
    kwargs = {}
    if settings.jwt_audience:
        kwargs["audience"] = settings.jwt_audience
    else:
        options["verify_aud"] = False
    if settings.jwt_issuer:
        kwargs["issuer"] = settings.jwt_issuer

    try:
        payload = pyjwt.decode(
            token,
            settings.jwt_secret,
            algorithms=["HS256"],
            options=options,
            **kwargs,
        )
    except pyjwt.ExpiredSignatureError:
        raise HTTPException(status_code=401, detail="Token expired")
    except pyjwt.MissingRequiredClaimError as exc:
        raise HTTPException(status_code=401, detail=f"Missing required claim: {exc}")
    except pyjwt.InvalidAudienceError:
        raise HTTPException(status_code=401, detail="Unauthorized audience (aud mismatch)")
    except pyjwt.InvalidIssuerError:
        raise HTTPException(status_code=401, detail="Invalid issuer (iss mismatch)")
    except pyjwt.InvalidTokenError as exc:
        raise HTTPException(status_code=401, detail=f"Invalid token: {exc}")

    sub = payload.get("sub")
    if not sub:
        raise HTTPException(status_code=401, detail="Token missing sub claim")

    return AuthUser(user_id=sub, claims=payload)


async def require_auth(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None = Depends(_bearer_scheme),
) -> AuthUser:
    """FastAPI dependency that extracts and validates the session JWT.

    Usage::

        @router.get("/protected")
        async def protected(user: AuthUser = Depends(require_auth)):
            ...
    """
    if credentials is None:
        raise HTTPException(status_code=401, detail="Missing authorization header")

    user = decode_session_jwt(credentials.credentials)

    # Set user_id on request state for downstream use (error handlers, audit logging)
    request.state.user_id = user.user_id

    return user


async def require_admin(
    user: AuthUser = Depends(require_auth),
    store: WorkflowStore = Depends(get_workflow_store),
) -> AdminCapability:
    """FastAPI dependency that resolves the caller's profile role.

    Returns an AdminCapability for admins, raises 403 otherwise.
    """
    try:
        user_uuid = uuid.UUID(user.user_id)
    except ValueError:
        raise HTTPException(status_code=401, detail="Token sub is not a valid user id")

    try:
        role = await store.get_profile_role(user_uuid)
    except StoreUnavailableError:
        raise HTTPException(status_code=503, detail="Could not verify permissions")

    if role != ADMIN_ROLE:
        raise HTTPException(status_code=403, detail="Administrator role required")

    return AdminCapability(user_id=user_uuid)
