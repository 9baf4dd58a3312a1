"""Authentication dependencies for FastAPI routes.

Every page and endpoint uses one of the role guards below exactly once; the
session lookup and the role check are never repeated inside a route body.
"""

import logging
import secrets
from typing import Callable
from uuid import UUID

from fastapi import Depends, HTTPException, Request
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from jobboard.models.base import get_db
from jobboard.models.user import User
from jobboard.models.user_role import UserRole
from jobboard.services.auth_service import read_access_token

logger = logging.getLogger(__name__)


class NotAuthenticatedException(Exception):
    """Raised when a route requires login but user is not authenticated."""

    def __init__(self, next_path: str = "/"):
        self.next_path = next_path


class NotAuthorizedException(Exception):
    """Raised when the logged-in user's role may not open the page."""
    pass


def _bearer_token(request: Request) -> str | None:
    header = request.headers.get("authorization", "")
    scheme, _, token = header.partition(" ")
    if scheme.lower() != "bearer" or not token:
        return None
    return token.strip()


def _session_user_id(request: Request) -> UUID | None:
    if "session" not in request.scope:
        return None
    try:
        return UUID(request.session.get("user_id", ""))
    except (TypeError, ValueError):
        return None


async def get_current_user(request: Request, db: AsyncSession = Depends(get_db)) -> User | None:
    """Return the logged-in user or None.

    The bearer header is checked first, then the cookie session. A store error is
    treated the same as having no session.
    """
    token = _bearer_token(request)
    user_id = read_access_token(token) if token else _session_user_id(request)
    if not user_id:
        return None
    try:
        result = await db.execute(
            select(User).where(User.id == user_id, User.is_active == True)
        )
        return result.scalar_one_or_none()
    except SQLAlchemyError as e:
        logger.warning("Session lookup failed for %s: %s", user_id, e)
        return None


async def get_current_role(user: User | None = Depends(get_current_user)) -> UserRole | None:
    """The role record of the logged-in user, or None."""
    if user is None:
        return None
    return user.role_record


def _next_path(request: Request) -> str:
    path = request.url.path
    if request.url.query:
        path = f"{path}?{request.url.query}"
    return path


def require_role(*roles: str) -> Callable:
    """Page guard: redirect to login without a session, to /unauthorized on role mismatch.

    With no roles given any logged-in, active account passes.
    """

    async def guard(request: Request, user: User | None = Depends(get_current_user)) -> UserRole:
        if user is None:
            raise NotAuthenticatedException(_next_path(request))
        role = user.role_record
        if role is None or not role.is_active or (roles and role.role not in roles):
            raise NotAuthorizedException()
        return role

    return guard


def require_role_api(*roles: str) -> Callable:
    """Same contract as ``require_role`` for JSON endpoints: 401 or 403."""

    async def guard(user: User | None = Depends(get_current_user)) -> UserRole:
        if user is None:
            raise HTTPException(status_code=401, detail="Login required")
        role = user.role_record
        if role is None or not role.is_active:
            raise HTTPException(status_code=403, detail="Account is not active")
        if roles and role.role not in roles:
            raise HTTPException(status_code=403, detail="Insufficient permissions")
        return role

    return guard


def ensure_csrf_token(request: Request) -> str:
    """Get or create a CSRF token in the session."""
    token = request.session.get("csrf_token")
    if not token:
        token = secrets.token_urlsafe(32)
        request.session["csrf_token"] = token
    return token


def validate_csrf_token(request: Request, token: str) -> bool:
    """Validate a submitted CSRF token against the session token."""
    session_token = request.session.get("csrf_token")
    if not session_token or not token:
        return False
    return secrets.compare_digest(session_token, token)
