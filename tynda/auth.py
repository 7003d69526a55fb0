"""
Tynda Backend — Authentication Gate
====================================

What:  Resolves the session cookie into a RequestContext once per request
       and exposes the admin capability check.
How:   Starlette's SessionMiddleware stores the logged-in user's id under
       SESSION_USER_KEY. `get_request_context` reads it, loads the user to
       learn the role, and hands services an immutable context object.
Who:   Depended on by every /api/playlists, /api/admin and /api/auth/me route.

Outcomes:
    no session / malformed id / user deleted → AuthenticationError (401)
    require_admin on a non-admin             → AuthorizationError (403)
"""

import logging
import uuid
from dataclasses import dataclass

from fastapi import Depends, Request
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from tynda.database import get_db_session
from tynda.exceptions import AuthenticationError, AuthorizationError, DatabaseError
from tynda.models.user import ROLE_ADMIN, User

logger = logging.getLogger(__name__)

SESSION_USER_KEY = "user_id"


@dataclass(frozen=True)
class RequestContext:
    """The authenticated caller, tagged with the capabilities of their role."""

    user_id: uuid.UUID
    role: str
    username: str = ""
    email: str = ""

    @property
    def is_admin(self) -> bool:
        return self.role == ROLE_ADMIN

    @classmethod
    def for_user(cls, user: User) -> "RequestContext":
        return cls(user_id=user.id, role=user.role, username=user.username, email=user.email)


def login_session(request: Request, user: User) -> None:
    """Bind `user` to the caller's session (login/registration)."""
    request.session.clear()
    request.session[SESSION_USER_KEY] = str(user.id)


def logout_session(request: Request) -> None:
    request.session.clear()


async def get_request_context(
    request: Request,
    db: AsyncSession = Depends(get_db_session),
) -> RequestContext:
    """
    FastAPI dependency: the authenticated caller or a 401.

    A session pointing at a malformed id or a user that no longer exists
    is cleared so the browser stops sending it.
    """
    raw_user_id = request.session.get(SESSION_USER_KEY)
    if not raw_user_id:
        raise AuthenticationError()

    try:
        user_id = uuid.UUID(str(raw_user_id))
    except ValueError:
        logger.warning("Discarding session with malformed user id")
        logout_session(request)
        raise AuthenticationError()

    try:
        result = await db.execute(select(User).where(User.id == user_id))
        user = result.scalar_one_or_none()
    except SQLAlchemyError as e:
        logger.error("Database error resolving session user %s: %s", user_id, str(e))
        raise DatabaseError(context={"user_id": str(user_id)})

    if user is None:
        logger.info("Session references deleted user %s; clearing", user_id)
        logout_session(request)
        raise AuthenticationError()

    return RequestContext.for_user(user)


async def require_admin(
    ctx: RequestContext = Depends(get_request_context),
) -> RequestContext:
    """FastAPI dependency: the authenticated caller, who must hold the admin role."""
    if not ctx.is_admin:
        logger.warning("Non-admin user %s denied admin route", ctx.user_id)
        raise AuthorizationError(message="Admin access required")
    return ctx
