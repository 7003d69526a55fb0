"""
Tynda Backend — Admin Service
==============================

What:  Platform statistics, user management and the privileged playlist
       listing behind /api/admin/*.
Who:   Route handlers that already passed `require_admin`.

Protected operations:
    role update  self-demotion → 400 | super admin to non-admin → 403
    user delete  self-deletion → 400 | super admin → 403

The super admin is recognised by email (settings.super_admin_email),
which is injected at construction.
"""

import logging
import uuid
from typing import List, Optional

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from tynda.auth import RequestContext
from tynda.exceptions import (
    AuthorizationError,
    DatabaseError,
    NotFoundError,
    ValidationError,
)
from tynda.models import utcnow
from tynda.models.playlist import Playlist
from tynda.models.track import Track
from tynda.models.user import ROLE_ADMIN, ROLES, User
from tynda.schemas.common import MessageResponse
from tynda.schemas.playlist import PlaylistListItem, PlaylistOwner
from tynda.schemas.user import RoleUpdateRequest, StatsResponse, UserResponse
from tynda.services.identifiers import parse_id

logger = logging.getLogger(__name__)


class AdminService:
    """Admin-only operations. Callers are guaranteed admins by the route layer."""

    def __init__(self, db: AsyncSession, super_admin_email: str):
        self.db = db
        self.super_admin_email = super_admin_email.strip().lower()

    def is_super_admin(self, user: User) -> bool:
        return (user.email or "").lower() == self.super_admin_email

    async def get_stats(self) -> StatsResponse:
        """
        Counts of users, tracks and playlists.

        The three counts are independent scalar subqueries evaluated in a
        single round-trip:
            SELECT (SELECT count(*) FROM users),
                   (SELECT count(*) FROM tracks),
                   (SELECT count(*) FROM playlists)
        """
        query = select(
            select(func.count()).select_from(User).scalar_subquery(),
            select(func.count()).select_from(Track).scalar_subquery(),
            select(func.count()).select_from(Playlist).scalar_subquery(),
        )
        try:
            result = await self.db.execute(query)
            users, tracks, playlists = result.one()
        except SQLAlchemyError as e:
            logger.error("Database error computing stats: %s", str(e), exc_info=True)
            raise DatabaseError(context={"error_type": type(e).__name__})

        return StatsResponse(users=users or 0, tracks=tracks or 0, playlists=playlists or 0)

    async def list_users(self) -> List[UserResponse]:
        """All users, newest first. UserResponse carries no password field."""
        try:
            result = await self.db.execute(select(User).order_by(User.created_at.desc()))
            users = result.scalars().all()
        except SQLAlchemyError as e:
            logger.error("Database error listing users: %s", str(e), exc_info=True)
            raise DatabaseError(context={"error_type": type(e).__name__})
        return [UserResponse.model_validate(user) for user in users]

    async def update_role(
        self, ctx: RequestContext, user_id: str, payload: RoleUpdateRequest
    ) -> MessageResponse:
        """
        Change a user's role.

        Check order:
            1. malformed id                       → 400
            2. role not 'user'/'admin'            → 400
            3. caller demoting themselves         → 400
            4. super admin set to non-admin       → 403
            5. target missing                     → 404
        """
        uid = parse_id(user_id, "Invalid user ID")

        role = payload.role
        if not role or role not in ROLES:
            raise ValidationError(
                message='Invalid role. Must be "user" or "admin".',
                field="role",
            )

        if uid == ctx.user_id and role != ROLE_ADMIN:
            raise ValidationError(message="Cannot demote yourself from admin")

        target = await self._find_user(uid)
        if target is not None and self.is_super_admin(target) and role != ROLE_ADMIN:
            logger.warning("User %s attempted to demote the super admin", ctx.user_id)
            raise AuthorizationError(message="Cannot modify the super admin account")

        if target is None:
            raise NotFoundError(resource="User", resource_id=user_id)

        target.role = role
        target.updated_at = utcnow()
        try:
            await self.db.flush()
        except SQLAlchemyError as e:
            logger.error("Database error updating role for %s: %s", user_id, str(e))
            raise DatabaseError(context={"user_id": user_id})

        logger.info("User %s role set to %s by %s", uid, role, ctx.user_id)
        return MessageResponse(message=f"User role updated to {role}")

    async def delete_user(self, ctx: RequestContext, user_id: str) -> MessageResponse:
        """
        Permanently delete a user. Their playlists are left in place and show
        up in admin listings without an owner.
        """
        uid = parse_id(user_id, "Invalid user ID")

        if uid == ctx.user_id:
            raise ValidationError(message="Cannot delete your own account")

        target = await self._find_user(uid)
        if target is None:
            raise NotFoundError(resource="User", resource_id=user_id)

        if self.is_super_admin(target):
            logger.warning("User %s attempted to delete the super admin", ctx.user_id)
            raise AuthorizationError(message="Cannot delete the super admin account")

        try:
            await self.db.delete(target)
            await self.db.flush()
        except SQLAlchemyError as e:
            logger.error("Database error deleting user %s: %s", user_id, str(e))
            raise DatabaseError(context={"user_id": user_id})

        logger.info("User %s deleted by %s", uid, ctx.user_id)
        return MessageResponse(message="User deleted successfully")

    async def list_playlists(self) -> List[PlaylistListItem]:
        """Every playlist, newest first, with `owner {username, email}` read-joined."""
        try:
            result = await self.db.execute(
                select(Playlist, User.username, User.email)
                .outerjoin(User, User.id == Playlist.user_id)
                .order_by(Playlist.created_at.desc())
            )
            rows = result.all()
        except SQLAlchemyError as e:
            logger.error("Database error listing all playlists: %s", str(e), exc_info=True)
            raise DatabaseError(context={"error_type": type(e).__name__})

        items = []
        for playlist, username, email in rows:
            item = PlaylistListItem.model_validate(playlist)
            if username is not None:
                item.owner = PlaylistOwner(username=username, email=email)
            items.append(item)
        return items

    async def _find_user(self, uid: uuid.UUID) -> Optional[User]:
        try:
            result = await self.db.execute(select(User).where(User.id == uid))
            return result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error("Database error fetching user %s: %s", uid, str(e))
            raise DatabaseError(context={"user_id": str(uid)})
