"""
Tynda Backend — Admin Service Unit Tests
=========================================

What:  Tests for AdminService stats and the protected user operations.
How:   Mock DB sessions; the super admin is identified by email.

What we test:
    ✅ Stats come from one query
    ✅ Role checks run in order: id, role value, self-demotion, super admin, existence
    ✅ Super admin can be neither demoted nor deleted
    ✅ Self-deletion rejected before any lookup
"""

import pytest
from unittest.mock import AsyncMock
from uuid import uuid4

from conftest import SUPER_ADMIN_EMAIL, make_playlist, make_result, make_user
from tynda.auth import RequestContext
from tynda.exceptions import AuthorizationError, NotFoundError, ValidationError
from tynda.schemas.user import RoleUpdateRequest
from tynda.services.admin_service import AdminService


def admin_ctx() -> RequestContext:
    return RequestContext(user_id=uuid4(), role="admin")


def make_service(session) -> AdminService:
    return AdminService(session, super_admin_email=SUPER_ADMIN_EMAIL)


class TestAdminStats:

    @pytest.mark.asyncio
    async def test_counts(self, mock_db_session):
        mock_db_session.execute.return_value = make_result(row=(3, 12, 4))

        stats = await make_service(mock_db_session).get_stats()

        assert (stats.users, stats.tracks, stats.playlists) == (3, 12, 4)
        mock_db_session.execute.assert_awaited_once()


class TestAdminUpdateRole:

    @pytest.mark.asyncio
    async def test_invalid_user_id(self, mock_db_session):
        with pytest.raises(ValidationError) as exc_info:
            await make_service(mock_db_session).update_role(
                admin_ctx(), "42", RoleUpdateRequest(role="admin")
            )
        assert exc_info.value.message == "Invalid user ID"

    @pytest.mark.asyncio
    async def test_invalid_role(self, mock_db_session):
        with pytest.raises(ValidationError) as exc_info:
            await make_service(mock_db_session).update_role(
                admin_ctx(), str(uuid4()), RoleUpdateRequest(role="owner")
            )
        assert exc_info.value.message == 'Invalid role. Must be "user" or "admin".'
        mock_db_session.execute.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_self_demotion(self, mock_db_session):
        ctx = admin_ctx()

        with pytest.raises(ValidationError) as exc_info:
            await make_service(mock_db_session).update_role(
                ctx, str(ctx.user_id), RoleUpdateRequest(role="user")
            )
        assert exc_info.value.message == "Cannot demote yourself from admin"

    @pytest.mark.asyncio
    async def test_super_admin_demotion_forbidden(self, mock_db_session):
        target = make_user(email=SUPER_ADMIN_EMAIL, role="admin")
        mock_db_session.execute.return_value = make_result(one=target)

        with pytest.raises(AuthorizationError):
            await make_service(mock_db_session).update_role(
                admin_ctx(), str(target.id), RoleUpdateRequest(role="user")
            )

        assert target.role == "admin"
        mock_db_session.flush.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_missing_user(self, mock_db_session):
        mock_db_session.execute.return_value = make_result(one=None)

        with pytest.raises(NotFoundError) as exc_info:
            await make_service(mock_db_session).update_role(
                admin_ctx(), str(uuid4()), RoleUpdateRequest(role="admin")
            )
        assert exc_info.value.message == "User not found"

    @pytest.mark.asyncio
    async def test_promote(self, mock_db_session):
        target = make_user()
        mock_db_session.execute.return_value = make_result(one=target)

        result = await make_service(mock_db_session).update_role(
            admin_ctx(), str(target.id), RoleUpdateRequest(role="admin")
        )

        assert result.message == "User role updated to admin"
        assert target.role == "admin"


class TestAdminDeleteUser:

    @pytest.mark.asyncio
    async def test_self_delete(self, mock_db_session):
        ctx = admin_ctx()

        with pytest.raises(ValidationError) as exc_info:
            await make_service(mock_db_session).delete_user(ctx, str(ctx.user_id))

        assert exc_info.value.message == "Cannot delete your own account"
        mock_db_session.execute.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_super_admin_delete_forbidden(self, mock_db_session):
        target = make_user(email=SUPER_ADMIN_EMAIL, role="admin")
        mock_db_session.execute.return_value = make_result(one=target)

        with pytest.raises(AuthorizationError) as exc_info:
            await make_service(mock_db_session).delete_user(admin_ctx(), str(target.id))

        assert exc_info.value.message == "Cannot delete the super admin account"
        mock_db_session.delete.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_delete(self, mock_db_session):
        target = make_user()
        mock_db_session.execute.return_value = make_result(one=target)

        result = await make_service(mock_db_session).delete_user(admin_ctx(), str(target.id))

        assert result.message == "User deleted successfully"
        mock_db_session.delete.assert_awaited_once_with(target)


class TestAdminListPlaylists:

    @pytest.mark.asyncio
    async def test_owner_joined_and_orphans_kept(self, mock_db_session):
        owned, orphan = make_playlist(name="Mine"), make_playlist(name="Orphan")
        mock_db_session.execute = AsyncMock(
            return_value=make_result(
                many=[(owned, "alice", "alice@example.com"), (orphan, None, None)]
            )
        )

        items = await make_service(mock_db_session).list_playlists()

        assert items[0].owner.username == "alice"
        assert items[0].owner.email == "alice@example.com"
        assert items[1].owner is None
