"""
Tynda Backend — Admin Route Handlers
=====================================

What:  /api/admin/*: statistics, user management, all-playlist listing.
How:   Every handler depends on `require_admin` (401 without a session,
       403 for non-admins) and passes the admin's context to AdminService
       for the self-targeting checks.
"""

from typing import List

from fastapi import APIRouter, Depends

from tynda.auth import RequestContext, require_admin
from tynda.dependencies import get_admin_service
from tynda.schemas.common import ErrorResponse, MessageResponse
from tynda.schemas.playlist import PlaylistListItem
from tynda.schemas.user import RoleUpdateRequest, StatsResponse, UserResponse
from tynda.services.admin_service import AdminService

router = APIRouter(
    prefix="/api/admin",
    tags=["Admin"],
    responses={
        401: {"description": "No valid session", "model": ErrorResponse},
        403: {"description": "Admin role required", "model": ErrorResponse},
    },
)


@router.get("/stats", response_model=StatsResponse, summary="Platform statistics")
async def get_stats(
    ctx: RequestContext = Depends(require_admin),
    service: AdminService = Depends(get_admin_service),
) -> StatsResponse:
    return await service.get_stats()


@router.get("/users", response_model=List[UserResponse], summary="All users (no passwords)")
async def list_users(
    ctx: RequestContext = Depends(require_admin),
    service: AdminService = Depends(get_admin_service),
) -> List[UserResponse]:
    return await service.list_users()


@router.patch(
    "/users/{user_id}/role",
    response_model=MessageResponse,
    responses={
        400: {"description": "Invalid id/role or self-demotion", "model": ErrorResponse},
        404: {"description": "User not found", "model": ErrorResponse},
    },
    summary="Change a user's role",
)
async def update_user_role(
    user_id: str,
    payload: RoleUpdateRequest,
    ctx: RequestContext = Depends(require_admin),
    service: AdminService = Depends(get_admin_service),
) -> MessageResponse:
    return await service.update_role(ctx, user_id, payload)


@router.delete(
    "/users/{user_id}",
    response_model=MessageResponse,
    responses={
        400: {"description": "Invalid id or self-deletion", "model": ErrorResponse},
        404: {"description": "User not found", "model": ErrorResponse},
    },
    summary="Delete a user",
)
async def delete_user(
    user_id: str,
    ctx: RequestContext = Depends(require_admin),
    service: AdminService = Depends(get_admin_service),
) -> MessageResponse:
    return await service.delete_user(ctx, user_id)


@router.get(
    "/playlists",
    response_model=List[PlaylistListItem],
    response_model_exclude_none=True,
    summary="All playlists with owner username/email",
)
async def list_all_playlists(
    ctx: RequestContext = Depends(require_admin),
    service: AdminService = Depends(get_admin_service),
) -> List[PlaylistListItem]:
    return await service.list_playlists()
