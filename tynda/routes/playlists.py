"""
Tynda Backend — Playlist Route Handlers
========================================

What:  /api/playlists CRUD and membership endpoints. Every route requires a
       session; the resolved RequestContext is passed to PlaylistService,
       which applies the admin/owner visibility rules.
"""

import logging
from typing import List

from fastapi import APIRouter, Depends

from tynda.auth import RequestContext, get_request_context
from tynda.dependencies import get_playlist_service
from tynda.schemas.common import ErrorResponse, MessageResponse
from tynda.schemas.playlist import (
    PlaylistCreate,
    PlaylistDetail,
    PlaylistListItem,
    PlaylistResponse,
    PlaylistTrackAdd,
    PlaylistTrackAddResponse,
    PlaylistUpdate,
)
from tynda.services.playlist_service import PlaylistService

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/playlists",
    tags=["Playlists"],
    responses={401: {"description": "No valid session", "model": ErrorResponse}},
)

NOT_FOUND = {404: {"description": "Playlist (or track) not found", "model": ErrorResponse}}
BAD_REQUEST = {400: {"description": "Invalid input or id", "model": ErrorResponse}}


@router.get(
    "",
    response_model=List[PlaylistListItem],
    response_model_exclude_none=True,
    summary="List the caller's playlists (all playlists for admins)",
)
async def list_playlists(
    ctx: RequestContext = Depends(get_request_context),
    service: PlaylistService = Depends(get_playlist_service),
) -> List[PlaylistListItem]:
    return await service.list_playlists(ctx)


@router.get(
    "/{playlist_id}",
    response_model=PlaylistDetail,
    responses={**BAD_REQUEST, **NOT_FOUND},
    summary="Get a playlist with its resolved tracks",
)
async def get_playlist(
    playlist_id: str,
    ctx: RequestContext = Depends(get_request_context),
    service: PlaylistService = Depends(get_playlist_service),
) -> PlaylistDetail:
    return await service.get_playlist(ctx, playlist_id)


@router.post(
    "",
    response_model=PlaylistResponse,
    status_code=201,
    responses={**BAD_REQUEST},
    summary="Create a playlist owned by the caller",
)
async def create_playlist(
    payload: PlaylistCreate,
    ctx: RequestContext = Depends(get_request_context),
    service: PlaylistService = Depends(get_playlist_service),
) -> PlaylistResponse:
    return await service.create_playlist(ctx, payload)


@router.put(
    "/{playlist_id}",
    response_model=MessageResponse,
    responses={**BAD_REQUEST, **NOT_FOUND},
    summary="Update name, description or cover of an owned playlist",
)
async def update_playlist(
    playlist_id: str,
    payload: PlaylistUpdate,
    ctx: RequestContext = Depends(get_request_context),
    service: PlaylistService = Depends(get_playlist_service),
) -> MessageResponse:
    return await service.update_playlist(ctx, playlist_id, payload)


@router.post(
    "/{playlist_id}/tracks",
    response_model=PlaylistTrackAddResponse,
    responses={**BAD_REQUEST, **NOT_FOUND},
    summary="Add a track to an owned playlist (no duplicates)",
)
async def add_track(
    playlist_id: str,
    payload: PlaylistTrackAdd,
    ctx: RequestContext = Depends(get_request_context),
    service: PlaylistService = Depends(get_playlist_service),
) -> PlaylistTrackAddResponse:
    return await service.add_track(ctx, playlist_id, payload)


@router.delete(
    "/{playlist_id}/tracks/{track_id}",
    response_model=MessageResponse,
    responses={**BAD_REQUEST, **NOT_FOUND},
    summary="Remove a track from an owned playlist",
)
async def remove_track(
    playlist_id: str,
    track_id: str,
    ctx: RequestContext = Depends(get_request_context),
    service: PlaylistService = Depends(get_playlist_service),
) -> MessageResponse:
    return await service.remove_track(ctx, playlist_id, track_id)


@router.delete(
    "/{playlist_id}",
    response_model=MessageResponse,
    responses={**BAD_REQUEST, **NOT_FOUND},
    summary="Delete an owned playlist",
)
async def delete_playlist(
    playlist_id: str,
    ctx: RequestContext = Depends(get_request_context),
    service: PlaylistService = Depends(get_playlist_service),
) -> MessageResponse:
    return await service.delete_playlist(ctx, playlist_id)
