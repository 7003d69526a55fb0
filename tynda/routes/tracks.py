"""
Tynda Backend — Track Route Handlers
=====================================

What:  /api/tracks CRUD. Public: no session required.
How:   Thin handlers; TrackService does validation and persistence.

Query parameters on GET /api/tracks:
    artist  exact artist match            ?artist=Ed%20Sheeran
    title   case-insensitive substring    ?title=shape
    sortBy  'title' (A→Z) | 'date' (newest first)
    fields  comma-separated projection    ?fields=title,artist
"""

import logging
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, Query

from tynda.dependencies import get_track_service
from tynda.schemas.common import ErrorResponse, MessageResponse
from tynda.schemas.track import TrackCreate, TrackResponse, TrackUpdate
from tynda.services.track_service import TrackService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/tracks", tags=["Tracks"])

NOT_FOUND = {404: {"description": "Track not found", "model": ErrorResponse}}
BAD_REQUEST = {400: {"description": "Invalid input or id", "model": ErrorResponse}}


@router.get(
    "",
    responses={**BAD_REQUEST},
    summary="List tracks with optional filter, sort and projection",
)
async def list_tracks(
    artist: Optional[str] = Query(default=None, description="Exact artist name"),
    title: Optional[str] = Query(default=None, description="Case-insensitive title substring"),
    sort_by: Optional[str] = Query(
        default=None,
        alias="sortBy",
        description="'title' (ascending) or 'date' (newest first)",
    ),
    fields: Optional[str] = Query(
        default=None,
        description="Comma-separated fields to return; _id is always included",
    ),
    service: TrackService = Depends(get_track_service),
) -> List[Dict[str, Any]]:
    return await service.list_tracks(artist=artist, title=title, sort_by=sort_by, fields=fields)


@router.get(
    "/{track_id}",
    response_model=TrackResponse,
    responses={**BAD_REQUEST, **NOT_FOUND},
    summary="Get a single track",
)
async def get_track(
    track_id: str,
    service: TrackService = Depends(get_track_service),
) -> TrackResponse:
    return await service.get_track(track_id)


@router.post(
    "",
    response_model=TrackResponse,
    status_code=201,
    responses={**BAD_REQUEST},
    summary="Create a track",
)
async def create_track(
    payload: TrackCreate,
    service: TrackService = Depends(get_track_service),
) -> TrackResponse:
    return await service.create_track(payload)


@router.put(
    "/{track_id}",
    response_model=TrackResponse,
    responses={**BAD_REQUEST, **NOT_FOUND},
    summary="Partially update a track",
)
async def update_track(
    track_id: str,
    payload: TrackUpdate,
    service: TrackService = Depends(get_track_service),
) -> TrackResponse:
    return await service.update_track(track_id, payload)


@router.delete(
    "/{track_id}",
    response_model=MessageResponse,
    responses={**BAD_REQUEST, **NOT_FOUND},
    summary="Delete a track",
)
async def delete_track(
    track_id: str,
    service: TrackService = Depends(get_track_service),
) -> MessageResponse:
    return await service.delete_track(track_id)
