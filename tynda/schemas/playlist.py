"""
Tynda Backend — Playlist Schemas
=================================

What:  Request bodies for playlist mutations and the three response shapes:
       - PlaylistResponse:  the stored record (create)
       - PlaylistListItem:  record + optional read-joined `owner` (listings)
       - PlaylistDetail:    record + `isOwner` + resolved `tracksData` (get-one)
"""

import uuid
from datetime import datetime
from typing import List, Optional

from pydantic import Field

from tynda.schemas.common import APIModel
from tynda.schemas.track import TrackResponse


class PlaylistOwner(APIModel):
    """
    Owner fields attached by the admin read-join.

    Which fields are filled depends on the listing: the user-facing admin
    view carries `_id` + `username`, the /api/admin view `username` + `email`.
    Unset fields are dropped from the response.
    """
    id: Optional[uuid.UUID] = Field(default=None, alias="_id")
    username: Optional[str] = None
    email: Optional[str] = None


class PlaylistResponse(APIModel):
    id: uuid.UUID = Field(alias="_id", description="Playlist identifier")
    name: str
    description: str = ""
    cover_url: str = ""
    user_id: uuid.UUID = Field(description="Owner's user id")
    tracks: List[str] = Field(default_factory=list, description="Member track ids, deduplicated")
    created_at: datetime
    updated_at: datetime


class PlaylistListItem(PlaylistResponse):
    owner: Optional[PlaylistOwner] = None


class PlaylistDetail(PlaylistResponse):
    is_owner: bool = Field(description="Whether the caller owns this playlist")
    tracks_data: List[TrackResponse] = Field(
        default_factory=list,
        description="Full track records for every member id, in playlist order",
    )


class PlaylistCreate(APIModel):
    name: Optional[str] = None
    description: Optional[str] = None
    cover_url: Optional[str] = None


class PlaylistUpdate(APIModel):
    """Partial update: only fields present in the body are applied."""
    name: Optional[str] = None
    description: Optional[str] = None
    cover_url: Optional[str] = None


class PlaylistTrackAdd(APIModel):
    track_id: Optional[str] = None


class PlaylistTrackAddResponse(APIModel):
    message: str
    track: TrackResponse
