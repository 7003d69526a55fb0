"""
Tynda Backend — Track Schemas
==============================

What:  Request bodies for track create/update and the track response shape.

Request bodies declare every field Optional: required-field checks
("Title and artist are required") happen in TrackService so the error
message and status match the rest of the API.
"""

import uuid
from datetime import datetime
from typing import Dict, Optional

from pydantic import Field

from tynda.schemas.common import APIModel

# camelCase projection name → attribute name; `_id` is always returned
TRACK_PROJECTABLE_FIELDS: Dict[str, str] = {
    "title": "title",
    "artist": "artist",
    "album": "album",
    "durationSeconds": "duration_seconds",
    "createdAt": "created_at",
    "updatedAt": "updated_at",
}

TRACK_SORT_OPTIONS = ("title", "date")


class TrackResponse(APIModel):
    """Full track record as returned by every track endpoint."""
    id: uuid.UUID = Field(alias="_id", description="Track identifier")
    title: str
    artist: str
    album: str = ""
    duration_seconds: Optional[int] = Field(default=None, description="Length in seconds")
    created_at: datetime
    updated_at: datetime


class TrackCreate(APIModel):
    title: Optional[str] = None
    artist: Optional[str] = None
    album: Optional[str] = None
    duration_seconds: Optional[int] = Field(default=None, ge=0)


class TrackUpdate(APIModel):
    """Partial update: only fields present in the body are applied."""
    title: Optional[str] = None
    artist: Optional[str] = None
    album: Optional[str] = None
    duration_seconds: Optional[int] = Field(default=None, ge=0)
