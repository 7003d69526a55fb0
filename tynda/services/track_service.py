"""
Tynda Backend — Track Catalog Service
======================================

What:  CRUD plus filter/sort/projection over the `tracks` table.
Who:   Called by the /api/tracks route handlers; PlaylistService reuses
       `find_track` to verify a track exists before adding it.

List query composition:
    artist  → WHERE artist = :artist              (exact)
    title   → WHERE title ILIKE '%' || :title || '%'  (escaped substring)
    sortBy  → title: ORDER BY title ASC | date: ORDER BY created_at DESC
    fields  → post-query projection; `_id` always kept
    Every combination is allowed; none given ⇒ all fields, store order.
"""

import logging
import uuid
from typing import Any, Dict, List, Optional, Set

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from tynda.exceptions import DatabaseError, NotFoundError, ValidationError
from tynda.models import utcnow
from tynda.models.track import Track
from tynda.schemas.common import MessageResponse
from tynda.schemas.track import (
    TRACK_PROJECTABLE_FIELDS,
    TRACK_SORT_OPTIONS,
    TrackCreate,
    TrackResponse,
    TrackUpdate,
)
from tynda.services.identifiers import parse_id

logger = logging.getLogger(__name__)


def parse_projection(fields: Optional[str]) -> Optional[Set[str]]:
    """
    Turn `fields=title,artist` into {"title", "artist"}.

    Returns None when no projection was requested. Unknown names are
    dropped, so a projection of only unknown names returns just `_id`.
    """
    if fields is None:
        return None
    requested = {name.strip() for name in fields.split(",") if name.strip()}
    if not requested:
        return None
    return {name for name in requested if name in TRACK_PROJECTABLE_FIELDS}


class TrackService:
    """
    Business logic for catalog tracks.

    The store handle (an AsyncSession) is injected at construction; one
    service instance serves one request.
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_tracks(
        self,
        artist: Optional[str] = None,
        title: Optional[str] = None,
        sort_by: Optional[str] = None,
        fields: Optional[str] = None,
    ) -> List[Dict[str, Any]]:
        """
        List tracks with optional filter, sort and projection.

        Returns plain dicts keyed by wire names (`_id`, `durationSeconds`, ...)
        because a projection yields records of varying shape.

        Raises:
            ValidationError: `sort_by` is not 'title' or 'date'
            DatabaseError: Query execution failed
        """
        if sort_by is not None and sort_by not in TRACK_SORT_OPTIONS:
            raise ValidationError(
                message=f"Invalid sortBy '{sort_by}'. Must be one of: title, date",
                field="sortBy",
            )
        projection = parse_projection(fields)

        query = select(Track)
        if artist:
            query = query.where(Track.artist == artist)
        if title:
            query = query.where(Track.title.icontains(title, autoescape=True))

        if sort_by == "title":
            query = query.order_by(Track.title.asc())
        elif sort_by == "date":
            query = query.order_by(Track.created_at.desc())

        try:
            result = await self.db.execute(query)
            tracks = list(result.scalars().all())
        except SQLAlchemyError as e:
            logger.error("Database error listing tracks: %s", str(e), exc_info=True)
            raise DatabaseError(context={"error_type": type(e).__name__})

        records = [
            TrackResponse.model_validate(track).model_dump(by_alias=True, mode="json")
            for track in tracks
        ]
        if projection is not None:
            keep = projection | {"_id"}
            records = [{k: v for k, v in record.items() if k in keep} for record in records]
        return records

    async def find_track(self, track_id: uuid.UUID) -> Optional[Track]:
        """Fetch a track by parsed id; None when absent."""
        try:
            result = await self.db.execute(select(Track).where(Track.id == track_id))
            return result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error("Database error fetching track %s: %s", track_id, str(e))
            raise DatabaseError(context={"track_id": str(track_id)})

    async def get_track(self, track_id: str) -> TrackResponse:
        """
        Raises:
            ValidationError: Malformed id (→ 400)
            NotFoundError: No such track (→ 404)
        """
        tid = parse_id(track_id, "Invalid track ID")
        track = await self.find_track(tid)
        if track is None:
            raise NotFoundError(resource="Track", resource_id=track_id)
        return TrackResponse.model_validate(track)

    async def create_track(self, payload: TrackCreate) -> TrackResponse:
        """
        Create a catalog entry. Title and artist are required and trimmed;
        album defaults to an empty string.
        """
        title = (payload.title or "").strip()
        artist = (payload.artist or "").strip()
        if not title or not artist:
            raise ValidationError(message="Title and artist are required")

        now = utcnow()
        track = Track(
            title=title,
            artist=artist,
            album=(payload.album or "").strip(),
            duration_seconds=payload.duration_seconds,
            created_at=now,
            updated_at=now,
        )
        try:
            self.db.add(track)
            await self.db.flush()
        except SQLAlchemyError as e:
            logger.error("Database error creating track: %s", str(e), exc_info=True)
            raise DatabaseError(context={"error_type": type(e).__name__})

        logger.info("Track created: %s (%s by %s)", track.id, track.title, track.artist)
        return TrackResponse.model_validate(track)

    async def update_track(self, track_id: str, payload: TrackUpdate) -> TrackResponse:
        """
        Partial update: only fields present in the request body change.

        Raises:
            ValidationError: Malformed id, or title/artist supplied empty
            NotFoundError: No such track
        """
        tid = parse_id(track_id, "Invalid track ID")
        changes = payload.model_dump(exclude_unset=True)

        for required in ("title", "artist"):
            if required in changes:
                value = (changes[required] or "").strip()
                if not value:
                    raise ValidationError(
                        message=f"{required.capitalize()} cannot be empty",
                        field=required,
                    )
                changes[required] = value
        if "album" in changes:
            changes["album"] = (changes["album"] or "").strip()

        track = await self.find_track(tid)
        if track is None:
            raise NotFoundError(resource="Track", resource_id=track_id)

        for attr, value in changes.items():
            setattr(track, attr, value)
        track.updated_at = utcnow()

        try:
            await self.db.flush()
        except SQLAlchemyError as e:
            logger.error("Database error updating track %s: %s", track_id, str(e))
            raise DatabaseError(context={"track_id": track_id})

        logger.info("Track updated: %s (%s)", tid, ", ".join(sorted(changes)) or "no fields")
        return TrackResponse.model_validate(track)

    async def delete_track(self, track_id: str) -> MessageResponse:
        """
        Permanently remove a track. Playlists that reference it keep the id;
        read paths skip ids that no longer resolve.
        """
        tid = parse_id(track_id, "Invalid track ID")
        try:
            result = await self.db.execute(delete(Track).where(Track.id == tid))
        except SQLAlchemyError as e:
            logger.error("Database error deleting track %s: %s", track_id, str(e))
            raise DatabaseError(context={"track_id": track_id})

        if result.rowcount == 0:
            raise NotFoundError(resource="Track", resource_id=track_id)

        logger.info("Track deleted: %s", tid)
        return MessageResponse(message="Track deleted successfully")
