"""
Tynda Backend — Playlist Service
=================================

What:  Playlist CRUD, ownership enforcement and track-membership mutation.
Who:   Called by the /api/playlists route handlers with the caller's
       RequestContext.

Visibility rules:
    read (list/get)   admin → every playlist     | user → own playlists only
    write (all kinds) everyone → own playlists only

    A playlist the caller may not see is reported exactly like a missing
    one (NotFoundError → 404), so ids of other users' playlists can't be
    discovered.

Membership:
    `Playlist.tracks` is an ordered list of track id strings with set
    semantics. add_track appends only when the id is absent; remove_track
    filters it out and never fails for a non-member. Both lock the row
    for the read-modify-write: SELECT ... FOR UPDATE on PostgreSQL; on
    SQLite every transaction opens with BEGIN IMMEDIATE (see database.py).
"""

import logging
import uuid
from typing import List

from sqlalchemy import delete, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from tynda.auth import RequestContext
from tynda.exceptions import DatabaseError, NotFoundError, ValidationError
from tynda.models import utcnow
from tynda.models.playlist import PLAYLIST_NAME_MAX_LENGTH, Playlist
from tynda.models.track import Track
from tynda.models.user import User
from tynda.schemas.common import MessageResponse
from tynda.schemas.playlist import (
    PlaylistCreate,
    PlaylistDetail,
    PlaylistListItem,
    PlaylistOwner,
    PlaylistResponse,
    PlaylistTrackAdd,
    PlaylistTrackAddResponse,
    PlaylistUpdate,
)
from tynda.schemas.track import TrackResponse
from tynda.services.identifiers import parse_id
from tynda.services.track_service import TrackService

logger = logging.getLogger(__name__)


def _validate_name(name: str, empty_message: str) -> str:
    """Trim and check a playlist name; returns the stored form."""
    cleaned = (name or "").strip()
    if not cleaned:
        raise ValidationError(message=empty_message, field="name")
    if len(cleaned) > PLAYLIST_NAME_MAX_LENGTH:
        raise ValidationError(
            message=f"Name must be {PLAYLIST_NAME_MAX_LENGTH} characters or less",
            field="name",
        )
    return cleaned


class PlaylistService:
    """Business logic for playlists, scoped by the caller's RequestContext."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.tracks = TrackService(db)

    # ── Reads ─────────────────────────────────────────────────────────────

    async def list_playlists(self, ctx: RequestContext) -> List[PlaylistListItem]:
        """
        Newest first. Admins get every playlist with `owner {_id, username}`
        read-joined (owner omitted when the user no longer exists); everyone
        else gets only their own playlists.
        """
        try:
            if ctx.is_admin:
                result = await self.db.execute(
                    select(Playlist, User.id, User.username)
                    .outerjoin(User, User.id == Playlist.user_id)
                    .order_by(Playlist.created_at.desc())
                )
                items = []
                for playlist, owner_id, owner_username in result.all():
                    item = PlaylistListItem.model_validate(playlist)
                    if owner_id is not None:
                        item.owner = PlaylistOwner(id=owner_id, username=owner_username)
                    items.append(item)
                return items

            result = await self.db.execute(
                select(Playlist)
                .where(Playlist.user_id == ctx.user_id)
                .order_by(Playlist.created_at.desc())
            )
            return [PlaylistListItem.model_validate(p) for p in result.scalars().all()]
        except SQLAlchemyError as e:
            logger.error("Database error listing playlists: %s", str(e), exc_info=True)
            raise DatabaseError(context={"user_id": str(ctx.user_id)})

    async def get_playlist(self, ctx: RequestContext, playlist_id: str) -> PlaylistDetail:
        """
        Single playlist with `isOwner` and resolved `tracksData`.

        Raises:
            ValidationError: Malformed id
            NotFoundError: Missing, or owned by someone else and caller is not admin
        """
        pid = parse_id(playlist_id, "Invalid playlist ID")

        query = select(Playlist).where(Playlist.id == pid)
        if not ctx.is_admin:
            query = query.where(Playlist.user_id == ctx.user_id)

        try:
            result = await self.db.execute(query)
            playlist = result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error("Database error fetching playlist %s: %s", playlist_id, str(e))
            raise DatabaseError(context={"playlist_id": playlist_id})

        if playlist is None:
            raise NotFoundError(resource="Playlist", resource_id=playlist_id)

        tracks_data = await self._resolve_tracks(playlist.tracks or [])
        base = PlaylistResponse.model_validate(playlist)
        return PlaylistDetail(
            **base.model_dump(),
            is_owner=playlist.user_id == ctx.user_id,
            tracks_data=tracks_data,
        )

    async def _resolve_tracks(self, track_ids: List[str]) -> List[TrackResponse]:
        """Full records for `track_ids`, in playlist order; unknown ids skipped."""
        ids = []
        for raw in track_ids:
            try:
                ids.append(uuid.UUID(str(raw)))
            except ValueError:
                logger.warning("Skipping malformed track id in playlist: %r", raw)
        if not ids:
            return []

        try:
            result = await self.db.execute(select(Track).where(Track.id.in_(ids)))
            by_id = {track.id: track for track in result.scalars().all()}
        except SQLAlchemyError as e:
            logger.error("Database error resolving playlist tracks: %s", str(e))
            raise DatabaseError(context={"track_count": len(ids)})

        return [TrackResponse.model_validate(by_id[tid]) for tid in ids if tid in by_id]

    # ── Writes ────────────────────────────────────────────────────────────

    async def create_playlist(self, ctx: RequestContext, payload: PlaylistCreate) -> PlaylistResponse:
        name = _validate_name(payload.name, "Playlist name is required")

        now = utcnow()
        playlist = Playlist(
            name=name,
            description=(payload.description or "").strip(),
            cover_url=(payload.cover_url or "").strip(),
            user_id=ctx.user_id,
            tracks=[],
            created_at=now,
            updated_at=now,
        )
        try:
            self.db.add(playlist)
            await self.db.flush()
        except SQLAlchemyError as e:
            logger.error("Database error creating playlist: %s", str(e), exc_info=True)
            raise DatabaseError(context={"user_id": str(ctx.user_id)})

        logger.info("Playlist created: %s by user %s", playlist.id, ctx.user_id)
        return PlaylistResponse.model_validate(playlist)

    async def update_playlist(
        self, ctx: RequestContext, playlist_id: str, payload: PlaylistUpdate
    ) -> MessageResponse:
        """
        Partial update of name/description/coverUrl on an owned playlist.

        Raises:
            ValidationError: Malformed id, or supplied name empty/too long
            NotFoundError: Not found or not owned by the caller
        """
        pid = parse_id(playlist_id, "Invalid playlist ID")
        changes = payload.model_dump(exclude_unset=True)

        values = {"updated_at": utcnow()}
        if "name" in changes:
            values["name"] = _validate_name(changes["name"], "Playlist name cannot be empty")
        if "description" in changes:
            values["description"] = (changes["description"] or "").strip()
        if "cover_url" in changes:
            values["cover_url"] = (changes["cover_url"] or "").strip()

        try:
            result = await self.db.execute(
                update(Playlist)
                .where(Playlist.id == pid, Playlist.user_id == ctx.user_id)
                .values(**values)
            )
        except SQLAlchemyError as e:
            logger.error("Database error updating playlist %s: %s", playlist_id, str(e))
            raise DatabaseError(context={"playlist_id": playlist_id})

        if result.rowcount == 0:
            raise NotFoundError(resource="Playlist", resource_id=playlist_id)

        logger.info("Playlist updated: %s", pid)
        return MessageResponse(message="Playlist updated successfully")

    async def add_track(
        self, ctx: RequestContext, playlist_id: str, payload: PlaylistTrackAdd
    ) -> PlaylistTrackAddResponse:
        """
        Add a track to an owned playlist. Idempotent: re-adding a member only
        bumps `updatedAt`.

        The existence check and the membership update are two statements; a
        track deleted in between leaves a dangling id that reads skip.

        Raises:
            ValidationError: Malformed playlist id or trackId
            NotFoundError: Track missing, or playlist missing/not owned
        """
        pid = parse_id(playlist_id, "Invalid playlist ID")
        tid = parse_id(payload.track_id, "Valid track ID is required", field="trackId")

        track = await self.tracks.find_track(tid)
        if track is None:
            raise NotFoundError(resource="Track", resource_id=str(tid))

        playlist = await self._get_owned_for_update(ctx, pid, playlist_id)

        key = str(tid)
        current = list(playlist.tracks or [])
        if key not in current:
            playlist.tracks = current + [key]
        playlist.updated_at = utcnow()

        try:
            await self.db.flush()
        except SQLAlchemyError as e:
            logger.error("Database error adding track to playlist %s: %s", playlist_id, str(e))
            raise DatabaseError(context={"playlist_id": playlist_id, "track_id": key})

        logger.info("Track %s added to playlist %s (%d members)", key, pid, len(playlist.tracks))
        return PlaylistTrackAddResponse(
            message="Track added to playlist",
            track=TrackResponse.model_validate(track),
        )

    async def remove_track(
        self, ctx: RequestContext, playlist_id: str, track_id: str
    ) -> MessageResponse:
        """
        Remove a track id from an owned playlist. Removing a non-member is a
        successful no-op (besides the timestamp bump).
        """
        pid = parse_id(playlist_id, "Invalid ID format")
        tid = parse_id(track_id, "Invalid ID format", field="trackId")

        playlist = await self._get_owned_for_update(ctx, pid, playlist_id)

        key = str(tid)
        playlist.tracks = [member for member in (playlist.tracks or []) if member != key]
        playlist.updated_at = utcnow()

        try:
            await self.db.flush()
        except SQLAlchemyError as e:
            logger.error("Database error removing track from playlist %s: %s", playlist_id, str(e))
            raise DatabaseError(context={"playlist_id": playlist_id, "track_id": key})

        logger.info("Track %s removed from playlist %s", key, pid)
        return MessageResponse(message="Track removed from playlist")

    async def delete_playlist(self, ctx: RequestContext, playlist_id: str) -> MessageResponse:
        pid = parse_id(playlist_id, "Invalid playlist ID")
        try:
            result = await self.db.execute(
                delete(Playlist).where(Playlist.id == pid, Playlist.user_id == ctx.user_id)
            )
        except SQLAlchemyError as e:
            logger.error("Database error deleting playlist %s: %s", playlist_id, str(e))
            raise DatabaseError(context={"playlist_id": playlist_id})

        if result.rowcount == 0:
            raise NotFoundError(resource="Playlist", resource_id=playlist_id)

        logger.info("Playlist deleted: %s by user %s", pid, ctx.user_id)
        return MessageResponse(message="Playlist deleted successfully")

    async def _get_owned_for_update(
        self, ctx: RequestContext, pid: uuid.UUID, raw_id: str
    ) -> Playlist:
        """Lock and return a playlist owned by the caller, or raise NotFoundError."""
        try:
            result = await self.db.execute(
                select(Playlist)
                .where(Playlist.id == pid, Playlist.user_id == ctx.user_id)
                .with_for_update()
            )
            playlist = result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error("Database error locking playlist %s: %s", raw_id, str(e))
            raise DatabaseError(context={"playlist_id": raw_id})

        if playlist is None:
            raise NotFoundError(resource="Playlist", resource_id=raw_id)
        return playlist
