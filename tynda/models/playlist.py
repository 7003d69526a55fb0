"""
Tynda Backend — Playlist SQLAlchemy Model
==========================================

What:  ORM model representing the `playlists` table.
Who:   Used by PlaylistService and the admin playlist listing.

Membership storage:
    `tracks` is a JSON array of track id strings embedded in the playlist
    row, in insertion order. It behaves as a set: PlaylistService never
    appends an id that is already present. There is no
    foreign key to `tracks`; a deleted track leaves a dangling id that
    read paths skip.

    JSON columns are not mutation-tracked, so writers always assign a new
    list (`playlist.tracks = [...]`) rather than appending in place.
"""

import uuid
from datetime import datetime
from typing import List

from sqlalchemy import JSON, DateTime, Index, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from tynda.database import Base
from tynda.models import utcnow

PLAYLIST_NAME_MAX_LENGTH = 100


class Playlist(Base):
    """A user-owned, ordered, duplicate-free collection of tracks."""

    __tablename__ = "playlists"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )

    name: Mapped[str] = mapped_column(String(PLAYLIST_NAME_MAX_LENGTH), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    cover_url: Mapped[str] = mapped_column(Text, nullable=False, default="")

    # No FK: deleting a user leaves their playlists in place (owner shows as absent)
    user_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False)

    tracks: Mapped[List[str]] = mapped_column(JSON, nullable=False, default=list)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )

    __table_args__ = (
        Index("idx_playlists_user_id", "user_id"),
        Index("idx_playlists_created_at", created_at.desc()),
    )

    def __repr__(self) -> str:
        return (
            f"<Playlist(id={self.id}, name='{self.name}', "
            f"user_id={self.user_id}, tracks={len(self.tracks or [])})>"
        )
