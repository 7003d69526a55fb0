"""
Tynda Backend — Track SQLAlchemy Model
=======================================

What:  ORM model representing the `tracks` table.
Who:   Used by TrackService for CRUD and by PlaylistService to resolve
       membership ids into full track records.

Table Design:
    - UUID primary key, exposed as `_id` at the API boundary
    - title/artist required, album optional (empty string when absent)
    - duration_seconds nullable: not every catalog entry has a known length
    - idx_tracks_artist: the list endpoint filters by exact artist
    - idx_tracks_created_at: `sortBy=date` lists newest first
"""

import uuid
from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime, Index, Integer, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from tynda.database import Base
from tynda.models import utcnow


class Track(Base):
    """A single catalog entry."""

    __tablename__ = "tracks"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )

    title: Mapped[str] = mapped_column(String(255), nullable=False)
    artist: Mapped[str] = mapped_column(String(255), nullable=False)
    album: Mapped[str] = mapped_column(String(255), nullable=False, default="")

    duration_seconds: Mapped[Optional[int]] = mapped_column(
        Integer,
        nullable=True,
        default=None,
    )

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
        Index("idx_tracks_artist", "artist"),
        Index("idx_tracks_created_at", created_at.desc()),
    )

    def __repr__(self) -> str:
        return f"<Track(id={self.id}, title='{self.title}', artist='{self.artist}')>"
