"""
Tynda Backend — User SQLAlchemy Model
======================================

What:  ORM model representing the `users` table.
Who:   Read by the auth gate (role resolution), AuthService (login,
       registration) and AdminService (listing, role changes, deletion).

Roles:
    'user'   default for every registered account
    'admin'  unlocks /api/admin/* and cross-user playlist reads

The password column only ever holds a bcrypt hash; API schemas never
expose it.
"""

import uuid
from datetime import datetime

from sqlalchemy import DateTime, Index, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from tynda.database import Base
from tynda.models import utcnow

ROLE_USER = "user"
ROLE_ADMIN = "admin"
ROLES = (ROLE_USER, ROLE_ADMIN)


class User(Base):
    """An account that can own playlists and, as admin, manage others."""

    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )

    username: Mapped[str] = mapped_column(String(50), nullable=False, unique=True)

    # Stored lower-cased; uniqueness is case-insensitive in practice
    email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)

    password: Mapped[str] = mapped_column(String(255), nullable=False)

    role: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=ROLE_USER,
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
        Index("idx_users_created_at", created_at.desc()),
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id}, username='{self.username}', role='{self.role}')>"
