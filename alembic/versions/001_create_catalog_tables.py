"""Create users, tracks and playlists tables

Revision ID: 001
Revises: None
Create Date: 2025-01-10 00:00:00.000000+00:00

What:  Creates the three catalog tables and their lookup indexes.
How:   Portable column types (sa.Uuid, sa.JSON, timezone-aware DateTime) so
       the same migration runs on PostgreSQL and SQLite.

Rollback: downgrade() drops all three tables (destructive).
"""

from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

# revision identifiers
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("username", sa.String(50), nullable=False),
        # Lower-cased by AuthService before insert
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("password", sa.String(255), nullable=False, comment="bcrypt hash"),
        sa.Column(
            "role",
            sa.String(20),
            nullable=False,
            server_default=sa.text("'user'"),
            comment="'user' or 'admin'",
        ),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("username"),
        sa.UniqueConstraint("email"),
    )
    op.create_index("idx_users_created_at", "users", [sa.text("created_at DESC")])

    op.create_table(
        "tracks",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("artist", sa.String(255), nullable=False),
        sa.Column("album", sa.String(255), nullable=False, server_default=sa.text("''")),
        sa.Column("duration_seconds", sa.Integer(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    # Exact-artist filter on GET /api/tracks
    op.create_index("idx_tracks_artist", "tracks", ["artist"])
    # sortBy=date lists newest first
    op.create_index("idx_tracks_created_at", "tracks", [sa.text("created_at DESC")])

    op.create_table(
        "playlists",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("description", sa.Text(), nullable=False, server_default=sa.text("''")),
        sa.Column("cover_url", sa.Text(), nullable=False, server_default=sa.text("''")),
        # No foreign key: owner deletion leaves the playlist in place
        sa.Column("user_id", sa.Uuid(), nullable=False),
        sa.Column(
            "tracks",
            sa.JSON(),
            nullable=False,
            comment="Ordered, duplicate-free list of track id strings",
        ),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("idx_playlists_user_id", "playlists", ["user_id"])
    op.create_index("idx_playlists_created_at", "playlists", [sa.text("created_at DESC")])


def downgrade() -> None:
    op.drop_index("idx_playlists_created_at", table_name="playlists")
    op.drop_index("idx_playlists_user_id", table_name="playlists")
    op.drop_table("playlists")

    op.drop_index("idx_tracks_created_at", table_name="tracks")
    op.drop_index("idx_tracks_artist", table_name="tracks")
    op.drop_table("tracks")

    op.drop_index("idx_users_created_at", table_name="users")
    op.drop_table("users")
