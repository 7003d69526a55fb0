"""
Tynda Backend — ORM Models
===========================

Models:
    - user.py:     `users` table (credentials, role)
    - track.py:    `tracks` table (catalog entries)
    - playlist.py: `playlists` table (owner + embedded track id list)
"""

from datetime import datetime, timezone


def utcnow() -> datetime:
    """Timezone-aware UTC now; every timestamp column defaults to this."""
    return datetime.now(timezone.utc)
