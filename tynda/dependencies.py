"""
FastAPI dependency providers for the service layer.

Each provider builds a service around the request's AsyncSession (shared
with the auth gate through FastAPI's per-request dependency cache) and
the settings attached to the running app.
"""

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from tynda.config import Settings, settings as default_settings
from tynda.database import get_db_session
from tynda.services.admin_service import AdminService
from tynda.services.auth_service import AuthService
from tynda.services.playlist_service import PlaylistService
from tynda.services.track_service import TrackService


def get_settings(request: Request) -> Settings:
    return getattr(request.app.state, "settings", default_settings)


def get_track_service(db: AsyncSession = Depends(get_db_session)) -> TrackService:
    return TrackService(db)


def get_playlist_service(db: AsyncSession = Depends(get_db_session)) -> PlaylistService:
    return PlaylistService(db)


def get_admin_service(
    db: AsyncSession = Depends(get_db_session),
    app_settings: Settings = Depends(get_settings),
) -> AdminService:
    return AdminService(db, super_admin_email=app_settings.super_admin_email)


def get_auth_service(
    db: AsyncSession = Depends(get_db_session),
    app_settings: Settings = Depends(get_settings),
) -> AuthService:
    return AuthService(
        db,
        super_admin_email=app_settings.super_admin_email,
        bcrypt_rounds=app_settings.bcrypt_rounds,
    )
