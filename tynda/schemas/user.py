"""
Tynda Backend — User, Auth & Admin Schemas
===========================================

UserResponse is the only user shape that leaves the API; it has no
password field, so hashes cannot leak through any endpoint.
"""

import uuid
from datetime import datetime
from typing import Optional

from pydantic import EmailStr, Field

from tynda.schemas.common import APIModel


class UserResponse(APIModel):
    id: uuid.UUID = Field(alias="_id", description="User identifier")
    username: str
    email: str
    role: str = Field(description="'user' or 'admin'")
    created_at: datetime
    updated_at: datetime


class RegisterRequest(APIModel):
    username: Optional[str] = None
    # Syntax checked by email-validator; malformed addresses are a 400
    email: Optional[EmailStr] = None
    password: Optional[str] = None


class LoginRequest(APIModel):
    email: Optional[str] = None
    password: Optional[str] = None


class RoleUpdateRequest(APIModel):
    role: Optional[str] = None


class StatsResponse(APIModel):
    users: int = Field(description="Total registered users")
    tracks: int = Field(description="Total catalog tracks")
    playlists: int = Field(description="Total playlists across all users")
