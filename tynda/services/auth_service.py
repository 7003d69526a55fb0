"""
Tynda Backend — Account Service
================================

What:  Registration, credential checks and super-admin bootstrap.
Who:   /api/auth/* route handlers (which then bind the session) and the
       application lifespan hook (bootstrap).

Registration rules:
    username  3-50 characters after trimming, unique
    email     required (syntax checked by the request schema), stored
              lower-cased, unique, and not the reserved super-admin address
    password  6+ characters, at most 72 bytes (bcrypt limit)
"""

import logging
import uuid
from typing import Optional

from sqlalchemy import or_, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from tynda.exceptions import AuthenticationError, DatabaseError, ValidationError
from tynda.models import utcnow
from tynda.models.user import ROLE_ADMIN, ROLE_USER, User
from tynda.security import MAX_PASSWORD_BYTES, hash_password, verify_password
from tynda.schemas.user import LoginRequest, RegisterRequest

logger = logging.getLogger(__name__)

USERNAME_MIN_LENGTH = 3
USERNAME_MAX_LENGTH = 50
PASSWORD_MIN_LENGTH = 6


class AuthService:
    def __init__(self, db: AsyncSession, super_admin_email: str, bcrypt_rounds: int = 12):
        self.db = db
        self.super_admin_email = super_admin_email.strip().lower()
        self.bcrypt_rounds = bcrypt_rounds

    async def register(self, payload: RegisterRequest) -> User:
        """
        Create a regular (`user` role) account.

        Raises:
            ValidationError: Invalid fields, reserved email, or email/username taken
        """
        username = (payload.username or "").strip()
        email = (payload.email or "").strip().lower()
        password = payload.password or ""

        if not (USERNAME_MIN_LENGTH <= len(username) <= USERNAME_MAX_LENGTH):
            raise ValidationError(
                message=f"Username must be {USERNAME_MIN_LENGTH}-{USERNAME_MAX_LENGTH} characters",
                field="username",
            )
        if not email:
            raise ValidationError(message="A valid email is required", field="email")
        if len(password) < PASSWORD_MIN_LENGTH:
            raise ValidationError(
                message=f"Password must be at least {PASSWORD_MIN_LENGTH} characters",
                field="password",
            )
        if len(password.encode("utf-8")) > MAX_PASSWORD_BYTES:
            raise ValidationError(
                message=f"Password must be at most {MAX_PASSWORD_BYTES} bytes",
                field="password",
            )
        if email == self.super_admin_email:
            raise ValidationError(message="This email address is reserved", field="email")

        try:
            result = await self.db.execute(
                select(User).where(or_(User.email == email, User.username == username))
            )
            existing = result.scalars().first()
        except SQLAlchemyError as e:
            logger.error("Database error checking registration: %s", str(e))
            raise DatabaseError(context={"email": email})

        if existing is not None:
            if existing.email == email:
                raise ValidationError(message="Email is already registered", field="email")
            raise ValidationError(message="Username is already taken", field="username")

        now = utcnow()
        user = User(
            username=username,
            email=email,
            password=hash_password(password, self.bcrypt_rounds),
            role=ROLE_USER,
            created_at=now,
            updated_at=now,
        )
        try:
            self.db.add(user)
            await self.db.flush()
        except IntegrityError:
            # Lost a race with a concurrent registration for the same email/username
            raise ValidationError(message="Email or username is already registered")
        except SQLAlchemyError as e:
            logger.error("Database error registering %s: %s", email, str(e), exc_info=True)
            raise DatabaseError(context={"email": email})

        logger.info("User registered: %s (%s)", user.id, username)
        return user

    async def authenticate(self, payload: LoginRequest) -> User:
        """
        Return the user whose email/password match.

        Raises:
            AuthenticationError: Unknown email or wrong password (same message for both)
        """
        email = (payload.email or "").strip().lower()
        password = payload.password or ""
        if not email or not password:
            raise ValidationError(message="Email and password are required")

        user = await self.find_by_email(email)
        if user is None or not verify_password(password, user.password):
            logger.info("Failed login for %s", email)
            raise AuthenticationError(message="Invalid email or password")

        logger.info("User logged in: %s", user.id)
        return user

    async def get_user(self, user_id: uuid.UUID) -> Optional[User]:
        try:
            result = await self.db.execute(select(User).where(User.id == user_id))
            return result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error("Database error fetching user %s: %s", user_id, str(e))
            raise DatabaseError(context={"user_id": str(user_id)})

    async def find_by_email(self, email: str) -> Optional[User]:
        try:
            result = await self.db.execute(select(User).where(User.email == email.lower()))
            return result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error("Database error fetching user by email: %s", str(e))
            raise DatabaseError(context={"email": email})

    async def ensure_super_admin(self, password: str, username: str = "admin") -> User:
        """
        Make sure the super admin account exists and holds the admin role.

        Creates it with `password` when missing; an existing account keeps
        its password and is only promoted if its role was changed.
        """
        user = await self.find_by_email(self.super_admin_email)
        now = utcnow()

        if user is None:
            user = User(
                username=username,
                email=self.super_admin_email,
                password=hash_password(password, self.bcrypt_rounds),
                role=ROLE_ADMIN,
                created_at=now,
                updated_at=now,
            )
            self.db.add(user)
            logger.info("Creating super admin account %s", self.super_admin_email)
        elif user.role != ROLE_ADMIN:
            user.role = ROLE_ADMIN
            user.updated_at = now
            logger.warning("Super admin %s had role restored to admin", self.super_admin_email)

        try:
            await self.db.flush()
        except SQLAlchemyError as e:
            logger.error("Database error ensuring super admin: %s", str(e), exc_info=True)
            raise DatabaseError(context={"email": self.super_admin_email})
        return user
