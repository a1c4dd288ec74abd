"""Identity service: registration, login sessions and token authentication."""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from complaint_tracker.auth.context import Identity
from complaint_tracker.config import Settings
from complaint_tracker.errors import Conflict, Unauthenticated, ValidationError
from complaint_tracker.models.identity import LoginSession, User, UserRole
from complaint_tracker.repositories.identity import SessionRepository, UserRepository
from complaint_tracker.services.security import (
    MAX_PASSWORD_BYTES,
    create_access_token,
    decode_token,
    hash_password,
    password_too_long,
    verify_password,
)

logger = logging.getLogger(__name__)


@dataclass
class LoginResult:
    token: str
    expires_at: datetime
    user: User


class IdentityService:
    def __init__(self, settings: Settings):
        self.settings = settings

    async def register(
        self,
        db: AsyncSession,
        *,
        username: str | None,
        email: str | None,
        password: str | None,
        full_name: str | None,
        role: UserRole = UserRole.USER,
    ) -> int:
        """Create a user and return its id."""
        if not username or not email or not password or not full_name:
            raise ValidationError("All fields are required")
        if len(password) < self.settings.min_password_length:
            raise ValidationError(
                f"Password must be at least {self.settings.min_password_length} characters"
            )
        if password_too_long(password):
            raise ValidationError(f"Password must be at most {MAX_PASSWORD_BYTES} bytes")

        user = User(
            username=username,
            email=email,
            password_hash=hash_password(password, rounds=self.settings.bcrypt_rounds),
            full_name=full_name,
            role=role,
        )
        try:
            await UserRepository.add(db, user)
            await db.commit()
        except IntegrityError:
            await db.rollback()
            # unique(users.username), unique(users.email)
            raise Conflict("Username or email already exists")

        logger.info("Registered user %s (id=%s, role=%s)", username, user.id, role.value)
        return user.id

    async def create_admin(
        self, db: AsyncSession, *, username: str, email: str, password: str, full_name: str
    ) -> int:
        """Create an administrator (for initial setup)."""
        return await self.register(
            db,
            username=username,
            email=email,
            password=password,
            full_name=full_name,
            role=UserRole.ADMIN,
        )

    async def login(
        self,
        db: AsyncSession,
        *,
        username: str | None,
        password: str | None,
        ip_address: str | None = None,
        user_agent: str | None = None,
    ) -> LoginResult:
        """Verify credentials, issue a token and record its session."""
        if not username or not password:
            raise ValidationError("Username and password required")

        user = await UserRepository.get_by_username(db, username)
        # Same error for unknown user and wrong password
        if (
            user is None
            or password_too_long(password)
            or not verify_password(password, user.password_hash)
        ):
            raise Unauthenticated("Invalid credentials")

        token, expires_at = create_access_token(
            {"id": user.id, "username": user.username, "role": user.role.value},
            self.settings,
        )
        await SessionRepository.add(db, LoginSession(
            user_id=user.id,
            token=token,
            ip_address=ip_address,
            user_agent=user_agent,
            expires_at=expires_at,
        ))
        await db.commit()

        logger.info("User %s logged in from %s", user.username, ip_address)
        return LoginResult(token=token, expires_at=expires_at, user=user)

    async def logout(self, db: AsyncSession, token: str) -> None:
        """Delete the session for ``token``. Unknown tokens are ignored."""
        deleted = await SessionRepository.delete_by_token(db, token)
        await db.commit()
        if deleted:
            logger.info("Session revoked")

    async def authenticate(
        self, db: AsyncSession, token: str, now: datetime | None = None
    ) -> Identity:
        """Resolve a bearer token to an identity.

        Two independent checks must both pass: the token's signature and
        expiry, and the existence of a live session row for it (which is how
        logout revokes a token that is still cryptographically valid).
        """
        payload = decode_token(token, self.settings)
        if payload is None:
            raise Unauthenticated("Invalid token")

        session = await SessionRepository.find_live(db, token, now=now or datetime.now(timezone.utc))
        if session is None:
            raise Unauthenticated("Invalid or expired token")

        try:
            return Identity(
                id=int(payload["id"]),
                username=payload["username"],
                role=UserRole(payload["role"]),
            )
        except (KeyError, TypeError, ValueError):
            raise Unauthenticated("Invalid token")
