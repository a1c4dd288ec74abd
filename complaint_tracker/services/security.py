"""Password hashing and bearer token signing."""

import secrets
from datetime import datetime, timedelta, timezone
from typing import Any

import bcrypt
import jwt

from complaint_tracker.config import Settings

# bcrypt only reads the first 72 bytes and rejects anything longer
MAX_PASSWORD_BYTES = 72


def hash_password(password: str, rounds: int = 12) -> str:
    """Hash password using bcrypt."""
    salt = bcrypt.gensalt(rounds=rounds)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def password_too_long(password: str) -> bool:
    return len(password.encode("utf-8")) > MAX_PASSWORD_BYTES


def verify_password(password: str, hashed: str) -> bool:
    """Verify password against bcrypt hash."""
    return bcrypt.checkpw(password.encode("utf-8"), hashed.encode("utf-8"))


def create_access_token(
    claims: dict[str, Any], settings: Settings, now: datetime | None = None
) -> tuple[str, datetime]:
    """Sign a token carrying ``claims``. Returns (token, expires_at).

    A random ``jti`` keeps tokens issued in the same second distinct, since
    each token is also the key of its session row.
    """
    now = now or datetime.now(timezone.utc)
    expires_at = now + timedelta(hours=settings.token_expire_hours)
    payload = dict(claims)
    payload.update({"iat": now, "exp": expires_at, "jti": secrets.token_hex(8)})
    token = jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)
    return token, expires_at


def decode_token(token: str, settings: Settings) -> dict[str, Any] | None:
    """Decode and validate signature and expiry. None when invalid."""
    try:
        return jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
    except jwt.ExpiredSignatureError:
        return None
    except jwt.InvalidTokenError:
        return None
