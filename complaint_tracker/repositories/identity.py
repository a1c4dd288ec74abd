"""Identity store access: users and login sessions."""

from datetime import datetime, timezone

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from complaint_tracker.models.identity import LoginSession, User


class UserRepository:
    @staticmethod
    async def add(db: AsyncSession, user: User) -> User:
        db.add(user)
        await db.flush()
        return user

    @staticmethod
    async def get_by_username(db: AsyncSession, username: str) -> User | None:
        result = await db.execute(select(User).where(User.username == username))
        return result.scalar_one_or_none()

    @staticmethod
    async def get(db: AsyncSession, user_id: int) -> User | None:
        result = await db.execute(select(User).where(User.id == user_id))
        return result.scalar_one_or_none()


class SessionRepository:
    @staticmethod
    async def add(db: AsyncSession, session: LoginSession) -> LoginSession:
        db.add(session)
        await db.flush()
        return session

    @staticmethod
    async def find_live(
        db: AsyncSession, token: str, now: datetime | None = None
    ) -> LoginSession | None:
        """Return the session for ``token`` unless it is missing or expired."""
        now = now or datetime.now(timezone.utc)
        result = await db.execute(
            select(LoginSession).where(
                LoginSession.token == token,
                LoginSession.expires_at > now,
            )
        )
        return result.scalar_one_or_none()

    @staticmethod
    async def delete_by_token(db: AsyncSession, token: str) -> int:
        result = await db.execute(delete(LoginSession).where(LoginSession.token == token))
        return result.rowcount or 0
