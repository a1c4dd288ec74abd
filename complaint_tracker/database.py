"""Async engines and session providers for the identity and complaint stores."""

import logging
from collections.abc import AsyncIterator

from sqlalchemy import MetaData
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from complaint_tracker.config import settings
from complaint_tracker.lifecycle import COMPLAINT_STORE, IDENTITY_STORE
from complaint_tracker.models.base import ComplaintBase, IdentityBase

logger = logging.getLogger(__name__)


class Store:
    """One database: lazily created engine, session factory and schema."""

    def __init__(self, name: str, url: str, metadata: MetaData):
        self.name = name
        self.url = url
        self.metadata = metadata
        self._engine: AsyncEngine | None = None
        self._session_factory: async_sessionmaker[AsyncSession] | None = None

    @property
    def engine(self) -> AsyncEngine:
        if self._engine is None:
            self._engine = create_async_engine(self.url, pool_pre_ping=True)
        return self._engine

    @property
    def session_factory(self) -> async_sessionmaker[AsyncSession]:
        if self._session_factory is None:
            self._session_factory = async_sessionmaker(
                self.engine, class_=AsyncSession, expire_on_commit=False
            )
        return self._session_factory

    async def init_schema(self) -> None:
        async with self.engine.begin() as conn:
            await conn.run_sync(self.metadata.create_all)
        logger.info("Schema initialized for store '%s'", self.name)

    async def dispose(self) -> None:
        if self._engine is None:
            return
        engine, self._engine, self._session_factory = self._engine, None, None
        await engine.dispose()
        logger.info("Connection pool closed for store '%s'", self.name)


identity_store = Store(IDENTITY_STORE, settings.identity_database_url, IdentityBase.metadata)
complaint_store = Store(COMPLAINT_STORE, settings.complaint_database_url, ComplaintBase.metadata)


async def get_identity_db() -> AsyncIterator[AsyncSession]:
    async with identity_store.session_factory() as session:
        yield session


async def get_complaint_db() -> AsyncIterator[AsyncSession]:
    async with complaint_store.session_factory() as session:
        yield session
