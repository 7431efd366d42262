"""
SQLAlchemy async engine and session management

`Database` is owned by the DI container. It creates its engine lazily on the
running event loop and recreates it if the loop changes (tests spin up a new
loop per module), which avoids "Future attached to a different loop" errors.
"""

import asyncio
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from eventia.platform.config.core_setting import Settings
from eventia.platform.logging.loguru_io import Logger


class Base(DeclarativeBase):
    pass


class Database:
    def __init__(self, *, settings: Settings) -> None:
        self._settings = settings
        self._engine: Optional[AsyncEngine] = None
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._session_maker: Optional[async_sessionmaker[AsyncSession]] = None

    @property
    def engine(self) -> AsyncEngine:
        try:
            current_loop = asyncio.get_running_loop()
        except RuntimeError:
            current_loop = None

        if self._engine is None or (current_loop is not None and self._loop is not current_loop):
            if self._engine is not None:
                Logger.base.warning('🔄 [DB] Event loop changed, recreating engine')
            Logger.base.info(f'🔗 [DB] Creating engine (pool_size={self._settings.DB_POOL_SIZE})')
            self._engine = self._create_engine()
            self._session_maker = None
            self._loop = current_loop
        return self._engine

    @property
    def session_maker(self) -> async_sessionmaker[AsyncSession]:
        engine = self.engine
        if self._session_maker is None:
            self._session_maker = async_sessionmaker(
                engine,
                class_=AsyncSession,
                expire_on_commit=False,
            )
        return self._session_maker

    def _create_engine(self) -> AsyncEngine:
        return create_async_engine(
            self._settings.DATABASE_URL_ASYNC,
            echo=False,
            future=True,
            pool_size=self._settings.DB_POOL_SIZE,
            max_overflow=self._settings.DB_POOL_MAX_OVERFLOW,
            pool_timeout=self._settings.DB_POOL_TIMEOUT,
            pool_recycle=self._settings.DB_POOL_RECYCLE,
            pool_pre_ping=self._settings.DB_POOL_PRE_PING,
        )

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """Standalone session for read paths. Rolls back on exception."""
        async with self.session_maker() as session:
            yield session

    async def create_db_and_tables(self) -> None:
        # Import models so they register on Base.metadata
        from eventia.service.registration.driven_adapter.model import (  # noqa: F401
            attendance_model,
            event_model,
            participant_model,
        )

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all, checkfirst=True)
        Logger.base.info('🗄️ [DB] Tables ready')

    async def dispose(self) -> None:
        if self._engine is not None:
            await self._engine.dispose()
            self._engine = None
            self._session_maker = None
            Logger.base.info('🔌 [DB] Engine disposed')
