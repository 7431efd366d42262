"""
Integration fixtures: the registration repositories against a real Postgres

Database lifecycle:
- First use in a session: create POSTGRES_DB if missing, reset the public
  schema and create the tables
- Every test: TRUNCATE all tables, then a fresh Database (engine) that is
  disposed on teardown since each test runs on its own event loop
- Postgres not reachable: the tests are skipped, not failed

`uow_factory` overrides the in-memory one from the parent conftest, so the
use cases run unchanged on SqlAlchemyUnitOfWork.
"""

from collections.abc import AsyncGenerator, Awaitable, Callable
from datetime import datetime, timedelta, timezone
from typing import Optional

import pytest
from sqlalchemy import exc as sa_exc, text
from sqlalchemy.ext.asyncio import create_async_engine

from eventia.platform.config.core_setting import Settings
from eventia.platform.database.orm_db_setting import Database
from eventia.platform.database.unit_of_work import SqlAlchemyUnitOfWork
from eventia.service.registration.domain.entity.event_entity import EventEntity
from eventia.service.registration.domain.entity.participant_entity import ParticipantEntity


_TABLES = ('attendances', 'participants', 'events')
_schema_ready = False
_unreachable: Optional[str] = None


async def _ensure_test_database(settings: Settings) -> None:
    admin_url = settings.DATABASE_URL_ASYNC.rsplit('/', 1)[0] + '/postgres'
    engine = create_async_engine(
        admin_url, isolation_level='AUTOCOMMIT', connect_args={'timeout': 5}
    )
    try:
        async with engine.connect() as conn:
            result = await conn.execute(
                text('SELECT 1 FROM pg_database WHERE datname = :name'),
                {'name': settings.POSTGRES_DB},
            )
            if result.scalar() is None:
                await conn.execute(text(f'CREATE DATABASE "{settings.POSTGRES_DB}"'))
    finally:
        await engine.dispose()


async def _setup_test_database(settings: Settings, database: Database) -> None:
    global _schema_ready, _unreachable
    if _schema_ready:
        return
    if _unreachable is None:
        try:
            await _ensure_test_database(settings)
        except (OSError, TimeoutError, sa_exc.DBAPIError) as e:
            _unreachable = f'Postgres not reachable at {settings.POSTGRES_SERVER}: {e}'
    if _unreachable is not None:
        pytest.skip(_unreachable)

    async with database.engine.begin() as conn:
        await conn.execute(text('DROP SCHEMA public CASCADE'))
        await conn.execute(text('CREATE SCHEMA public'))
    await database.create_db_and_tables()
    _schema_ready = True


async def _clean_all_tables(database: Database) -> None:
    async with database.engine.begin() as conn:
        await conn.execute(text(f'TRUNCATE {", ".join(_TABLES)} RESTART IDENTITY CASCADE'))


@pytest.fixture
async def database(settings: Settings) -> AsyncGenerator[Database, None]:
    db = Database(settings=settings)
    try:
        await _setup_test_database(settings, db)
        await _clean_all_tables(db)
        yield db
    finally:
        await db.dispose()


@pytest.fixture
def uow_factory(
    database: Database, settings: Settings
) -> Callable[..., SqlAlchemyUnitOfWork]:
    def _factory(*, lock_timeout_ms: Optional[int] = None) -> SqlAlchemyUnitOfWork:
        return SqlAlchemyUnitOfWork(
            database.session,
            lock_timeout_ms=lock_timeout_ms or settings.DB_LOCK_TIMEOUT_MS,
        )

    return _factory


@pytest.fixture
def create_event(uow_factory) -> Callable[..., Awaitable[EventEntity]]:
    async def _create(*, capacity: int = 10, name: str = 'Postgres Meetup') -> EventEntity:
        event = EventEntity.create(
            name=name,
            description='Locks and pizza',
            date=datetime.now(timezone.utc) + timedelta(days=7),
            location='Taipei',
            capacity=capacity,
        )
        async with uow_factory() as uow:
            await uow.event_repo.create(event=event)
            await uow.commit()
        return event

    return _create


@pytest.fixture
def create_participant(uow_factory) -> Callable[..., Awaitable[ParticipantEntity]]:
    counter = iter(range(1, 1_000_000))

    async def _create() -> ParticipantEntity:
        n = next(counter)
        participant = ParticipantEntity.create(
            name=f'Participant {n}', email=f'participant{n}@example.com'
        )
        async with uow_factory() as uow:
            await uow.participant_repo.create(participant=participant)
            await uow.commit()
        return participant

    return _create
