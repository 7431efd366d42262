"""
In-memory stand-ins for the persistence layer

FakeStore holds the three tables. FakeUnitOfWork models the Postgres
semantics the registration flow relies on:
- event lock_by_id takes a per-event asyncio.Lock held until commit/rollback
  (SELECT ... FOR UPDATE)
- participant lock_by_id takes a per-participant row lock, exclusive or
  key-share, and reads the row only once the lock is granted
- writes are journaled and undone on rollback
- the available_spots range check raises like the table CHECK constraint
Every repo call yields to the event loop so concurrent tests interleave.
"""

import asyncio
from collections import defaultdict
from collections.abc import AsyncGenerator, Callable
from datetime import date, datetime, timedelta, timezone
from typing import Any, List, Optional
from uuid import UUID

import attrs
import pytest

from eventia.platform.database.unit_of_work import AbstractUnitOfWork
from eventia.service.registration.app.cache_aside import CacheAside
from eventia.service.registration.app.interface.i_attendance_repo import IAttendanceRepo
from eventia.service.registration.app.interface.i_event_repo import IEventRepo
from eventia.service.registration.app.interface.i_participant_repo import IParticipantRepo
from eventia.service.registration.domain.entity.attendance_entity import AttendanceEntity
from eventia.service.registration.domain.entity.event_entity import EventEntity
from eventia.service.registration.domain.entity.participant_entity import ParticipantEntity
from eventia.service.registration.domain.enum.attendance_status import AttendanceStatus
from eventia.service.registration.driven_adapter.cache.in_memory_cache_handler_impl import (
    InMemoryCacheHandlerImpl,
)


_MISSING = object()


class CheckConstraintViolation(Exception):
    pass


class FakeRowLock:
    """FOR UPDATE excludes everyone; FOR KEY SHARE only excludes FOR UPDATE."""

    def __init__(self) -> None:
        self._cond = asyncio.Condition()
        self._shared = 0
        self._exclusive = False

    async def acquire(self, *, shared: bool) -> None:
        async with self._cond:
            if shared:
                await self._cond.wait_for(lambda: not self._exclusive)
                self._shared += 1
            else:
                await self._cond.wait_for(lambda: not self._exclusive and self._shared == 0)
                self._exclusive = True

    async def release(self, *, shared: bool) -> None:
        async with self._cond:
            if shared:
                self._shared -= 1
            else:
                self._exclusive = False
            self._cond.notify_all()


class FakeStore:
    def __init__(self) -> None:
        self.events: dict[UUID, EventEntity] = {}
        self.participants: dict[UUID, ParticipantEntity] = {}
        self.attendances: dict[UUID, AttendanceEntity] = {}
        self.locks: defaultdict[UUID, asyncio.Lock] = defaultdict(asyncio.Lock)
        self.participant_locks: defaultdict[UUID, FakeRowLock] = defaultdict(FakeRowLock)

    def write(self, table: dict, key: UUID, value: Any, journal: Optional[list]) -> None:
        if journal is not None:
            journal.append((table, key, table.get(key, _MISSING)))
        if value is _MISSING:
            table.pop(key, None)
        else:
            table[key] = value

    def active_count(self, event_id: UUID) -> int:
        return sum(
            1 for a in self.attendances.values() if a.event_id == event_id and a.is_active
        )


class _FakeRepo:
    def __init__(self, store: FakeStore, uow: Optional['FakeUnitOfWork'] = None) -> None:
        self.store = store
        self.uow = uow

    @property
    def journal(self) -> Optional[list]:
        return self.uow.journal if self.uow else None


class FakeEventRepo(_FakeRepo, IEventRepo):
    async def create(self, *, event: EventEntity) -> EventEntity:
        await asyncio.sleep(0)
        self.store.write(self.store.events, event.id, event, self.journal)
        return event

    async def get_by_id(self, *, event_id: UUID) -> EventEntity | None:
        await asyncio.sleep(0)
        return self.store.events.get(event_id)

    async def lock_by_id(self, *, event_id: UUID) -> EventEntity | None:
        assert self.uow is not None, 'row locks need a transaction'
        await self.uow.acquire(self.store.locks[event_id])
        return self.store.events.get(event_id)

    async def list_all(self) -> List[EventEntity]:
        await asyncio.sleep(0)
        return sorted(self.store.events.values(), key=lambda e: e.date, reverse=True)

    async def list_available(self) -> List[EventEntity]:
        await asyncio.sleep(0)
        now = datetime.now(timezone.utc)
        return sorted(
            (e for e in self.store.events.values() if e.available_spots > 0 and e.date > now),
            key=lambda e: e.date,
        )

    async def list_by_date(self, *, day: date) -> List[EventEntity]:
        await asyncio.sleep(0)
        return sorted(
            (e for e in self.store.events.values() if e.date.date() == day),
            key=lambda e: e.date,
        )

    async def update(self, *, event: EventEntity) -> EventEntity:
        await asyncio.sleep(0)
        self.store.write(self.store.events, event.id, event, self.journal)
        return event

    async def delete(self, *, event_id: UUID) -> bool:
        await asyncio.sleep(0)
        if event_id not in self.store.events:
            return False
        self.store.write(self.store.events, event_id, _MISSING, self.journal)
        for attendance in list(self.store.attendances.values()):
            if attendance.event_id == event_id:
                self.store.write(self.store.attendances, attendance.id, _MISSING, self.journal)
        return True

    async def adjust_available_spots(self, *, event_id: UUID, delta: int) -> None:
        await asyncio.sleep(0)
        event = self.store.events[event_id]
        spots = event.available_spots + delta
        if not 0 <= spots <= event.capacity:
            raise CheckConstraintViolation(f'available_spots={spots} capacity={event.capacity}')
        self.store.write(
            self.store.events,
            event_id,
            attrs.evolve(event, available_spots=spots),
            self.journal,
        )


class FakeParticipantRepo(_FakeRepo, IParticipantRepo):
    async def create(self, *, participant: ParticipantEntity) -> ParticipantEntity:
        await asyncio.sleep(0)
        self.store.write(self.store.participants, participant.id, participant, self.journal)
        return participant

    async def get_by_id(self, *, participant_id: UUID) -> ParticipantEntity | None:
        await asyncio.sleep(0)
        return self.store.participants.get(participant_id)

    async def lock_by_id(
        self, *, participant_id: UUID, key_share: bool = False
    ) -> ParticipantEntity | None:
        assert self.uow is not None, 'row locks need a transaction'
        await self.uow.acquire_row(self.store.participant_locks[participant_id], shared=key_share)
        return self.store.participants.get(participant_id)

    async def get_by_email(self, *, email: str) -> ParticipantEntity | None:
        await asyncio.sleep(0)
        email = email.strip().lower()
        return next((p for p in self.store.participants.values() if p.email == email), None)

    async def list_all(self) -> List[ParticipantEntity]:
        await asyncio.sleep(0)
        return list(self.store.participants.values())

    async def update(self, *, participant: ParticipantEntity) -> ParticipantEntity:
        await asyncio.sleep(0)
        self.store.write(self.store.participants, participant.id, participant, self.journal)
        return participant

    async def delete(self, *, participant_id: UUID) -> bool:
        await asyncio.sleep(0)
        if participant_id not in self.store.participants:
            return False
        self.store.write(self.store.participants, participant_id, _MISSING, self.journal)
        for attendance in list(self.store.attendances.values()):
            if attendance.participant_id == participant_id:
                self.store.write(self.store.attendances, attendance.id, _MISSING, self.journal)
        return True


class FakeAttendanceRepo(_FakeRepo, IAttendanceRepo):
    async def create(self, *, attendance: AttendanceEntity) -> AttendanceEntity:
        await asyncio.sleep(0)
        duplicate = await self.find_by_event_and_participant(
            event_id=attendance.event_id, participant_id=attendance.participant_id
        )
        assert duplicate is None, 'UNIQUE(event_id, participant_id) violated'
        self.store.write(self.store.attendances, attendance.id, attendance, self.journal)
        return attendance

    async def get_by_id(self, *, attendance_id: UUID) -> AttendanceEntity | None:
        await asyncio.sleep(0)
        return self.store.attendances.get(attendance_id)

    async def find_by_event_and_participant(
        self, *, event_id: UUID, participant_id: UUID
    ) -> AttendanceEntity | None:
        await asyncio.sleep(0)
        return next(
            (
                a
                for a in self.store.attendances.values()
                if a.event_id == event_id and a.participant_id == participant_id
            ),
            None,
        )

    async def list_by_event(self, *, event_id: UUID) -> List[AttendanceEntity]:
        await asyncio.sleep(0)
        return [a for a in self.store.attendances.values() if a.event_id == event_id]

    async def list_by_participant(self, *, participant_id: UUID) -> List[AttendanceEntity]:
        await asyncio.sleep(0)
        return [a for a in self.store.attendances.values() if a.participant_id == participant_id]

    async def update_status(
        self,
        *,
        attendance_id: UUID,
        status: AttendanceStatus,
        registration_date: Optional[datetime] = None,
    ) -> AttendanceEntity:
        await asyncio.sleep(0)
        current = self.store.attendances[attendance_id]
        changes: dict[str, Any] = {'status': status, 'updated_at': datetime.now(timezone.utc)}
        if registration_date is not None:
            changes['registration_date'] = registration_date
        updated = attrs.evolve(current, **changes)
        self.store.write(self.store.attendances, attendance_id, updated, self.journal)
        return updated

    async def count_active(self, *, event_id: UUID) -> int:
        await asyncio.sleep(0)
        return self.store.active_count(event_id)


class FakeUnitOfWork(AbstractUnitOfWork):
    def __init__(self, store: FakeStore) -> None:
        self.store = store
        self.journal: list = []
        self._held: list[asyncio.Lock] = []
        self._held_rows: list[tuple[FakeRowLock, bool]] = []
        self.committed = False
        self.event_repo = FakeEventRepo(store, self)
        self.participant_repo = FakeParticipantRepo(store, self)
        self.attendance_repo = FakeAttendanceRepo(store, self)

    async def acquire(self, lock: asyncio.Lock) -> None:
        if lock in self._held:
            return
        await lock.acquire()
        self._held.append(lock)

    async def acquire_row(self, lock: FakeRowLock, *, shared: bool) -> None:
        if any(held is lock for held, _ in self._held_rows):
            return
        await lock.acquire(shared=shared)
        self._held_rows.append((lock, shared))

    async def _release(self) -> None:
        while self._held:
            self._held.pop().release()
        while self._held_rows:
            lock, shared = self._held_rows.pop()
            await lock.release(shared=shared)

    async def _commit(self) -> None:
        self.journal.clear()
        self.committed = True
        await self._release()

    async def rollback(self) -> None:
        for table, key, previous in reversed(self.journal):
            if previous is _MISSING:
                table.pop(key, None)
            else:
                table[key] = previous
        self.journal.clear()
        await self._release()


@pytest.fixture
def store() -> FakeStore:
    return FakeStore()


@pytest.fixture
def uow_factory(store: FakeStore) -> Callable[[], FakeUnitOfWork]:
    return lambda: FakeUnitOfWork(store)


@pytest.fixture
def event_repo(store: FakeStore) -> FakeEventRepo:
    return FakeEventRepo(store)


@pytest.fixture
def participant_repo(store: FakeStore) -> FakeParticipantRepo:
    return FakeParticipantRepo(store)


@pytest.fixture
def attendance_repo(store: FakeStore) -> FakeAttendanceRepo:
    return FakeAttendanceRepo(store)


@pytest.fixture
def cache_handler() -> InMemoryCacheHandlerImpl:
    return InMemoryCacheHandlerImpl()


@pytest.fixture
async def cache_aside(cache_handler: InMemoryCacheHandlerImpl) -> AsyncGenerator[CacheAside, None]:
    aside = CacheAside(cache=cache_handler, read_timeout=0.2)
    yield aside
    await aside.drain()


@pytest.fixture
def seed_event(store: FakeStore) -> Callable[..., EventEntity]:
    def _seed(*, capacity: int = 10, days_ahead: int = 7, name: str = 'Python Meetup') -> EventEntity:
        event = EventEntity.create(
            name=name,
            description='Talks and pizza',
            date=datetime.now(timezone.utc) + timedelta(days=days_ahead),
            location='Taipei',
            capacity=capacity,
        )
        store.events[event.id] = event
        return event

    return _seed


@pytest.fixture
def seed_participant(store: FakeStore) -> Callable[..., ParticipantEntity]:
    counter = iter(range(1, 1_000_000))

    def _seed(*, name: Optional[str] = None) -> ParticipantEntity:
        n = next(counter)
        participant = ParticipantEntity.create(
            name=name or f'Participant {n}',
            email=f'participant{n}@example.com',
            phone='+886 912 345 678',
        )
        store.participants[participant.id] = participant
        return participant

    return _seed
