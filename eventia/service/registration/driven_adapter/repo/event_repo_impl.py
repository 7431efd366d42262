from datetime import date, datetime, time, timedelta, timezone
from typing import Any, List, Mapping
from uuid import UUID

from sqlalchemy import delete, func, select, update

from eventia.platform.logging.loguru_io import Logger
from eventia.service.registration.app.interface.i_event_repo import IEventRepo
from eventia.service.registration.domain.entity.event_entity import EventEntity
from eventia.service.registration.driven_adapter.model.event_model import EventModel
from eventia.service.registration.driven_adapter.repo.base_repo_impl import BaseRepoImpl, as_row


_EVENTS = EventModel.__table__


class EventRepoImpl(BaseRepoImpl, IEventRepo):
    @staticmethod
    def _model_to_entity(model: EventModel | Mapping[str, Any]) -> EventEntity:
        row = as_row(model)
        return EventEntity(
            id=row['id'],
            name=row['name'],
            description=row['description'],
            date=row['date'],
            location=row['location'],
            capacity=row['capacity'],
            available_spots=row['available_spots'],
            created_at=row['created_at'],
            updated_at=row['updated_at'],
        )

    @Logger.io
    async def create(self, *, event: EventEntity) -> EventEntity:
        async with self._get_session() as session:
            session.add(
                EventModel(
                    id=event.id,
                    name=event.name,
                    description=event.description,
                    date=event.date,
                    location=event.location,
                    capacity=event.capacity,
                    available_spots=event.available_spots,
                    created_at=event.created_at,
                    updated_at=event.updated_at,
                )
            )
            await session.flush()
            Logger.base.info(f'🎫 [EVENT] Created {event.id} with {event.capacity} seats')
            return event

    @Logger.io
    async def get_by_id(self, *, event_id: UUID) -> EventEntity | None:
        async with self._get_session() as session:
            result = await session.execute(
                select(EventModel)
                .where(EventModel.id == event_id)
                .execution_options(populate_existing=True)
            )
            model = result.scalar_one_or_none()
            return self._model_to_entity(model) if model else None

    @Logger.io
    async def lock_by_id(self, *, event_id: UUID) -> EventEntity | None:
        async with self._get_session() as session:
            result = await session.execute(
                select(EventModel)
                .where(EventModel.id == event_id)
                .with_for_update()
                .execution_options(populate_existing=True)
            )
            model = result.scalar_one_or_none()
            return self._model_to_entity(model) if model else None

    async def _list(self, *conditions: Any, order_by: Any) -> List[EventEntity]:
        async with self._get_session() as session:
            result = await session.execute(
                select(EventModel).where(*conditions).order_by(order_by)
            )
            return [self._model_to_entity(m) for m in result.scalars().all()]

    @Logger.io
    async def list_all(self) -> List[EventEntity]:
        return await self._list(order_by=EventModel.date.desc())

    @Logger.io
    async def list_available(self) -> List[EventEntity]:
        return await self._list(
            EventModel.available_spots > 0,
            EventModel.date > func.now(),
            order_by=EventModel.date.asc(),
        )

    @Logger.io
    async def list_by_date(self, *, day: date) -> List[EventEntity]:
        start = datetime.combine(day, time.min, tzinfo=timezone.utc)
        end = start + timedelta(days=1)
        return await self._list(
            EventModel.date >= start,
            EventModel.date < end,
            order_by=EventModel.date.asc(),
        )

    @Logger.io
    async def update(self, *, event: EventEntity) -> EventEntity:
        async with self._get_session() as session:
            result = await session.execute(
                update(_EVENTS)
                .where(_EVENTS.c.id == event.id)
                .values(
                    name=event.name,
                    description=event.description,
                    date=event.date,
                    location=event.location,
                    capacity=event.capacity,
                    available_spots=event.available_spots,
                    updated_at=event.updated_at or func.now(),
                )
                .returning(*_EVENTS.c)
            )
            return self._model_to_entity(result.mappings().one())

    @Logger.io
    async def delete(self, *, event_id: UUID) -> bool:
        async with self._get_session() as session:
            result = await session.execute(delete(_EVENTS).where(_EVENTS.c.id == event_id))
            return result.rowcount > 0

    @Logger.io
    async def adjust_available_spots(self, *, event_id: UUID, delta: int) -> None:
        async with self._get_session() as session:
            await session.execute(
                update(_EVENTS)
                .where(_EVENTS.c.id == event_id)
                .values(
                    available_spots=_EVENTS.c.available_spots + delta,
                    updated_at=func.now(),
                )
            )
