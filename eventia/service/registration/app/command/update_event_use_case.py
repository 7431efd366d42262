from datetime import datetime
from typing import Callable, Optional, Self
from uuid import UUID

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from eventia.platform.config.di import Container
from eventia.platform.database.unit_of_work import AbstractUnitOfWork
from eventia.platform.exception.exceptions import NotFoundError
from eventia.platform.logging.loguru_io import Logger
from eventia.service.registration.app.cache_aside import CacheAside
from eventia.service.registration.app.cache_keys import EVENTS_ALL, EVENTS_AVAILABLE, event_key
from eventia.service.registration.domain.entity.event_entity import EventEntity


class UpdateEventUseCase:
    """
    Partial event update.

    Capacity edits run under the event row lock: the active attendance count
    is taken while registrations are blocked, capacity may not drop below it,
    and available spots are re-derived as capacity - active.
    """

    def __init__(
        self,
        *,
        uow_factory: Callable[[], AbstractUnitOfWork],
        cache_aside: CacheAside,
    ) -> None:
        self.uow_factory = uow_factory
        self.cache_aside = cache_aside

    @classmethod
    @inject
    def depends(
        cls,
        uow_factory: Callable[[], AbstractUnitOfWork] = Depends(
            Provide[Container.unit_of_work.provider]
        ),
        cache_aside: CacheAside = Depends(Provide[Container.cache_aside]),
    ) -> Self:
        return cls(uow_factory=uow_factory, cache_aside=cache_aside)

    @Logger.io
    async def execute(
        self,
        *,
        event_id: UUID,
        name: Optional[str] = None,
        description: Optional[str] = None,
        date: Optional[datetime] = None,
        location: Optional[str] = None,
        capacity: Optional[int] = None,
    ) -> EventEntity:
        async with self.uow_factory() as uow:
            event = await uow.event_repo.lock_by_id(event_id=event_id)
            if event is None:
                raise NotFoundError(f'Event {event_id} not found', resource='event')

            active_count = (
                await uow.attendance_repo.count_active(event_id=event_id)
                if capacity is not None
                else event.occupied_spots
            )
            updated = event.update_details(
                active_count=active_count,
                name=name,
                description=description,
                date=date,
                location=location,
                capacity=capacity,
            )
            result = await uow.event_repo.update(event=updated)
            await uow.commit()

        self.cache_aside.invalidate(event_key(event_id), EVENTS_ALL, EVENTS_AVAILABLE)
        Logger.base.info(
            f'✏️ [EVENT] Updated {event_id} (capacity={result.capacity}, available={result.available_spots})'
        )
        return result
