from datetime import datetime
from typing import Callable, Optional, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from eventia.platform.config.di import Container
from eventia.platform.database.unit_of_work import AbstractUnitOfWork
from eventia.platform.logging.loguru_io import Logger
from eventia.service.registration.app.cache_aside import CacheAside
from eventia.service.registration.app.cache_keys import EVENTS_ALL, EVENTS_AVAILABLE
from eventia.service.registration.domain.entity.event_entity import EventEntity


class CreateEventUseCase:
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
        name: str,
        date: datetime,
        location: str,
        capacity: int,
        description: Optional[str] = None,
    ) -> EventEntity:
        event = EventEntity.create(
            name=name,
            description=description,
            date=date,
            location=location,
            capacity=capacity,
        )
        async with self.uow_factory() as uow:
            created = await uow.event_repo.create(event=event)
            await uow.commit()

        self.cache_aside.invalidate(EVENTS_ALL, EVENTS_AVAILABLE)
        return created
