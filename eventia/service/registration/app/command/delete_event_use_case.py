from typing import Callable, Self
from uuid import UUID

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from eventia.platform.config.di import Container
from eventia.platform.database.unit_of_work import AbstractUnitOfWork
from eventia.platform.exception.exceptions import NotFoundError
from eventia.platform.logging.loguru_io import Logger
from eventia.service.registration.app.cache_aside import CacheAside
from eventia.service.registration.app.cache_keys import seat_change_keys


class DeleteEventUseCase:
    """Delete an event; its attendances go with it (ON DELETE CASCADE)"""

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
    async def execute(self, *, event_id: UUID) -> None:
        async with self.uow_factory() as uow:
            deleted = await uow.event_repo.delete(event_id=event_id)
            if not deleted:
                raise NotFoundError(f'Event {event_id} not found', resource='event')
            await uow.commit()

        self.cache_aside.invalidate(*seat_change_keys(event_id))
        Logger.base.info(f'🗑️ [EVENT] Deleted {event_id}')
