from typing import Self
from uuid import UUID

import attrs
from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from eventia.platform.config.core_setting import Settings
from eventia.platform.config.di import Container
from eventia.platform.exception.exceptions import NotFoundError
from eventia.platform.logging.loguru_io import Logger
from eventia.service.registration.app.cache_aside import CacheAside
from eventia.service.registration.app.cache_keys import event_key
from eventia.service.registration.app.entity_codec import decode_event, encode_entity
from eventia.service.registration.app.interface.i_event_repo import IEventRepo
from eventia.service.registration.domain.entity.event_entity import EventEntity


@attrs.frozen
class EventStatistics:
    event: EventEntity
    occupancy_percentage: float
    registered_count: int
    available_spots: int


class GetEventUseCase:
    def __init__(
        self, *, event_repo: IEventRepo, cache_aside: CacheAside, settings: Settings
    ) -> None:
        self.event_repo = event_repo
        self.cache_aside = cache_aside
        self.settings = settings

    @classmethod
    @inject
    def depends(
        cls,
        event_repo: IEventRepo = Depends(Provide[Container.event_repo]),
        cache_aside: CacheAside = Depends(Provide[Container.cache_aside]),
        settings: Settings = Depends(Provide[Container.config_service]),
    ) -> Self:
        return cls(event_repo=event_repo, cache_aside=cache_aside, settings=settings)

    @Logger.io
    async def get_by_id(self, *, event_id: UUID) -> EventEntity:
        event = await self.cache_aside.get_or_load(
            key=event_key(event_id),
            loader=lambda: self.event_repo.get_by_id(event_id=event_id),
            ttl=self.settings.CACHE_TTL_ENTITY,
            encode=encode_entity,
            decode=decode_event,
        )
        if event is None:
            Logger.base.warning(f'⚠️ [GET_EVENT] Event {event_id} not found')
            raise NotFoundError(f'Event {event_id} not found', resource='event')
        return event

    @Logger.io
    async def statistics(self, *, event_id: UUID) -> EventStatistics:
        event = await self.get_by_id(event_id=event_id)
        return EventStatistics(
            event=event,
            occupancy_percentage=event.occupancy_percentage,
            registered_count=event.occupied_spots,
            available_spots=event.available_spots,
        )
