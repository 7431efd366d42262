from datetime import date
from typing import List, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from eventia.platform.config.core_setting import Settings
from eventia.platform.config.di import Container
from eventia.platform.logging.loguru_io import Logger
from eventia.service.registration.app.cache_aside import CacheAside
from eventia.service.registration.app.cache_keys import EVENTS_ALL, EVENTS_AVAILABLE
from eventia.service.registration.app.entity_codec import decode_event, encode_list, list_decoder
from eventia.service.registration.app.interface.i_event_repo import IEventRepo
from eventia.service.registration.domain.entity.event_entity import EventEntity


class ListEventsUseCase:
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
    async def list_all(self) -> List[EventEntity]:
        events = await self.cache_aside.get_or_load(
            key=EVENTS_ALL,
            loader=self.event_repo.list_all,
            ttl=self.settings.CACHE_TTL_ALL,
            encode=encode_list,
            decode=list_decoder(decode_event),
        )
        return events or []

    @Logger.io
    async def list_available(self) -> List[EventEntity]:
        events = await self.cache_aside.get_or_load(
            key=EVENTS_AVAILABLE,
            loader=self.event_repo.list_available,
            ttl=self.settings.CACHE_TTL_AVAILABLE,
            encode=encode_list,
            decode=list_decoder(decode_event),
        )
        return events or []

    @Logger.io
    async def list_by_date(self, *, day: date) -> List[EventEntity]:
        return await self.event_repo.list_by_date(day=day)
