from typing import List, Self
from uuid import UUID

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from eventia.platform.config.core_setting import Settings
from eventia.platform.config.di import Container
from eventia.platform.exception.exceptions import NotFoundError
from eventia.platform.logging.loguru_io import Logger
from eventia.service.registration.app.cache_aside import CacheAside
from eventia.service.registration.app.cache_keys import PARTICIPANTS_ALL, participant_key
from eventia.service.registration.app.entity_codec import (
    decode_participant,
    encode_entity,
    encode_list,
    list_decoder,
)
from eventia.service.registration.app.interface.i_participant_repo import IParticipantRepo
from eventia.service.registration.domain.entity.participant_entity import ParticipantEntity


class ParticipantQueryUseCase:
    def __init__(
        self, *, participant_repo: IParticipantRepo, cache_aside: CacheAside, settings: Settings
    ) -> None:
        self.participant_repo = participant_repo
        self.cache_aside = cache_aside
        self.settings = settings

    @classmethod
    @inject
    def depends(
        cls,
        participant_repo: IParticipantRepo = Depends(Provide[Container.participant_repo]),
        cache_aside: CacheAside = Depends(Provide[Container.cache_aside]),
        settings: Settings = Depends(Provide[Container.config_service]),
    ) -> Self:
        return cls(participant_repo=participant_repo, cache_aside=cache_aside, settings=settings)

    @Logger.io
    async def get_by_id(self, *, participant_id: UUID) -> ParticipantEntity:
        participant = await self.cache_aside.get_or_load(
            key=participant_key(participant_id),
            loader=lambda: self.participant_repo.get_by_id(participant_id=participant_id),
            ttl=self.settings.CACHE_TTL_ENTITY,
            encode=encode_entity,
            decode=decode_participant,
        )
        if participant is None:
            raise NotFoundError(f'Participant {participant_id} not found', resource='participant')
        return participant

    @Logger.io
    async def get_by_email(self, *, email: str) -> ParticipantEntity:
        participant = await self.participant_repo.get_by_email(email=email)
        if participant is None:
            raise NotFoundError(f'Participant with email {email} not found', resource='participant')
        return participant

    @Logger.io
    async def list_all(self) -> List[ParticipantEntity]:
        participants = await self.cache_aside.get_or_load(
            key=PARTICIPANTS_ALL,
            loader=self.participant_repo.list_all,
            ttl=self.settings.CACHE_TTL_PARTICIPANTS,
            encode=encode_list,
            decode=list_decoder(decode_participant),
        )
        return participants or []
