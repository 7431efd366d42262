from typing import Callable, Optional, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from eventia.platform.config.di import Container
from eventia.platform.database.unit_of_work import AbstractUnitOfWork
from eventia.platform.exception.exceptions import ConflictError
from eventia.platform.logging.loguru_io import Logger
from eventia.service.registration.app.cache_aside import CacheAside
from eventia.service.registration.app.cache_keys import PARTICIPANTS_ALL
from eventia.service.registration.domain.entity.participant_entity import ParticipantEntity


class CreateParticipantUseCase:
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
        self, *, name: str, email: str, phone: Optional[str] = None
    ) -> ParticipantEntity:
        participant = ParticipantEntity.create(name=name, email=email, phone=phone)
        async with self.uow_factory() as uow:
            if await uow.participant_repo.get_by_email(email=participant.email):
                raise ConflictError('Email already exists')
            # The UNIQUE(email) constraint still catches a concurrent duplicate
            created = await uow.participant_repo.create(participant=participant)
            await uow.commit()

        self.cache_aside.invalidate(PARTICIPANTS_ALL)
        return created
