from typing import Callable, Optional, Self
from uuid import UUID

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from eventia.platform.config.di import Container
from eventia.platform.database.unit_of_work import AbstractUnitOfWork
from eventia.platform.exception.exceptions import ConflictError, NotFoundError
from eventia.platform.logging.loguru_io import Logger
from eventia.service.registration.app.cache_aside import CacheAside
from eventia.service.registration.app.cache_keys import PARTICIPANTS_ALL, participant_key
from eventia.service.registration.domain.entity.participant_entity import ParticipantEntity


class UpdateParticipantUseCase:
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
        participant_id: UUID,
        name: Optional[str] = None,
        email: Optional[str] = None,
        phone: Optional[str] = None,
    ) -> ParticipantEntity:
        async with self.uow_factory() as uow:
            participant = await uow.participant_repo.get_by_id(participant_id=participant_id)
            if participant is None:
                raise NotFoundError(
                    f'Participant {participant_id} not found', resource='participant'
                )

            updated = participant.update_details(name=name, email=email, phone=phone)
            if updated.email != participant.email:
                owner = await uow.participant_repo.get_by_email(email=updated.email)
                if owner is not None and owner.id != participant_id:
                    raise ConflictError('Email already exists')

            result = await uow.participant_repo.update(participant=updated)
            await uow.commit()

        self.cache_aside.invalidate(participant_key(participant_id), PARTICIPANTS_ALL)
        return result
