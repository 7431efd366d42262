from typing import Callable, Self
from uuid import UUID

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from eventia.platform.config.di import Container
from eventia.platform.database.unit_of_work import AbstractUnitOfWork
from eventia.platform.exception.exceptions import NotFoundError
from eventia.platform.logging.loguru_io import Logger
from eventia.service.registration.app.cache_aside import CacheAside
from eventia.service.registration.app.cache_keys import (
    PARTICIPANTS_ALL,
    participant_key,
    seat_change_keys,
)


class DeleteParticipantUseCase:
    """
    Delete a participant.

    The participant row is locked first (FOR UPDATE), so registrations in
    flight either finish before us or wait and then find no participant.
    Their attendances cascade away with them, so every seat still held by an
    active attendance is handed back first. Event rows are locked in id order
    after the participant row, the same order registration takes them.
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
    async def execute(self, *, participant_id: UUID) -> None:
        async with self.uow_factory() as uow:
            participant = await uow.participant_repo.lock_by_id(participant_id=participant_id)
            if participant is None:
                raise NotFoundError(
                    f'Participant {participant_id} not found', resource='participant'
                )

            attendances = await uow.attendance_repo.list_by_participant(
                participant_id=participant_id
            )
            event_ids = sorted({a.event_id for a in attendances}, key=str)
            for event_id in event_ids:
                await uow.event_repo.lock_by_id(event_id=event_id)

            # Re-read under the locks
            attendances = await uow.attendance_repo.list_by_participant(
                participant_id=participant_id
            )
            released = [a.event_id for a in attendances if a.is_active]
            for event_id in released:
                await uow.event_repo.adjust_available_spots(event_id=event_id, delta=1)

            await uow.participant_repo.delete(participant_id=participant_id)
            await uow.commit()

        keys = [participant_key(participant_id), PARTICIPANTS_ALL]
        for event_id in event_ids:
            keys.extend(seat_change_keys(event_id))
        self.cache_aside.invalidate(*dict.fromkeys(keys))
        Logger.base.info(
            f'🗑️ [PARTICIPANT] Deleted {participant_id}, released {len(released)} seats'
        )
