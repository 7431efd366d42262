import time
from typing import Callable, Self
from uuid import UUID

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from eventia.platform.config.di import Container
from eventia.platform.database.unit_of_work import AbstractUnitOfWork
from eventia.platform.exception.exceptions import CustomBaseError, NotFoundError
from eventia.platform.logging.loguru_io import Logger
from eventia.platform.metrics.eventia_metrics import metrics
from eventia.service.registration.app.cache_aside import CacheAside
from eventia.service.registration.app.cache_keys import seat_change_keys
from eventia.service.registration.domain.entity.attendance_entity import AttendanceEntity


class RegisterAttendanceUseCase:
    """
    Register a participant for an event without ever overbooking it.

    Flow (single transaction):
    1. Key-share lock the participant row (SELECT ... FOR KEY SHARE), a
       participant delete in flight makes us wait, then miss the row
    2. Lock the event row (SELECT ... FOR UPDATE), concurrent registrations
       for the same event queue up here
    3. Check the event, then the participant, exist
    4. Check a seat is left on the locked row, never on a cached copy
    5. Insert the attendance, or reactivate the participant's cancelled one
    6. available_spots -= 1
    7. Commit, then invalidate cached views in the background

    Any failure before commit rolls the whole transaction back.
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
    async def execute(self, *, event_id: UUID, participant_id: UUID) -> AttendanceEntity:
        started = time.perf_counter()
        try:
            attendance = await self._register(event_id=event_id, participant_id=participant_id)
        except CustomBaseError as e:
            metrics.record_registration(outcome=e.kind)
            raise

        metrics.record_registration(outcome='success', duration=time.perf_counter() - started)
        self.cache_aside.invalidate(*seat_change_keys(event_id))
        Logger.base.info(
            f'✅ [REGISTER] Participant {participant_id} registered for event {event_id}'
        )
        return attendance

    async def _register(self, *, event_id: UUID, participant_id: UUID) -> AttendanceEntity:
        async with self.uow_factory() as uow:
            # Participant row first (shared), then event row: a concurrent
            # participant deletion either finishes first or waits for us
            participant = await uow.participant_repo.lock_by_id(
                participant_id=participant_id, key_share=True
            )
            event = await uow.event_repo.lock_by_id(event_id=event_id)
            if event is None:
                raise NotFoundError(f'Event {event_id} not found', resource='event')
            if participant is None:
                raise NotFoundError(
                    f'Participant {participant_id} not found', resource='participant'
                )

            # Raises CapacityExceededError when the locked row has no seat left
            event.take_spot()

            existing = await uow.attendance_repo.find_by_event_and_participant(
                event_id=event_id, participant_id=participant_id
            )
            if existing is None:
                attendance = await uow.attendance_repo.create(
                    attendance=AttendanceEntity.register(
                        event_id=event_id, participant_id=participant_id
                    )
                )
            else:
                # Raises AlreadyRegisteredError unless the existing row is cancelled
                reactivated = existing.reactivate()
                attendance = await uow.attendance_repo.update_status(
                    attendance_id=existing.id,
                    status=reactivated.status,
                    registration_date=reactivated.registration_date,
                )
                Logger.base.info(f'♻️ [REGISTER] Reusing cancelled attendance {existing.id}')

            await uow.event_repo.adjust_available_spots(event_id=event_id, delta=-1)
            await uow.commit()

        return attendance
