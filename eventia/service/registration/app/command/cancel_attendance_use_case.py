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
from eventia.service.registration.domain.entity.attendance_entity import AttendanceEntity


class CancelAttendanceUseCase:
    """
    Cancel an attendance and give its seat back.

    The event row is locked before the attendance status is re-read, so two
    concurrent cancellations of the same attendance free exactly one seat.
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
    async def execute(self, *, attendance_id: UUID) -> AttendanceEntity:
        async with self.uow_factory() as uow:
            attendance = await uow.attendance_repo.get_by_id(attendance_id=attendance_id)
            if attendance is None:
                raise NotFoundError(f'Attendance {attendance_id} not found', resource='attendance')
            # Fail fast before taking the lock
            attendance.cancel()

            event = await uow.event_repo.lock_by_id(event_id=attendance.event_id)
            if event is None:
                raise NotFoundError(f'Event {attendance.event_id} not found', resource='event')

            # Re-read under the lock; a concurrent cancel may have won
            attendance = await uow.attendance_repo.get_by_id(attendance_id=attendance_id)
            if attendance is None:
                raise NotFoundError(f'Attendance {attendance_id} not found', resource='attendance')
            cancelled = attendance.cancel()
            event.release_spot()

            result = await uow.attendance_repo.update_status(
                attendance_id=attendance_id, status=cancelled.status
            )
            await uow.event_repo.adjust_available_spots(event_id=attendance.event_id, delta=1)
            await uow.commit()

        self.cache_aside.invalidate(*seat_change_keys(result.event_id))
        Logger.base.info(f'🚫 [CANCEL] Attendance {attendance_id} cancelled, seat released')
        return result
