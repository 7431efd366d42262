from typing import Callable, Self
from uuid import UUID

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from eventia.platform.config.di import Container
from eventia.platform.database.unit_of_work import AbstractUnitOfWork
from eventia.platform.exception.exceptions import NotFoundError
from eventia.platform.logging.loguru_io import Logger
from eventia.service.registration.app.cache_aside import CacheAside
from eventia.service.registration.app.cache_keys import event_attendances_key
from eventia.service.registration.domain.entity.attendance_entity import AttendanceEntity


class UpdateAttendanceStatusUseCase:
    """
    Seat-neutral status transitions: confirm and mark attended.

    The event row lock is still taken so these never interleave with a
    cancellation of the same attendance.
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
    async def confirm(self, *, attendance_id: UUID) -> AttendanceEntity:
        return await self._transition(
            attendance_id=attendance_id, transition=AttendanceEntity.confirm
        )

    @Logger.io
    async def mark_attended(self, *, attendance_id: UUID) -> AttendanceEntity:
        return await self._transition(
            attendance_id=attendance_id, transition=AttendanceEntity.mark_attended
        )

    async def _transition(
        self,
        *,
        attendance_id: UUID,
        transition: Callable[[AttendanceEntity], AttendanceEntity],
    ) -> AttendanceEntity:
        async with self.uow_factory() as uow:
            attendance = await uow.attendance_repo.get_by_id(attendance_id=attendance_id)
            if attendance is None:
                raise NotFoundError(f'Attendance {attendance_id} not found', resource='attendance')

            await uow.event_repo.lock_by_id(event_id=attendance.event_id)
            attendance = await uow.attendance_repo.get_by_id(attendance_id=attendance_id)
            if attendance is None:
                raise NotFoundError(f'Attendance {attendance_id} not found', resource='attendance')

            updated = transition(attendance)
            result = await uow.attendance_repo.update_status(
                attendance_id=attendance_id, status=updated.status
            )
            await uow.commit()

        self.cache_aside.invalidate(event_attendances_key(result.event_id))
        Logger.base.info(f'📝 [ATTENDANCE] {attendance_id} -> {result.status}')
        return result
