from datetime import datetime
from typing import Any, List, Mapping, Optional
from uuid import UUID

from sqlalchemy import func, select, update

from eventia.platform.logging.loguru_io import Logger
from eventia.service.registration.app.interface.i_attendance_repo import IAttendanceRepo
from eventia.service.registration.domain.entity.attendance_entity import AttendanceEntity
from eventia.service.registration.domain.enum.attendance_status import AttendanceStatus
from eventia.service.registration.driven_adapter.model.attendance_model import AttendanceModel
from eventia.service.registration.driven_adapter.repo.base_repo_impl import BaseRepoImpl, as_row


_ATTENDANCES = AttendanceModel.__table__


class AttendanceRepoImpl(BaseRepoImpl, IAttendanceRepo):
    @staticmethod
    def _model_to_entity(model: AttendanceModel | Mapping[str, Any]) -> AttendanceEntity:
        row = as_row(model)
        return AttendanceEntity(
            id=row['id'],
            event_id=row['event_id'],
            participant_id=row['participant_id'],
            status=AttendanceStatus(row['status']),
            registration_date=row['registration_date'],
            created_at=row['created_at'],
            updated_at=row['updated_at'],
        )

    @Logger.io
    async def create(self, *, attendance: AttendanceEntity) -> AttendanceEntity:
        async with self._get_session() as session:
            session.add(
                AttendanceModel(
                    id=attendance.id,
                    event_id=attendance.event_id,
                    participant_id=attendance.participant_id,
                    status=attendance.status.value,
                    registration_date=attendance.registration_date,
                    created_at=attendance.created_at,
                    updated_at=attendance.updated_at,
                )
            )
            await session.flush()
            return attendance

    async def _select(self, *conditions: Any, order_by: Any = None) -> List[AttendanceEntity]:
        stmt = (
            select(AttendanceModel)
            .where(*conditions)
            .execution_options(populate_existing=True)
        )
        if order_by is not None:
            stmt = stmt.order_by(order_by)
        async with self._get_session() as session:
            result = await session.execute(stmt)
            return [self._model_to_entity(m) for m in result.scalars().all()]

    @Logger.io
    async def get_by_id(self, *, attendance_id: UUID) -> AttendanceEntity | None:
        found = await self._select(AttendanceModel.id == attendance_id)
        return found[0] if found else None

    @Logger.io
    async def find_by_event_and_participant(
        self, *, event_id: UUID, participant_id: UUID
    ) -> AttendanceEntity | None:
        found = await self._select(
            AttendanceModel.event_id == event_id,
            AttendanceModel.participant_id == participant_id,
        )
        return found[0] if found else None

    @Logger.io
    async def list_by_event(self, *, event_id: UUID) -> List[AttendanceEntity]:
        return await self._select(
            AttendanceModel.event_id == event_id,
            order_by=AttendanceModel.registration_date.asc(),
        )

    @Logger.io
    async def list_by_participant(self, *, participant_id: UUID) -> List[AttendanceEntity]:
        return await self._select(
            AttendanceModel.participant_id == participant_id,
            order_by=AttendanceModel.registration_date.desc(),
        )

    @Logger.io
    async def update_status(
        self,
        *,
        attendance_id: UUID,
        status: AttendanceStatus,
        registration_date: Optional[datetime] = None,
    ) -> AttendanceEntity:
        values: dict[str, Any] = {'status': status.value, 'updated_at': func.now()}
        if registration_date is not None:
            values['registration_date'] = registration_date
        async with self._get_session() as session:
            result = await session.execute(
                update(_ATTENDANCES)
                .where(_ATTENDANCES.c.id == attendance_id)
                .values(**values)
                .returning(*_ATTENDANCES.c)
            )
            return self._model_to_entity(result.mappings().one())

    @Logger.io
    async def count_active(self, *, event_id: UUID) -> int:
        async with self._get_session() as session:
            result = await session.execute(
                select(func.count())
                .select_from(AttendanceModel)
                .where(
                    AttendanceModel.event_id == event_id,
                    AttendanceModel.status != AttendanceStatus.CANCELLED.value,
                )
            )
            return int(result.scalar_one())
