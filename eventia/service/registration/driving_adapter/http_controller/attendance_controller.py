from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, status

from eventia.platform.logging.loguru_io import Logger
from eventia.service.registration.app.command.cancel_attendance_use_case import (
    CancelAttendanceUseCase,
)
from eventia.service.registration.app.command.register_attendance_use_case import (
    RegisterAttendanceUseCase,
)
from eventia.service.registration.app.command.update_attendance_status_use_case import (
    UpdateAttendanceStatusUseCase,
)
from eventia.service.registration.app.query.list_attendances_use_case import (
    ListAttendancesUseCase,
)
from eventia.service.registration.driving_adapter.http_controller.schema.attendance_schema import (
    AttendanceRegisterRequest,
    AttendanceResponse,
    AttendanceStatisticsResponse,
)


router = APIRouter()


@router.post('', status_code=status.HTTP_201_CREATED)
@Logger.io
async def register_attendance(
    request: AttendanceRegisterRequest,
    use_case: RegisterAttendanceUseCase = Depends(RegisterAttendanceUseCase.depends),
) -> AttendanceResponse:
    attendance = await use_case.execute(
        event_id=request.event_id, participant_id=request.participant_id
    )
    return AttendanceResponse.from_entity(attendance)


@router.post('/{attendance_id}/cancel', status_code=status.HTTP_200_OK)
@Logger.io
async def cancel_attendance(
    attendance_id: UUID,
    use_case: CancelAttendanceUseCase = Depends(CancelAttendanceUseCase.depends),
) -> AttendanceResponse:
    attendance = await use_case.execute(attendance_id=attendance_id)
    return AttendanceResponse.from_entity(attendance)


@router.post('/{attendance_id}/confirm', status_code=status.HTTP_200_OK)
@Logger.io
async def confirm_attendance(
    attendance_id: UUID,
    use_case: UpdateAttendanceStatusUseCase = Depends(UpdateAttendanceStatusUseCase.depends),
) -> AttendanceResponse:
    attendance = await use_case.confirm(attendance_id=attendance_id)
    return AttendanceResponse.from_entity(attendance)


@router.post('/{attendance_id}/attended', status_code=status.HTTP_200_OK)
@Logger.io
async def mark_attended(
    attendance_id: UUID,
    use_case: UpdateAttendanceStatusUseCase = Depends(UpdateAttendanceStatusUseCase.depends),
) -> AttendanceResponse:
    attendance = await use_case.mark_attended(attendance_id=attendance_id)
    return AttendanceResponse.from_entity(attendance)


@router.get('/event/{event_id}', status_code=status.HTTP_200_OK)
@Logger.io
async def list_event_attendances(
    event_id: UUID,
    use_case: ListAttendancesUseCase = Depends(ListAttendancesUseCase.depends),
) -> List[AttendanceResponse]:
    attendances = await use_case.list_by_event(event_id=event_id)
    return [AttendanceResponse.from_entity(a) for a in attendances]


@router.get('/event/{event_id}/statistics', status_code=status.HTTP_200_OK)
@Logger.io
async def get_event_attendance_statistics(
    event_id: UUID,
    use_case: ListAttendancesUseCase = Depends(ListAttendancesUseCase.depends),
) -> AttendanceStatisticsResponse:
    stats = await use_case.statistics(event_id=event_id)
    return AttendanceStatisticsResponse(
        total_registered=stats.total_registered,
        confirmed=stats.confirmed,
        cancelled=stats.cancelled,
        attended=stats.attended,
        active=stats.active,
    )


@router.get('/participant/{participant_id}', status_code=status.HTTP_200_OK)
@Logger.io
async def list_participant_attendances(
    participant_id: UUID,
    use_case: ListAttendancesUseCase = Depends(ListAttendancesUseCase.depends),
) -> List[AttendanceResponse]:
    attendances = await use_case.list_by_participant(participant_id=participant_id)
    return [AttendanceResponse.from_entity(a) for a in attendances]
