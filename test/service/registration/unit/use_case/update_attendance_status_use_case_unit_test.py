from uuid import uuid4

import pytest

from eventia.platform.exception.exceptions import (
    AlreadyCancelledError,
    InvalidStatusTransitionError,
    NotFoundError,
)
from eventia.service.registration.app.command.register_attendance_use_case import (
    RegisterAttendanceUseCase,
)
from eventia.service.registration.app.command.update_attendance_status_use_case import (
    UpdateAttendanceStatusUseCase,
)
from eventia.service.registration.domain.enum.attendance_status import AttendanceStatus


pytestmark = pytest.mark.unit


@pytest.fixture
def use_case(uow_factory, cache_aside) -> UpdateAttendanceStatusUseCase:
    return UpdateAttendanceStatusUseCase(uow_factory=uow_factory, cache_aside=cache_aside)


@pytest.fixture
async def registered(uow_factory, cache_aside, seed_event, seed_participant):
    register = RegisterAttendanceUseCase(uow_factory=uow_factory, cache_aside=cache_aside)
    event = seed_event(capacity=4)
    return await register.execute(event_id=event.id, participant_id=seed_participant().id)


class TestUpdateAttendanceStatus:
    async def test_confirm_keeps_seat_count(self, use_case, store, registered):
        confirmed = await use_case.confirm(attendance_id=registered.id)

        assert confirmed.status == AttendanceStatus.CONFIRMED
        assert store.events[registered.event_id].available_spots == 3

    async def test_mark_attended_after_confirm(self, use_case, store, registered):
        await use_case.confirm(attendance_id=registered.id)

        attended = await use_case.mark_attended(attendance_id=registered.id)

        assert attended.status == AttendanceStatus.ATTENDED
        assert store.attendances[registered.id].status == AttendanceStatus.ATTENDED

    async def test_confirm_twice_is_invalid(self, use_case, registered):
        await use_case.confirm(attendance_id=registered.id)

        with pytest.raises(InvalidStatusTransitionError):
            await use_case.confirm(attendance_id=registered.id)

    async def test_cancelled_attendance_cannot_be_confirmed(self, use_case, store, registered):
        store.attendances[registered.id] = registered.cancel()

        with pytest.raises(AlreadyCancelledError):
            await use_case.confirm(attendance_id=registered.id)

    async def test_unknown_attendance_raises_not_found(self, use_case):
        with pytest.raises(NotFoundError):
            await use_case.mark_attended(attendance_id=uuid4())
