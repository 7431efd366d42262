from datetime import datetime, timezone
from typing import Optional
from uuid import UUID

import attrs
from uuid_utils.compat import uuid7

from eventia.platform.exception.exceptions import (
    AlreadyCancelledError,
    AlreadyRegisteredError,
    InvalidStatusTransitionError,
)
from eventia.platform.logging.loguru_io import Logger
from eventia.service.registration.domain.enum.attendance_status import AttendanceStatus


@attrs.define
class AttendanceEntity:
    event_id: UUID
    participant_id: UUID
    status: AttendanceStatus = AttendanceStatus.REGISTERED
    registration_date: Optional[datetime] = None
    id: UUID = attrs.field(factory=uuid7)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    @Logger.io
    def register(cls, *, event_id: UUID, participant_id: UUID) -> 'AttendanceEntity':
        now = datetime.now(timezone.utc)
        return cls(
            event_id=event_id,
            participant_id=participant_id,
            status=AttendanceStatus.REGISTERED,
            registration_date=now,
            created_at=now,
            updated_at=now,
        )

    @property
    def is_active(self) -> bool:
        return self.status.is_active

    @Logger.io
    def reactivate(self) -> 'AttendanceEntity':
        """
        Re-enter a cancelled attendance as registered with a fresh registration date.

        Raises:
            AlreadyRegisteredError: When the attendance is still active
        """
        if self.status != AttendanceStatus.CANCELLED:
            raise AlreadyRegisteredError()
        now = datetime.now(timezone.utc)
        return attrs.evolve(
            self, status=AttendanceStatus.REGISTERED, registration_date=now, updated_at=now
        )

    @Logger.io
    def confirm(self) -> 'AttendanceEntity':
        if self.status == AttendanceStatus.CANCELLED:
            raise AlreadyCancelledError('Cannot confirm a cancelled attendance')
        if self.status != AttendanceStatus.REGISTERED:
            raise InvalidStatusTransitionError(f'Cannot confirm attendance in status {self.status}')
        return attrs.evolve(
            self, status=AttendanceStatus.CONFIRMED, updated_at=datetime.now(timezone.utc)
        )

    @Logger.io
    def cancel(self) -> 'AttendanceEntity':
        if self.status == AttendanceStatus.CANCELLED:
            raise AlreadyCancelledError()
        if self.status == AttendanceStatus.ATTENDED:
            raise InvalidStatusTransitionError('Cannot cancel an attended attendance')
        return attrs.evolve(
            self, status=AttendanceStatus.CANCELLED, updated_at=datetime.now(timezone.utc)
        )

    @Logger.io
    def mark_attended(self) -> 'AttendanceEntity':
        if self.status == AttendanceStatus.CANCELLED:
            raise AlreadyCancelledError('Cannot mark a cancelled attendance as attended')
        if self.status == AttendanceStatus.ATTENDED:
            raise InvalidStatusTransitionError('Attendance is already marked as attended')
        return attrs.evolve(
            self, status=AttendanceStatus.ATTENDED, updated_at=datetime.now(timezone.utc)
        )
