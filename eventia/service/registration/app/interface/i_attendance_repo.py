from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional
from uuid import UUID

from eventia.service.registration.domain.entity.attendance_entity import AttendanceEntity
from eventia.service.registration.domain.enum.attendance_status import AttendanceStatus


class IAttendanceRepo(ABC):
    @abstractmethod
    async def create(self, *, attendance: AttendanceEntity) -> AttendanceEntity:
        pass

    @abstractmethod
    async def get_by_id(self, *, attendance_id: UUID) -> AttendanceEntity | None:
        pass

    @abstractmethod
    async def find_by_event_and_participant(
        self, *, event_id: UUID, participant_id: UUID
    ) -> AttendanceEntity | None:
        """Any attendance for the pair, cancelled ones included"""
        pass

    @abstractmethod
    async def list_by_event(self, *, event_id: UUID) -> List[AttendanceEntity]:
        pass

    @abstractmethod
    async def list_by_participant(self, *, participant_id: UUID) -> List[AttendanceEntity]:
        pass

    @abstractmethod
    async def update_status(
        self,
        *,
        attendance_id: UUID,
        status: AttendanceStatus,
        registration_date: Optional[datetime] = None,
    ) -> AttendanceEntity:
        pass

    @abstractmethod
    async def count_active(self, *, event_id: UUID) -> int:
        """Number of non-cancelled attendances for the event"""
        pass
