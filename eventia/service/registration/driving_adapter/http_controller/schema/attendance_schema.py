from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel

from eventia.service.registration.domain.entity.attendance_entity import AttendanceEntity


class AttendanceRegisterRequest(BaseModel):
    event_id: UUID
    participant_id: UUID

    class Config:
        json_schema_extra = {
            'example': {
                'event_id': '01927a3c-5b1e-7c3a-9f2e-1a2b3c4d5e6f',
                'participant_id': '01927a3c-6c2f-7d4b-8a3f-2b3c4d5e6f70',
            }
        }


class AttendanceResponse(BaseModel):
    id: UUID
    event_id: UUID
    participant_id: UUID
    status: str
    registration_date: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_entity(cls, attendance: AttendanceEntity) -> 'AttendanceResponse':
        return cls(
            id=attendance.id,
            event_id=attendance.event_id,
            participant_id=attendance.participant_id,
            status=attendance.status.value,
            registration_date=attendance.registration_date,
            created_at=attendance.created_at,
            updated_at=attendance.updated_at,
        )


class AttendanceStatisticsResponse(BaseModel):
    total_registered: int
    confirmed: int
    cancelled: int
    attended: int
    active: int
