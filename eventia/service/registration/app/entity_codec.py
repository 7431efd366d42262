"""
Entity <-> cache payload conversion

Payloads are plain dicts. The in-memory backend hands back the same objects
it was given, the redis backend hands back orjson-decoded JSON, so decoders
accept both native values and their string forms.
"""

from datetime import datetime
from typing import Any, Callable, List, Optional, TypeVar
from uuid import UUID

import attrs

from eventia.service.registration.domain.entity.attendance_entity import AttendanceEntity
from eventia.service.registration.domain.entity.event_entity import EventEntity
from eventia.service.registration.domain.entity.participant_entity import ParticipantEntity
from eventia.service.registration.domain.enum.attendance_status import AttendanceStatus


T = TypeVar('T')


def _uuid(value: Any) -> UUID:
    return value if isinstance(value, UUID) else UUID(str(value))


def _datetime(value: Any) -> Optional[datetime]:
    if value is None or isinstance(value, datetime):
        return value
    return datetime.fromisoformat(value)


def encode_entity(entity: Any) -> dict:
    return attrs.asdict(entity, recurse=False)


def encode_list(entities: List[Any]) -> list:
    return [encode_entity(e) for e in entities]


def decode_event(data: dict) -> EventEntity:
    return EventEntity(
        id=_uuid(data['id']),
        name=data['name'],
        description=data['description'],
        date=_datetime(data['date']),  # type: ignore[arg-type]
        location=data['location'],
        capacity=int(data['capacity']),
        available_spots=int(data['available_spots']),
        created_at=_datetime(data['created_at']),
        updated_at=_datetime(data['updated_at']),
    )


def decode_participant(data: dict) -> ParticipantEntity:
    return ParticipantEntity(
        id=_uuid(data['id']),
        name=data['name'],
        email=data['email'],
        phone=data['phone'],
        created_at=_datetime(data['created_at']),
        updated_at=_datetime(data['updated_at']),
    )


def decode_attendance(data: dict) -> AttendanceEntity:
    return AttendanceEntity(
        id=_uuid(data['id']),
        event_id=_uuid(data['event_id']),
        participant_id=_uuid(data['participant_id']),
        status=AttendanceStatus(data['status']),
        registration_date=_datetime(data['registration_date']),
        created_at=_datetime(data['created_at']),
        updated_at=_datetime(data['updated_at']),
    )


def list_decoder(decode: Callable[[dict], T]) -> Callable[[Any], List[T]]:
    def decode_many(data: Any) -> List[T]:
        if not isinstance(data, list):
            raise TypeError(f'Expected a list payload, got {type(data).__name__}')
        return [decode(item) for item in data]

    return decode_many
