from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field, model_validator

from eventia.service.registration.domain.entity.event_entity import EventEntity


class EventCreateRequest(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    description: Optional[str] = None
    date: datetime
    location: str = Field(min_length=1, max_length=255)
    capacity: int = Field(gt=0)

    class Config:
        json_schema_extra = {
            'example': {
                'name': 'PyCon Taiwan Meetup',
                'description': 'Evening talks and networking',
                'date': '2030-09-21T18:30:00+08:00',
                'location': 'Taipei',
                'capacity': 100,
            }
        }


class EventUpdateRequest(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    description: Optional[str] = None
    date: Optional[datetime] = None
    location: Optional[str] = Field(default=None, min_length=1, max_length=255)
    capacity: Optional[int] = Field(default=None, gt=0)

    @model_validator(mode='after')
    def check_not_empty(self) -> 'EventUpdateRequest':
        if all(getattr(self, name) is None for name in self.model_fields_set):
            raise ValueError('At least one field must be provided')
        return self

    class Config:
        json_schema_extra = {'example': {'capacity': 150}}


class EventResponse(BaseModel):
    id: UUID
    name: str
    description: Optional[str] = None
    date: datetime
    location: str
    capacity: int
    available_spots: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_entity(cls, event: EventEntity) -> 'EventResponse':
        return cls(
            id=event.id,
            name=event.name,
            description=event.description,
            date=event.date,
            location=event.location,
            capacity=event.capacity,
            available_spots=event.available_spots,
            created_at=event.created_at,
            updated_at=event.updated_at,
        )


class EventStatisticsResponse(BaseModel):
    event: EventResponse
    occupancy_percentage: float
    registered_count: int
    available_spots: int
