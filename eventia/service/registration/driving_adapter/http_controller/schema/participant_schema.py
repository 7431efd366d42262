from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field, model_validator

from eventia.service.registration.domain.entity.participant_entity import (
    EMAIL_PATTERN,
    PHONE_PATTERN,
    ParticipantEntity,
)


class ParticipantCreateRequest(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    email: str = Field(pattern=EMAIL_PATTERN.pattern, max_length=255)
    phone: Optional[str] = Field(default=None, pattern=PHONE_PATTERN.pattern, max_length=50)

    class Config:
        json_schema_extra = {
            'example': {
                'name': 'Ada Lovelace',
                'email': 'ada@example.com',
                'phone': '+886 912 345 678',
            }
        }


class ParticipantUpdateRequest(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    email: Optional[str] = Field(default=None, pattern=EMAIL_PATTERN.pattern, max_length=255)
    phone: Optional[str] = Field(default=None, pattern=PHONE_PATTERN.pattern, max_length=50)

    @model_validator(mode='after')
    def check_not_empty(self) -> 'ParticipantUpdateRequest':
        if all(getattr(self, name) is None for name in self.model_fields_set):
            raise ValueError('At least one field must be provided')
        return self


class ParticipantResponse(BaseModel):
    id: UUID
    name: str
    email: str
    phone: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_entity(cls, participant: ParticipantEntity) -> 'ParticipantResponse':
        return cls(
            id=participant.id,
            name=participant.name,
            email=participant.email,
            phone=participant.phone,
            created_at=participant.created_at,
            updated_at=participant.updated_at,
        )
