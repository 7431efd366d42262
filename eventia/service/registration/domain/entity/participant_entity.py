from datetime import datetime, timezone
import re
from typing import Optional
from uuid import UUID

import attrs
from uuid_utils.compat import uuid7

from eventia.platform.logging.loguru_io import Logger


EMAIL_PATTERN = re.compile(r'^[^\s@]+@[^\s@]+\.[^\s@]+$')
PHONE_PATTERN = re.compile(r'^\+?[\d\s\-()]{10,}$')


def _validate_name(instance: object, attribute: attrs.Attribute, value: str) -> None:
    if not value or not value.strip():
        raise ValueError('Participant name cannot be empty')


def _validate_email(instance: object, attribute: attrs.Attribute, value: str) -> None:
    if not EMAIL_PATTERN.match(value or ''):
        raise ValueError('Invalid email format')


def _validate_phone(instance: object, attribute: attrs.Attribute, value: Optional[str]) -> None:
    if value is not None and not PHONE_PATTERN.match(value):
        raise ValueError('Invalid phone format')


@attrs.define
class ParticipantEntity:
    name: str = attrs.field(validator=_validate_name)
    email: str = attrs.field(validator=_validate_email)
    phone: Optional[str] = attrs.field(default=None, validator=_validate_phone)
    id: UUID = attrs.field(factory=uuid7)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    @Logger.io
    def create(cls, *, name: str, email: str, phone: Optional[str] = None) -> 'ParticipantEntity':
        now = datetime.now(timezone.utc)
        return cls(
            name=name.strip(),
            email=email.strip().lower(),
            phone=phone,
            created_at=now,
            updated_at=now,
        )

    @Logger.io
    def update_details(
        self,
        *,
        name: Optional[str] = None,
        email: Optional[str] = None,
        phone: Optional[str] = None,
    ) -> 'ParticipantEntity':
        changes: dict = {}
        if name is not None:
            changes['name'] = name.strip()
        if email is not None:
            changes['email'] = email.strip().lower()
        if phone is not None:
            changes['phone'] = phone
        # attrs.evolve re-runs the field validators
        return attrs.evolve(self, **changes, updated_at=datetime.now(timezone.utc))
