from datetime import datetime, timezone
from typing import Optional
from uuid import UUID

import attrs
from uuid_utils.compat import uuid7

from eventia.platform.exception.exceptions import CapacityExceededError, DomainError
from eventia.platform.logging.loguru_io import Logger


def _validate_non_empty_string(instance: object, attribute: attrs.Attribute, value: str) -> None:
    if not value or not value.strip():
        raise ValueError(f'Event {attribute.name} cannot be empty')


@attrs.define
class EventEntity:
    name: str = attrs.field(validator=_validate_non_empty_string)
    date: datetime
    location: str = attrs.field(validator=_validate_non_empty_string)
    capacity: int
    available_spots: int
    description: Optional[str] = None
    id: UUID = attrs.field(factory=uuid7)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def __attrs_post_init__(self) -> None:
        if self.capacity <= 0:
            raise DomainError('Capacity must be greater than 0')
        if not 0 <= self.available_spots <= self.capacity:
            raise DomainError('Available spots must be between 0 and capacity')

    @classmethod
    @Logger.io
    def create(
        cls,
        *,
        name: str,
        date: datetime,
        location: str,
        capacity: int,
        description: Optional[str] = None,
    ) -> 'EventEntity':
        if capacity <= 0:
            raise DomainError('Capacity must be greater than 0')
        date = _as_aware(date)
        now = datetime.now(timezone.utc)
        if date < now:
            raise DomainError('Event date cannot be in the past')

        return cls(
            name=name,
            description=description,
            date=date,
            location=location,
            capacity=capacity,
            available_spots=capacity,
            created_at=now,
            updated_at=now,
        )

    @property
    def occupied_spots(self) -> int:
        return self.capacity - self.available_spots

    @property
    def is_full(self) -> bool:
        return self.available_spots <= 0

    @property
    def occupancy_percentage(self) -> float:
        return round(self.occupied_spots / self.capacity * 100, 2)

    @Logger.io
    def take_spot(self) -> 'EventEntity':
        """
        Consume one seat.

        Raises:
            CapacityExceededError: When no seat is left
        """
        if self.is_full:
            raise CapacityExceededError(f'Event {self.id} is at full capacity')
        return attrs.evolve(
            self, available_spots=self.available_spots - 1, updated_at=datetime.now(timezone.utc)
        )

    @Logger.io
    def release_spot(self) -> 'EventEntity':
        if self.available_spots >= self.capacity:
            raise DomainError('Cannot release a seat that was never taken')
        return attrs.evolve(
            self, available_spots=self.available_spots + 1, updated_at=datetime.now(timezone.utc)
        )

    @Logger.io
    def update_details(
        self,
        *,
        active_count: int,
        name: Optional[str] = None,
        description: Optional[str] = None,
        date: Optional[datetime] = None,
        location: Optional[str] = None,
        capacity: Optional[int] = None,
    ) -> 'EventEntity':
        """
        Apply a partial update.

        A capacity change re-derives available spots from the number of
        active (non-cancelled) attendances, which must still fit.

        Raises:
            DomainError: When capacity is not positive or below active_count
        """
        changes: dict = {}
        if name is not None:
            changes['name'] = name
        if description is not None:
            changes['description'] = description
        if date is not None:
            changes['date'] = _as_aware(date)
        if location is not None:
            changes['location'] = location
        if capacity is not None:
            if capacity <= 0:
                raise DomainError('Capacity must be greater than 0')
            if capacity < active_count:
                raise DomainError(
                    f'Cannot reduce capacity below current registrations ({active_count})'
                )
            changes['capacity'] = capacity
            changes['available_spots'] = capacity - active_count

        return attrs.evolve(self, **changes, updated_at=datetime.now(timezone.utc))


def _as_aware(value: datetime) -> datetime:
    return value if value.tzinfo else value.replace(tzinfo=timezone.utc)
