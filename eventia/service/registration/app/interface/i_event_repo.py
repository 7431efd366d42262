"""
Event Repository Interface

Works inside a unit of work (shared session, row locks honoured) or
standalone through a session factory for read paths.
"""

from abc import ABC, abstractmethod
from datetime import date
from typing import List
from uuid import UUID

from eventia.service.registration.domain.entity.event_entity import EventEntity


class IEventRepo(ABC):
    @abstractmethod
    async def create(self, *, event: EventEntity) -> EventEntity:
        pass

    @abstractmethod
    async def get_by_id(self, *, event_id: UUID) -> EventEntity | None:
        pass

    @abstractmethod
    async def lock_by_id(self, *, event_id: UUID) -> EventEntity | None:
        """
        Read the event row with an exclusive row lock (SELECT ... FOR UPDATE)

        The lock is held until the surrounding transaction commits or rolls
        back; concurrent callers for the same event wait here.

        Returns:
            EventEntity or None if not found
        """
        pass

    @abstractmethod
    async def list_all(self) -> List[EventEntity]:
        """All events, newest date first"""
        pass

    @abstractmethod
    async def list_available(self) -> List[EventEntity]:
        """Future events with at least one free seat, soonest first"""
        pass

    @abstractmethod
    async def list_by_date(self, *, day: date) -> List[EventEntity]:
        pass

    @abstractmethod
    async def update(self, *, event: EventEntity) -> EventEntity:
        pass

    @abstractmethod
    async def delete(self, *, event_id: UUID) -> bool:
        pass

    @abstractmethod
    async def adjust_available_spots(self, *, event_id: UUID, delta: int) -> None:
        """Atomic `available_spots += delta` within the caller's transaction"""
        pass
