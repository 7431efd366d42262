from abc import ABC, abstractmethod
from typing import List
from uuid import UUID

from eventia.service.registration.domain.entity.participant_entity import ParticipantEntity


class IParticipantRepo(ABC):
    @abstractmethod
    async def create(self, *, participant: ParticipantEntity) -> ParticipantEntity:
        pass

    @abstractmethod
    async def get_by_id(self, *, participant_id: UUID) -> ParticipantEntity | None:
        pass

    @abstractmethod
    async def get_by_email(self, *, email: str) -> ParticipantEntity | None:
        pass

    @abstractmethod
    async def list_all(self) -> List[ParticipantEntity]:
        pass

    @abstractmethod
    async def update(self, *, participant: ParticipantEntity) -> ParticipantEntity:
        pass

    @abstractmethod
    async def delete(self, *, participant_id: UUID) -> bool:
        pass

    @abstractmethod
    async def lock_by_id(
        self, *, participant_id: UUID, key_share: bool = False
    ) -> ParticipantEntity | None:
        """
        Read the participant row under a row lock held until the transaction ends

        key_share=False takes FOR UPDATE (deletion). key_share=True takes
        FOR KEY SHARE, which many registrations can hold at once but which
        blocks, and is blocked by, a deletion of the same participant.

        Lock order across the service is participant row, then event row.
        """
        pass
