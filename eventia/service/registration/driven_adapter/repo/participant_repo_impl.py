from typing import Any, List, Mapping
from uuid import UUID

from sqlalchemy import delete, func, select, update

from eventia.platform.logging.loguru_io import Logger
from eventia.service.registration.app.interface.i_participant_repo import IParticipantRepo
from eventia.service.registration.domain.entity.participant_entity import ParticipantEntity
from eventia.service.registration.driven_adapter.model.participant_model import ParticipantModel
from eventia.service.registration.driven_adapter.repo.base_repo_impl import BaseRepoImpl, as_row


_PARTICIPANTS = ParticipantModel.__table__


class ParticipantRepoImpl(BaseRepoImpl, IParticipantRepo):
    @staticmethod
    def _model_to_entity(model: ParticipantModel | Mapping[str, Any]) -> ParticipantEntity:
        row = as_row(model)
        return ParticipantEntity(
            id=row['id'],
            name=row['name'],
            email=row['email'],
            phone=row['phone'],
            created_at=row['created_at'],
            updated_at=row['updated_at'],
        )

    @Logger.io
    async def create(self, *, participant: ParticipantEntity) -> ParticipantEntity:
        async with self._get_session() as session:
            session.add(
                ParticipantModel(
                    id=participant.id,
                    name=participant.name,
                    email=participant.email,
                    phone=participant.phone,
                    created_at=participant.created_at,
                    updated_at=participant.updated_at,
                )
            )
            await session.flush()
            return participant

    async def _get_one(self, *condition: Any) -> ParticipantEntity | None:
        async with self._get_session() as session:
            result = await session.execute(
                select(ParticipantModel)
                .where(*condition)
                .execution_options(populate_existing=True)
            )
            model = result.scalar_one_or_none()
            return self._model_to_entity(model) if model else None

    @Logger.io
    async def get_by_id(self, *, participant_id: UUID) -> ParticipantEntity | None:
        return await self._get_one(ParticipantModel.id == participant_id)

    @Logger.io
    async def lock_by_id(
        self, *, participant_id: UUID, key_share: bool = False
    ) -> ParticipantEntity | None:
        stmt = select(ParticipantModel).where(ParticipantModel.id == participant_id)
        if key_share:
            stmt = stmt.with_for_update(read=True, key_share=True)
        else:
            stmt = stmt.with_for_update()
        async with self._get_session() as session:
            result = await session.execute(stmt.execution_options(populate_existing=True))
            model = result.scalar_one_or_none()
            return self._model_to_entity(model) if model else None

    @Logger.io
    async def get_by_email(self, *, email: str) -> ParticipantEntity | None:
        return await self._get_one(ParticipantModel.email == email.strip().lower())

    @Logger.io
    async def list_all(self) -> List[ParticipantEntity]:
        async with self._get_session() as session:
            result = await session.execute(
                select(ParticipantModel).order_by(ParticipantModel.created_at.desc())
            )
            return [self._model_to_entity(m) for m in result.scalars().all()]

    @Logger.io
    async def update(self, *, participant: ParticipantEntity) -> ParticipantEntity:
        async with self._get_session() as session:
            result = await session.execute(
                update(_PARTICIPANTS)
                .where(_PARTICIPANTS.c.id == participant.id)
                .values(
                    name=participant.name,
                    email=participant.email,
                    phone=participant.phone,
                    updated_at=participant.updated_at or func.now(),
                )
                .returning(*_PARTICIPANTS.c)
            )
            return self._model_to_entity(result.mappings().one())

    @Logger.io
    async def delete(self, *, participant_id: UUID) -> bool:
        async with self._get_session() as session:
            result = await session.execute(
                delete(_PARTICIPANTS).where(_PARTICIPANTS.c.id == participant_id)
            )
            return result.rowcount > 0
