from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, status

from eventia.platform.logging.loguru_io import Logger
from eventia.service.registration.app.command.create_participant_use_case import (
    CreateParticipantUseCase,
)
from eventia.service.registration.app.command.delete_participant_use_case import (
    DeleteParticipantUseCase,
)
from eventia.service.registration.app.command.update_participant_use_case import (
    UpdateParticipantUseCase,
)
from eventia.service.registration.app.query.participant_query_use_case import (
    ParticipantQueryUseCase,
)
from eventia.service.registration.driving_adapter.http_controller.schema.participant_schema import (
    ParticipantCreateRequest,
    ParticipantResponse,
    ParticipantUpdateRequest,
)


router = APIRouter()


@router.post('', status_code=status.HTTP_201_CREATED)
@Logger.io
async def create_participant(
    request: ParticipantCreateRequest,
    use_case: CreateParticipantUseCase = Depends(CreateParticipantUseCase.depends),
) -> ParticipantResponse:
    participant = await use_case.execute(
        name=request.name, email=request.email, phone=request.phone
    )
    return ParticipantResponse.from_entity(participant)


@router.get('', status_code=status.HTTP_200_OK)
@Logger.io
async def list_participants(
    use_case: ParticipantQueryUseCase = Depends(ParticipantQueryUseCase.depends),
) -> List[ParticipantResponse]:
    participants = await use_case.list_all()
    return [ParticipantResponse.from_entity(p) for p in participants]


@router.get('/email/{email}', status_code=status.HTTP_200_OK)
@Logger.io
async def get_participant_by_email(
    email: str,
    use_case: ParticipantQueryUseCase = Depends(ParticipantQueryUseCase.depends),
) -> ParticipantResponse:
    participant = await use_case.get_by_email(email=email)
    return ParticipantResponse.from_entity(participant)


@router.get('/{participant_id}', status_code=status.HTTP_200_OK)
@Logger.io
async def get_participant(
    participant_id: UUID,
    use_case: ParticipantQueryUseCase = Depends(ParticipantQueryUseCase.depends),
) -> ParticipantResponse:
    participant = await use_case.get_by_id(participant_id=participant_id)
    return ParticipantResponse.from_entity(participant)


@router.patch('/{participant_id}', status_code=status.HTTP_200_OK)
@Logger.io
async def update_participant(
    participant_id: UUID,
    request: ParticipantUpdateRequest,
    use_case: UpdateParticipantUseCase = Depends(UpdateParticipantUseCase.depends),
) -> ParticipantResponse:
    participant = await use_case.execute(
        participant_id=participant_id, **request.model_dump(exclude_unset=True)
    )
    return ParticipantResponse.from_entity(participant)


@router.delete('/{participant_id}', status_code=status.HTTP_204_NO_CONTENT)
@Logger.io
async def delete_participant(
    participant_id: UUID,
    use_case: DeleteParticipantUseCase = Depends(DeleteParticipantUseCase.depends),
) -> None:
    await use_case.execute(participant_id=participant_id)
