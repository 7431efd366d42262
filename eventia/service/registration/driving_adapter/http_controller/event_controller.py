from datetime import date
from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, status

from eventia.platform.logging.loguru_io import Logger
from eventia.service.registration.app.command.create_event_use_case import CreateEventUseCase
from eventia.service.registration.app.command.delete_event_use_case import DeleteEventUseCase
from eventia.service.registration.app.command.update_event_use_case import UpdateEventUseCase
from eventia.service.registration.app.query.get_event_use_case import GetEventUseCase
from eventia.service.registration.app.query.list_events_use_case import ListEventsUseCase
from eventia.service.registration.driving_adapter.http_controller.schema.event_schema import (
    EventCreateRequest,
    EventResponse,
    EventStatisticsResponse,
    EventUpdateRequest,
)


router = APIRouter()


@router.post('', status_code=status.HTTP_201_CREATED)
@Logger.io
async def create_event(
    request: EventCreateRequest,
    use_case: CreateEventUseCase = Depends(CreateEventUseCase.depends),
) -> EventResponse:
    event = await use_case.execute(
        name=request.name,
        description=request.description,
        date=request.date,
        location=request.location,
        capacity=request.capacity,
    )
    return EventResponse.from_entity(event)


@router.get('', status_code=status.HTTP_200_OK)
@Logger.io
async def list_events(
    use_case: ListEventsUseCase = Depends(ListEventsUseCase.depends),
) -> List[EventResponse]:
    events = await use_case.list_all()
    return [EventResponse.from_entity(e) for e in events]


@router.get('/available', status_code=status.HTTP_200_OK)
@Logger.io
async def list_available_events(
    use_case: ListEventsUseCase = Depends(ListEventsUseCase.depends),
) -> List[EventResponse]:
    events = await use_case.list_available()
    return [EventResponse.from_entity(e) for e in events]


@router.get('/date/{day}', status_code=status.HTTP_200_OK)
@Logger.io
async def list_events_by_date(
    day: date,
    use_case: ListEventsUseCase = Depends(ListEventsUseCase.depends),
) -> List[EventResponse]:
    events = await use_case.list_by_date(day=day)
    return [EventResponse.from_entity(e) for e in events]


@router.get('/{event_id}', status_code=status.HTTP_200_OK)
@Logger.io
async def get_event(
    event_id: UUID,
    use_case: GetEventUseCase = Depends(GetEventUseCase.depends),
) -> EventResponse:
    event = await use_case.get_by_id(event_id=event_id)
    return EventResponse.from_entity(event)


@router.get('/{event_id}/statistics', status_code=status.HTTP_200_OK)
@Logger.io
async def get_event_statistics(
    event_id: UUID,
    use_case: GetEventUseCase = Depends(GetEventUseCase.depends),
) -> EventStatisticsResponse:
    stats = await use_case.statistics(event_id=event_id)
    return EventStatisticsResponse(
        event=EventResponse.from_entity(stats.event),
        occupancy_percentage=stats.occupancy_percentage,
        registered_count=stats.registered_count,
        available_spots=stats.available_spots,
    )


@router.patch('/{event_id}', status_code=status.HTTP_200_OK)
@Logger.io
async def update_event(
    event_id: UUID,
    request: EventUpdateRequest,
    use_case: UpdateEventUseCase = Depends(UpdateEventUseCase.depends),
) -> EventResponse:
    event = await use_case.execute(event_id=event_id, **request.model_dump(exclude_unset=True))
    return EventResponse.from_entity(event)


@router.delete('/{event_id}', status_code=status.HTTP_204_NO_CONTENT)
@Logger.io
async def delete_event(
    event_id: UUID,
    use_case: DeleteEventUseCase = Depends(DeleteEventUseCase.depends),
) -> None:
    await use_case.execute(event_id=event_id)
