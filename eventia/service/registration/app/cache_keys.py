from uuid import UUID


EVENTS_ALL = 'events:all'
EVENTS_AVAILABLE = 'events:available'
PARTICIPANTS_ALL = 'participants:all'


def event_key(event_id: UUID) -> str:
    return f'event:{event_id}'


def participant_key(participant_id: UUID) -> str:
    return f'participant:{participant_id}'


def event_attendances_key(event_id: UUID) -> str:
    return f'attendances:event:{event_id}'


def seat_change_keys(event_id: UUID) -> tuple[str, ...]:
    """Every cached view that shows an event's seat count or attendance list"""
    return (
        event_key(event_id),
        EVENTS_ALL,
        EVENTS_AVAILABLE,
        event_attendances_key(event_id),
    )
