"""
HTTP tests for the registration routers

The app is built with create_app() and every use case dependency is
overridden with one wired to the in-memory fakes, so the full request path
(validation, routing, error handlers, response models) is exercised.
"""

from datetime import datetime, timedelta, timezone
from uuid import uuid4

from fastapi.testclient import TestClient
import pytest

from eventia.platform.app_factory import create_app
from eventia.service.registration.app.cache_aside import CacheAside
from eventia.service.registration.app.command.cancel_attendance_use_case import (
    CancelAttendanceUseCase,
)
from eventia.service.registration.app.command.create_event_use_case import CreateEventUseCase
from eventia.service.registration.app.command.create_participant_use_case import (
    CreateParticipantUseCase,
)
from eventia.service.registration.app.command.delete_event_use_case import DeleteEventUseCase
from eventia.service.registration.app.command.delete_participant_use_case import (
    DeleteParticipantUseCase,
)
from eventia.service.registration.app.command.register_attendance_use_case import (
    RegisterAttendanceUseCase,
)
from eventia.service.registration.app.command.update_attendance_status_use_case import (
    UpdateAttendanceStatusUseCase,
)
from eventia.service.registration.app.command.update_event_use_case import UpdateEventUseCase
from eventia.service.registration.app.command.update_participant_use_case import (
    UpdateParticipantUseCase,
)
from eventia.service.registration.app.query.get_event_use_case import GetEventUseCase
from eventia.service.registration.app.query.list_attendances_use_case import (
    ListAttendancesUseCase,
)
from eventia.service.registration.app.query.list_events_use_case import ListEventsUseCase
from eventia.service.registration.app.query.participant_query_use_case import (
    ParticipantQueryUseCase,
)
from eventia.service.registration.driven_adapter.cache.in_memory_cache_handler_impl import (
    InMemoryCacheHandlerImpl,
)


pytestmark = pytest.mark.api


@pytest.fixture
def client(uow_factory, event_repo, participant_repo, attendance_repo, settings):
    cache_aside = CacheAside(cache=InMemoryCacheHandlerImpl())
    commands = {'uow_factory': uow_factory, 'cache_aside': cache_aside}
    queries = {'cache_aside': cache_aside, 'settings': settings}

    app = create_app(title_suffix=' (Test)')
    overrides = {
        CreateEventUseCase.depends: lambda: CreateEventUseCase(**commands),
        UpdateEventUseCase.depends: lambda: UpdateEventUseCase(**commands),
        DeleteEventUseCase.depends: lambda: DeleteEventUseCase(**commands),
        CreateParticipantUseCase.depends: lambda: CreateParticipantUseCase(**commands),
        UpdateParticipantUseCase.depends: lambda: UpdateParticipantUseCase(**commands),
        DeleteParticipantUseCase.depends: lambda: DeleteParticipantUseCase(**commands),
        RegisterAttendanceUseCase.depends: lambda: RegisterAttendanceUseCase(**commands),
        CancelAttendanceUseCase.depends: lambda: CancelAttendanceUseCase(**commands),
        UpdateAttendanceStatusUseCase.depends: lambda: UpdateAttendanceStatusUseCase(**commands),
        GetEventUseCase.depends: lambda: GetEventUseCase(event_repo=event_repo, **queries),
        ListEventsUseCase.depends: lambda: ListEventsUseCase(event_repo=event_repo, **queries),
        ListAttendancesUseCase.depends: lambda: ListAttendancesUseCase(
            attendance_repo=attendance_repo, **queries
        ),
        ParticipantQueryUseCase.depends: lambda: ParticipantQueryUseCase(
            participant_repo=participant_repo, **queries
        ),
    }
    app.dependency_overrides.update(overrides)

    with TestClient(app) as test_client:
        yield test_client


def _event_payload(**overrides) -> dict:
    payload = {
        'name': 'PyData Taipei',
        'description': 'Notebooks and coffee',
        'date': (datetime.now(timezone.utc) + timedelta(days=14)).isoformat(),
        'location': 'Taipei',
        'capacity': 2,
    }
    return payload | overrides


def _create_event(client: TestClient, **overrides) -> dict:
    response = client.post('/api/v1/events', json=_event_payload(**overrides))
    assert response.status_code == 201, response.text
    return response.json()


def _create_participant(client: TestClient, email: str) -> dict:
    response = client.post(
        '/api/v1/participants', json={'name': 'Lin', 'email': email, 'phone': '+886 912 345 678'}
    )
    assert response.status_code == 201, response.text
    return response.json()


def _register(client: TestClient, event_id: str, participant_id: str):
    return client.post(
        '/api/v1/attendances', json={'event_id': event_id, 'participant_id': participant_id}
    )


class TestEventApi:
    def test_create_and_get_event(self, client):
        created = _create_event(client)

        response = client.get(f'/api/v1/events/{created["id"]}')

        assert response.status_code == 200
        assert response.json()['available_spots'] == 2

    def test_non_positive_capacity_is_a_400(self, client):
        response = client.post('/api/v1/events', json=_event_payload(capacity=0))

        assert response.status_code == 400
        assert response.json()['kind'] == 'validation'

    def test_past_date_is_a_400(self, client):
        past = (datetime.now(timezone.utc) - timedelta(days=1)).isoformat()

        response = client.post('/api/v1/events', json=_event_payload(date=past))

        assert response.status_code == 400

    def test_unknown_event_is_a_404(self, client):
        response = client.get(f'/api/v1/events/{uuid4()}')

        assert response.status_code == 404
        body = response.json()
        assert body['kind'] == 'not_found'
        assert body['retryable'] is False

    def test_empty_patch_is_a_400(self, client):
        created = _create_event(client)

        response = client.patch(f'/api/v1/events/{created["id"]}', json={})

        assert response.status_code == 400

    def test_patch_with_only_null_fields_is_a_400(self, client):
        created = _create_event(client)

        response = client.patch(
            f'/api/v1/events/{created["id"]}', json={'name': None, 'location': None}
        )

        assert response.status_code == 400
        assert response.json()['kind'] == 'validation'

    def test_patch_ignores_null_next_to_a_real_change(self, client):
        created = _create_event(client)

        response = client.patch(
            f'/api/v1/events/{created["id"]}', json={'name': 'Renamed', 'location': None}
        )

        assert response.status_code == 200
        assert response.json()['name'] == 'Renamed'
        assert response.json()['location'] == created['location']

    def test_delete_event(self, client):
        created = _create_event(client)

        assert client.delete(f'/api/v1/events/{created["id"]}').status_code == 204
        assert client.get(f'/api/v1/events/{created["id"]}').status_code == 404

    def test_available_and_statistics(self, client):
        created = _create_event(client, capacity=4)
        participant = _create_participant(client, 'stats@example.com')
        _register(client, created['id'], participant['id'])

        available = client.get('/api/v1/events/available').json()
        stats = client.get(f'/api/v1/events/{created["id"]}/statistics').json()

        assert [e['id'] for e in available] == [created['id']]
        assert stats['registered_count'] == 1
        assert stats['occupancy_percentage'] == 25.0


class TestParticipantApi:
    def test_duplicate_email_is_a_409(self, client):
        _create_participant(client, 'dup@example.com')

        response = client.post(
            '/api/v1/participants', json={'name': 'Again', 'email': 'DUP@example.com'}
        )

        assert response.status_code == 409
        assert response.json()['kind'] == 'conflict'

    def test_malformed_email_is_a_400(self, client):
        response = client.post('/api/v1/participants', json={'name': 'Bad', 'email': 'nope'})

        assert response.status_code == 400

    def test_lookup_by_email(self, client):
        created = _create_participant(client, 'find@example.com')

        response = client.get('/api/v1/participants/email/find@example.com')

        assert response.status_code == 200
        assert response.json()['id'] == created['id']

    def test_patch_with_only_null_fields_is_a_400(self, client):
        created = _create_participant(client, 'nulls@example.com')

        response = client.patch(f'/api/v1/participants/{created["id"]}', json={'name': None})

        assert response.status_code == 400
        assert client.get(f'/api/v1/participants/{created["id"]}').json()['name'] == 'Lin'


class TestAttendanceApi:
    def test_register_until_full(self, client):
        event = _create_event(client, capacity=1)
        first = _create_participant(client, 'first@example.com')
        second = _create_participant(client, 'second@example.com')

        ok = _register(client, event['id'], first['id'])
        full = _register(client, event['id'], second['id'])

        assert ok.status_code == 201
        assert ok.json()['status'] == 'registered'
        assert full.status_code == 409
        assert full.json()['kind'] == 'capacity_exceeded'
        assert full.json()['retryable'] is True

    def test_duplicate_registration_is_a_409(self, client):
        event = _create_event(client)
        participant = _create_participant(client, 'twice@example.com')
        _register(client, event['id'], participant['id'])

        response = _register(client, event['id'], participant['id'])

        assert response.status_code == 409
        assert response.json()['kind'] == 'already_registered'

    def test_cancel_confirm_attend_flow(self, client):
        event = _create_event(client)
        participant = _create_participant(client, 'flow@example.com')
        attendance = _register(client, event['id'], participant['id']).json()

        confirmed = client.post(f'/api/v1/attendances/{attendance["id"]}/confirm')
        attended = client.post(f'/api/v1/attendances/{attendance["id"]}/attended')
        cancel = client.post(f'/api/v1/attendances/{attendance["id"]}/cancel')

        assert confirmed.json()['status'] == 'confirmed'
        assert attended.json()['status'] == 'attended'
        assert cancel.status_code == 409
        assert cancel.json()['kind'] == 'invalid_status_transition'

    def test_cancel_twice_is_a_409(self, client):
        event = _create_event(client)
        participant = _create_participant(client, 'cancel@example.com')
        attendance = _register(client, event['id'], participant['id']).json()

        client.post(f'/api/v1/attendances/{attendance["id"]}/cancel')
        response = client.post(f'/api/v1/attendances/{attendance["id"]}/cancel')

        assert response.status_code == 409
        assert response.json()['kind'] == 'already_cancelled'
        assert client.get(f'/api/v1/events/{event["id"]}').json()['available_spots'] == 2

    def test_lists_and_statistics(self, client):
        event = _create_event(client)
        participant = _create_participant(client, 'lists@example.com')
        _register(client, event['id'], participant['id'])

        by_event = client.get(f'/api/v1/attendances/event/{event["id"]}').json()
        by_participant = client.get(f'/api/v1/attendances/participant/{participant["id"]}').json()
        stats = client.get(f'/api/v1/attendances/event/{event["id"]}/statistics').json()

        assert len(by_event) == len(by_participant) == 1
        assert stats == {
            'total_registered': 1,
            'confirmed': 0,
            'cancelled': 0,
            'attended': 0,
            'active': 1,
        }

    def test_malformed_uuid_is_a_400(self, client):
        response = client.post('/api/v1/attendances/not-a-uuid/cancel')

        assert response.status_code == 400


def test_health(client):
    assert client.get('/health').json()['status'] == 'healthy'


def test_metrics_exposes_registration_counter(client):
    event = _create_event(client, capacity=1)
    participant = _create_participant(client, 'metrics@example.com')
    _register(client, event['id'], participant['id'])

    body = client.get('/metrics').text

    assert 'eventia_attendance_registrations_total' in body
