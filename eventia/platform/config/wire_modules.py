"""
Wire Modules Configuration

Defines the modules that need dependency injection wiring.
Shared between production and test environments.
"""

from types import ModuleType

from eventia.service.registration.app.command import (
    cancel_attendance_use_case,
    create_event_use_case,
    create_participant_use_case,
    delete_event_use_case,
    delete_participant_use_case,
    register_attendance_use_case,
    update_attendance_status_use_case,
    update_event_use_case,
    update_participant_use_case,
)
from eventia.service.registration.app.query import (
    get_event_use_case,
    list_attendances_use_case,
    list_events_use_case,
    participant_query_use_case,
)


WIRE_MODULES: list[ModuleType] = [
    create_event_use_case,
    update_event_use_case,
    delete_event_use_case,
    create_participant_use_case,
    update_participant_use_case,
    delete_participant_use_case,
    register_attendance_use_case,
    cancel_attendance_use_case,
    update_attendance_status_use_case,
    get_event_use_case,
    list_events_use_case,
    list_attendances_use_case,
    participant_query_use_case,
]
