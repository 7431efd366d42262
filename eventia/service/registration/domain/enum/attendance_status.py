from enum import StrEnum


class AttendanceStatus(StrEnum):
    REGISTERED = 'registered'
    CONFIRMED = 'confirmed'
    CANCELLED = 'cancelled'
    ATTENDED = 'attended'

    @property
    def is_active(self) -> bool:
        return self is not AttendanceStatus.CANCELLED
