from enum import StrEnum


class ErrorKind(StrEnum):
    NOT_FOUND = 'not_found'
    CAPACITY_EXCEEDED = 'capacity_exceeded'
    ALREADY_REGISTERED = 'already_registered'
    ALREADY_CANCELLED = 'already_cancelled'
    INVALID_STATUS_TRANSITION = 'invalid_status_transition'
    CONNECTION_TIMEOUT = 'connection_timeout'
    CACHE_UNAVAILABLE = 'cache_unavailable'
    VALIDATION = 'validation'
    CONFLICT = 'conflict'


class CustomBaseError(Exception):
    """Base class for all custom exceptions - controls logging behavior in @Logger.io"""

    def __init__(
        self,
        message: str,
        status_code: int = 500,
        kind: ErrorKind = ErrorKind.VALIDATION,
        retryable: bool = False,
    ) -> None:
        self.message = message
        self.status_code = status_code
        self.kind = kind
        self.retryable = retryable
        super().__init__(message)


class DomainError(CustomBaseError):
    def __init__(self, message: str, status_code: int = 400) -> None:
        super().__init__(message, status_code, ErrorKind.VALIDATION)


class NotFoundError(CustomBaseError):
    def __init__(self, message: str, resource: str | None = None) -> None:
        self.resource = resource
        super().__init__(message, 404, ErrorKind.NOT_FOUND)


class ConflictError(CustomBaseError):
    def __init__(self, message: str) -> None:
        super().__init__(message, 409, ErrorKind.CONFLICT)


class CapacityExceededError(CustomBaseError):
    """Event has no free seat. Safe to retry once a seat frees up."""

    def __init__(self, message: str = 'Event is at full capacity') -> None:
        super().__init__(message, 409, ErrorKind.CAPACITY_EXCEEDED, retryable=True)


class AlreadyRegisteredError(CustomBaseError):
    def __init__(self, message: str = 'Participant is already registered for this event') -> None:
        super().__init__(message, 409, ErrorKind.ALREADY_REGISTERED)


class AlreadyCancelledError(CustomBaseError):
    def __init__(self, message: str = 'Attendance is already cancelled') -> None:
        super().__init__(message, 409, ErrorKind.ALREADY_CANCELLED)


class InvalidStatusTransitionError(CustomBaseError):
    def __init__(self, message: str) -> None:
        super().__init__(message, 409, ErrorKind.INVALID_STATUS_TRANSITION)


class ConnectionTimeoutError(CustomBaseError):
    """Pool checkout or row lock wait timed out. Nothing was written."""

    def __init__(self, message: str = 'Storage is busy, please retry') -> None:
        super().__init__(message, 503, ErrorKind.CONNECTION_TIMEOUT, retryable=True)


class CacheUnavailableError(CustomBaseError):
    """Raised by cache backends only. Callers treat it as a miss and never surface it."""

    def __init__(self, message: str) -> None:
        super().__init__(message, 503, ErrorKind.CACHE_UNAVAILABLE, retryable=True)
