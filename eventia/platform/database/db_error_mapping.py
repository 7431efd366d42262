from sqlalchemy import exc as sa_exc

from eventia.platform.exception.exceptions import (
    ConflictError,
    ConnectionTimeoutError,
    CustomBaseError,
    NotFoundError,
)


# Postgres SQLSTATE codes
LOCK_NOT_AVAILABLE = '55P03'
QUERY_CANCELED = '57014'
UNIQUE_VIOLATION = '23505'
FOREIGN_KEY_VIOLATION = '23503'

_TIMEOUT_SQLSTATES = {LOCK_NOT_AVAILABLE, QUERY_CANCELED}


def get_sqlstate(error: sa_exc.DBAPIError) -> str | None:
    # asyncpg errors arrive wrapped by the dialect adapter
    for orig in (error.orig, getattr(error.orig, '__cause__', None)):
        sqlstate = getattr(orig, 'sqlstate', None) or getattr(orig, 'pgcode', None)
        if sqlstate:
            return sqlstate
    return None


def translate_db_error(error: Exception) -> Exception:
    """
    Map storage failures onto the error taxonomy.

    Returns the exception to raise; unmapped errors come back unchanged.
    """
    if isinstance(error, CustomBaseError):
        return error
    if isinstance(error, sa_exc.TimeoutError):
        return ConnectionTimeoutError('Timed out waiting for a database connection')
    if isinstance(error, sa_exc.DBAPIError):
        sqlstate = get_sqlstate(error)
        if sqlstate in _TIMEOUT_SQLSTATES:
            return ConnectionTimeoutError('Timed out waiting for the event lock')
        if sqlstate == UNIQUE_VIOLATION and 'email' in str(error.orig):
            return ConflictError('Email already exists')
        if sqlstate == FOREIGN_KEY_VIOLATION:
            # Parent row removed by a transaction that committed before ours
            detail = str(error.orig)
            if 'participant_id' in detail:
                return NotFoundError('Participant not found', resource='participant')
            if 'event_id' in detail:
                return NotFoundError('Event not found', resource='event')
    return error
