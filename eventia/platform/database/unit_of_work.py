"""
Unit of Work Pattern - one transaction shared by the registration repositories

Architecture:
- UoW owns the session lifecycle and the transaction
- Repositories receive the shared session from the UoW
- Use cases coordinate repositories inside `async with uow:`
- Leaving the block without commit() rolls everything back
"""

from __future__ import annotations

import abc
from typing import TYPE_CHECKING, AsyncContextManager, Callable, Optional

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from eventia.platform.database.db_error_mapping import translate_db_error
from eventia.platform.logging.loguru_io import Logger


if TYPE_CHECKING:
    from eventia.service.registration.app.interface.i_attendance_repo import IAttendanceRepo
    from eventia.service.registration.app.interface.i_event_repo import IEventRepo
    from eventia.service.registration.app.interface.i_participant_repo import IParticipantRepo


class AbstractUnitOfWork(abc.ABC):
    """
    Abstract Unit of Work for the registration service

    Usage:
        async with uow:
            event = await uow.event_repo.lock_by_id(event_id=...)
            await uow.event_repo.adjust_available_spots(event_id=..., delta=-1)
            await uow.commit()
    """

    event_repo: IEventRepo
    participant_repo: IParticipantRepo
    attendance_repo: IAttendanceRepo

    async def __aenter__(self) -> AbstractUnitOfWork:
        return self

    async def __aexit__(self, *args):
        await self.rollback()

    async def commit(self):
        """Commit the transaction"""
        await self._commit()

    @abc.abstractmethod
    async def _commit(self) -> None:
        raise NotImplementedError

    @abc.abstractmethod
    async def rollback(self) -> None:
        raise NotImplementedError


class SqlAlchemyUnitOfWork(AbstractUnitOfWork):
    """
    SQLAlchemy implementation of Unit of Work

    Entering checks out a connection right away, so a saturated pool fails
    fast with ConnectionTimeoutError before any work is done, and bounds row
    lock waits with `SET LOCAL lock_timeout`.
    """

    def __init__(
        self,
        session_factory: Callable[[], AsyncContextManager[AsyncSession]],
        *,
        lock_timeout_ms: int = 5000,
    ) -> None:
        self.session_factory = session_factory
        self.lock_timeout_ms = lock_timeout_ms
        self._session_cm: Optional[AsyncContextManager[AsyncSession]] = None
        self.session: Optional[AsyncSession] = None

    async def __aenter__(self) -> SqlAlchemyUnitOfWork:
        from eventia.service.registration.driven_adapter.repo.attendance_repo_impl import (
            AttendanceRepoImpl,
        )
        from eventia.service.registration.driven_adapter.repo.event_repo_impl import (
            EventRepoImpl,
        )
        from eventia.service.registration.driven_adapter.repo.participant_repo_impl import (
            ParticipantRepoImpl,
        )

        self._session_cm = self.session_factory()
        self.session = await self._session_cm.__aenter__()
        try:
            # lock_timeout takes an integer literal, SET cannot be parameterised
            await self.session.execute(
                text(f"SET LOCAL lock_timeout = '{int(self.lock_timeout_ms)}ms'")
            )
        except SQLAlchemyError as e:
            await self._close()
            raise translate_db_error(e) from e
        except BaseException:
            await self._close()
            raise

        self.event_repo = EventRepoImpl()
        self.event_repo.session = self.session
        self.participant_repo = ParticipantRepoImpl()
        self.participant_repo.session = self.session
        self.attendance_repo = AttendanceRepoImpl()
        self.attendance_repo.session = self.session

        return self

    async def __aexit__(self, exc_type, exc, tb):
        try:
            await super().__aexit__(exc_type, exc, tb)
        finally:
            await self._close()
        if isinstance(exc, SQLAlchemyError):
            translated = translate_db_error(exc)
            if translated is not exc:
                raise translated from exc

    async def _close(self) -> None:
        if self._session_cm is not None:
            session_cm, self._session_cm = self._session_cm, None
            await session_cm.__aexit__(None, None, None)
        self.session = None

    async def _commit(self):
        assert self.session is not None
        await self.session.commit()

    async def rollback(self) -> None:
        if self.session is None:
            return
        if self.session.in_transaction():
            Logger.base.debug('↩️ [UOW] Rolling back open transaction')
        await self.session.rollback()
