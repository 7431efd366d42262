from contextlib import asynccontextmanager
from typing import Any, AsyncContextManager, AsyncIterator, Callable, Mapping

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from eventia.platform.database.db_error_mapping import translate_db_error


class BaseRepoImpl:
    """
    Session handling shared by the repositories.

    Inside a unit of work the UoW assigns `session` and owns commit/rollback.
    Standalone (read paths) each call opens its own session from the factory.
    """

    def __init__(
        self, session_factory: Callable[..., AsyncContextManager[AsyncSession]] | None = None
    ) -> None:
        self.session_factory = session_factory
        self.session: AsyncSession | None = None

    @asynccontextmanager
    async def _get_session(self) -> AsyncIterator[AsyncSession]:
        try:
            if self.session is not None:
                yield self.session
            elif self.session_factory is not None:
                async with self.session_factory() as session:
                    yield session
            else:
                raise RuntimeError('No session or session_factory available')
        except SQLAlchemyError as e:
            translated = translate_db_error(e)
            if translated is e:
                raise
            raise translated from e


def as_row(obj: Any) -> Mapping[str, Any]:
    """Column values of an ORM instance or a RETURNING row mapping"""
    if isinstance(obj, Mapping):
        return obj
    return {column.key: getattr(obj, column.key) for column in obj.__table__.columns}
