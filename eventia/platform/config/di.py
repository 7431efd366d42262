"""
https://python-dependency-injector.ets-labs.org/index.html
https://python-dependency-injector.ets-labs.org/examples/fastapi-sqlalchemy.html
"""

from dependency_injector import containers, providers

from eventia.platform.config.core_setting import Settings
from eventia.platform.database.orm_db_setting import Database
from eventia.platform.database.unit_of_work import SqlAlchemyUnitOfWork
from eventia.platform.state.cache_client import CacheClient
from eventia.service.registration.app.cache_aside import CacheAside
from eventia.service.registration.driven_adapter.repo.attendance_repo_impl import (
    AttendanceRepoImpl,
)
from eventia.service.registration.driven_adapter.repo.event_repo_impl import EventRepoImpl
from eventia.service.registration.driven_adapter.repo.participant_repo_impl import (
    ParticipantRepoImpl,
)


class Container(containers.DeclarativeContainer):
    # Configuration
    config_service = providers.Singleton(Settings)

    # Database (engine + session factory)
    database = providers.Singleton(Database, settings=config_service)

    # Cache (backend chosen in main.py lifespan via cache_client.initialize())
    cache_client = providers.Singleton(CacheClient, settings=config_service)
    cache_aside = providers.Singleton(
        CacheAside,
        cache=cache_client,
        read_timeout=config_service.provided.CACHE_READ_TIMEOUT,
    )

    # Repositories for read paths (standalone session per call)
    event_repo = providers.Singleton(EventRepoImpl, session_factory=database.provided.session)
    participant_repo = providers.Singleton(
        ParticipantRepoImpl, session_factory=database.provided.session
    )
    attendance_repo = providers.Singleton(
        AttendanceRepoImpl, session_factory=database.provided.session
    )

    # Unit of work - new instance per transaction, inject `.provider` to get a factory
    unit_of_work = providers.Factory(
        SqlAlchemyUnitOfWork,
        session_factory=database.provided.session,
        lock_timeout_ms=config_service.provided.DB_LOCK_TIMEOUT_MS,
    )


container = Container()
