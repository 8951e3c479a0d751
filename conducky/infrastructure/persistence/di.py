from typing import AsyncIterable

from dishka import provide
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from conducky.config import Config
from conducky.domain.auth.port.role_repository import (
    RoleAssignmentRepository,
    RoleRepository,
)
from conducky.domain.auth.port.scope_lookup import EventLookup
from conducky.domain.settings.port.event_repository import EventContactRepository
from conducky.domain.settings.port.record_repository import SensitiveRecordRepository
from conducky.domain.settings.port.repository import SettingsRepository
from conducky.infrastructure.persistence.database import (
    create_db_engine,
    create_session_factory,
)
from conducky.infrastructure.persistence.repository.event import (
    SqlEventContactRepository,
    SqlEventLookup,
)
from conducky.infrastructure.persistence.repository.record import SqlSensitiveRecordRepository
from conducky.infrastructure.persistence.repository.role import (
    SqlRoleAssignmentRepository,
    SqlRoleRepository,
)
from conducky.infrastructure.persistence.repository.settings import SqlSettingsRepository
from conducky.util.di.base import Provider
from conducky.util.di.scope import Scope


class PersistenceProvider(Provider):
    # APP-scoped factories
    @provide(scope=Scope.APP)
    def get_engine(self, config: Config) -> AsyncEngine:
        return create_db_engine(config.database)

    @provide(scope=Scope.APP)
    def get_session_factory(self, engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
        return create_session_factory(engine)

    # UOW-scoped session (one per unit of work)
    @provide(scope=Scope.UOW)
    async def get_session(
        self, session_factory: async_sessionmaker[AsyncSession]
    ) -> AsyncIterable[AsyncSession]:
        async with session_factory() as session:
            yield session
            await session.commit()

    # UOW-scoped repositories
    @provide(scope=Scope.UOW)
    def get_role_repo(self, session: AsyncSession) -> RoleRepository:
        return SqlRoleRepository(session)

    @provide(scope=Scope.UOW)
    def get_role_assignment_repo(self, session: AsyncSession) -> RoleAssignmentRepository:
        return SqlRoleAssignmentRepository(session)

    @provide(scope=Scope.UOW)
    def get_event_lookup(self, session: AsyncSession) -> EventLookup:
        return SqlEventLookup(session)

    @provide(scope=Scope.UOW)
    def get_event_contact_repo(self, session: AsyncSession) -> EventContactRepository:
        return SqlEventContactRepository(session)

    @provide(scope=Scope.UOW)
    def get_settings_repo(self, session: AsyncSession) -> SettingsRepository:
        return SqlSettingsRepository(session)

    @provide(scope=Scope.UOW)
    def get_sensitive_record_repo(self, session: AsyncSession) -> SensitiveRecordRepository:
        return SqlSensitiveRecordRepository(session)
