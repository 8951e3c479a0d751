"""Tests for the SQL repositories against an in-memory SQLite database."""

from datetime import UTC, datetime
from uuid import uuid4

import pytest
import pytest_asyncio
from sqlalchemy import func, insert, select

from conducky.config import DatabaseConfig
from conducky.domain.auth.model.role import Role, RoleName, RoleScope
from conducky.domain.auth.model.role_assignment import RoleAssignment, Scope
from conducky.domain.auth.model.value import UserId
from conducky.domain.auth.port.role_repository import RoleAssignmentFilter
from conducky.domain.settings.model.setting import SystemSetting
from conducky.domain.settings.port.record_repository import SensitiveRecordKind
from conducky.domain.shared.error import ConflictError, NotFoundError
from conducky.infrastructure.persistence.database import create_db_engine, create_session_factory
from conducky.infrastructure.persistence.migrate import to_sync_url
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
from conducky.infrastructure.persistence.seed import ensure_role_catalog
from conducky.infrastructure.persistence.tables import (
    events_table,
    incident_comments_table,
    incidents_table,
    metadata,
    organizations_table,
    user_roles_table,
    users_table,
)


@pytest_asyncio.fixture
async def engine():
    engine = create_db_engine(DatabaseConfig(url="sqlite+aiosqlite:///:memory:"))
    async with engine.begin() as conn:
        await conn.run_sync(metadata.create_all)
    await ensure_role_catalog(engine)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def session(engine):
    async with create_session_factory(engine)() as session:
        yield session


async def make_user(session) -> UserId:
    user_id = UserId.generate()
    await session.execute(
        insert(users_table).values(
            id=str(user_id),
            email=f"{user_id}@example.com",
            name="Test",
            created_at=datetime.now(UTC),
        )
    )
    return user_id


class TestRoleCatalogSeed:
    @pytest.mark.asyncio
    async def test_seed_is_idempotent(self, engine, session):
        assert await ensure_role_catalog(engine) == 0

        roles = await SqlRoleRepository(session).list_all()
        assert {r.name for r in roles} == set(RoleName)
        assert roles[0].name == RoleName.SYSTEM_ADMIN

    @pytest.mark.asyncio
    async def test_duplicate_role_name_conflicts(self, session):
        with pytest.raises(ConflictError):
            await SqlRoleRepository(session).save(
                Role.create(RoleName.REPORTER, RoleScope.EVENT, 5)
            )


class TestSqlRoleAssignmentRepository:
    @pytest.mark.asyncio
    async def test_save_and_list(self, session):
        user_id = await make_user(session)
        role = await SqlRoleRepository(session).get_by_name(RoleName.RESPONDER)
        repo = SqlRoleAssignmentRepository(session)

        await repo.save(
            RoleAssignment.create(user_id, role.id, role.name, Scope.event("event-1"))
        )

        (assignment,) = await repo.list_for_user(user_id)
        assert assignment.role_name == "responder"
        assert assignment.scope == Scope.event("event-1")
        assert assignment.granted_by is None

    @pytest.mark.asyncio
    async def test_duplicate_grant_rejected(self, session):
        """The same (user, role, scope) tuple never produces two rows."""
        user_id = await make_user(session)
        role = await SqlRoleRepository(session).get_by_name(RoleName.REPORTER)
        repo = SqlRoleAssignmentRepository(session)
        scope = Scope.event("event-1")

        await repo.save(RoleAssignment.create(user_id, role.id, role.name, scope))
        with pytest.raises(ConflictError) as exc_info:
            await repo.save(RoleAssignment.create(user_id, role.id, role.name, scope))

        assert exc_info.value.code == "role_already_assigned"
        count = await session.scalar(
            select(func.count()).select_from(user_roles_table).where(
                user_roles_table.c.user_id == str(user_id)
            )
        )
        assert count == 1

    @pytest.mark.asyncio
    async def test_unknown_user_is_not_found(self, session):
        role = await SqlRoleRepository(session).get_by_name(RoleName.RESPONDER)
        repo = SqlRoleAssignmentRepository(session)
        ghost = UserId.generate()

        with pytest.raises(NotFoundError) as exc_info:
            await repo.save(RoleAssignment.create(ghost, role.id, role.name, Scope.event("e")))

        assert exc_info.value.code == "user_not_found"
        assert await repo.list_for_user(ghost) == []

    @pytest.mark.asyncio
    async def test_unknown_granter_is_not_found(self, session):
        user_id = await make_user(session)
        role = await SqlRoleRepository(session).get_by_name(RoleName.RESPONDER)
        repo = SqlRoleAssignmentRepository(session)

        with pytest.raises(NotFoundError) as exc_info:
            await repo.save(
                RoleAssignment.create(
                    user_id, role.id, role.name, Scope.event("e"), granted_by=UserId.generate()
                )
            )

        assert exc_info.value.code == "user_not_found"
        assert await repo.list_for_user(user_id) == []

    @pytest.mark.asyncio
    async def test_same_role_at_two_scopes(self, session):
        user_id = await make_user(session)
        role = await SqlRoleRepository(session).get_by_name(RoleName.REPORTER)
        repo = SqlRoleAssignmentRepository(session)

        await repo.save(RoleAssignment.create(user_id, role.id, role.name, Scope.event("a")))
        await repo.save(RoleAssignment.create(user_id, role.id, role.name, Scope.event("b")))

        assert len(await repo.list_for_user(user_id)) == 2

    @pytest.mark.asyncio
    async def test_filter(self, session):
        user_id = await make_user(session)
        roles = SqlRoleRepository(session)
        viewer = await roles.get_by_name(RoleName.ORG_VIEWER)
        reporter = await roles.get_by_name(RoleName.REPORTER)
        repo = SqlRoleAssignmentRepository(session)
        await repo.save(
            RoleAssignment.create(user_id, viewer.id, viewer.name, Scope.organization("o"))
        )
        await repo.save(
            RoleAssignment.create(user_id, reporter.id, reporter.name, Scope.event("e"))
        )

        by_type = await repo.list_for_user(
            user_id, RoleAssignmentFilter(scope_type=RoleScope.ORGANIZATION)
        )
        by_name = await repo.list_for_user(
            user_id, RoleAssignmentFilter(role_names=frozenset({"reporter"}))
        )

        assert [a.role_name for a in by_type] == ["org_viewer"]
        assert [a.scope.id for a in by_name] == ["e"]

    @pytest.mark.asyncio
    async def test_delete(self, session):
        user_id = await make_user(session)
        role = await SqlRoleRepository(session).get_by_name(RoleName.REPORTER)
        repo = SqlRoleAssignmentRepository(session)
        scope = Scope.event("event-1")
        await repo.save(RoleAssignment.create(user_id, role.id, role.name, scope))

        assert await repo.delete(user_id, role.id, scope) is True
        assert await repo.delete(user_id, role.id, scope) is False
        assert await repo.list_for_user(user_id) == []


class TestSqlEventRepositories:
    @pytest.mark.asyncio
    async def test_lookups(self, session):
        now = datetime.now(UTC)
        await session.execute(
            insert(organizations_table).values(id="org-1", slug="acme", name="Acme", created_at=now)
        )
        await session.execute(
            insert(events_table).values(
                id="event-1", slug="pycon", name="PyCon", organization_id="org-1", created_at=now
            )
        )
        lookup = SqlEventLookup(session)

        assert await lookup.get_event_id_by_slug("pycon") == "event-1"
        assert await lookup.get_event_id_by_slug("nope") is None
        assert await lookup.get_organization_id("event-1") == "org-1"
        assert await lookup.get_organization_id("nope") is None

    @pytest.mark.asyncio
    async def test_contact_emails(self, session):
        await session.execute(
            insert(events_table).values(
                id=str(uuid4()),
                slug="conf",
                name="Conf",
                contact_email="team@example.com",
                created_at=datetime.now(UTC),
            )
        )
        repo = SqlEventContactRepository(session)

        ((event_id, email),) = await repo.list_contact_emails()
        await repo.set_contact_email(event_id, "encrypted")

        assert email == "team@example.com"
        assert await repo.list_contact_emails() == [(event_id, "encrypted")]


class TestSqlSensitiveRecordRepository:
    @pytest.mark.asyncio
    async def test_list_and_update(self, session):
        now = datetime.now(UTC)
        await session.execute(
            insert(events_table).values(id="event-1", slug="pycon", name="PyCon", created_at=now)
        )
        await session.execute(
            insert(incidents_table).values(
                id="inc-1", event_id="event-1", description="d", parties=None, created_at=now
            )
        )
        await session.execute(
            insert(incident_comments_table).values(
                id="c-1", incident_id="inc-1", body="b", created_at=now
            )
        )
        repo = SqlSensitiveRecordRepository(session)

        await repo.update_fields(SensitiveRecordKind.COMMENT, "c-1", {"body": "sealed"})

        assert await repo.list_sensitive_fields(SensitiveRecordKind.INCIDENT) == [
            ("inc-1", {"description": "d", "parties": None, "location": None})
        ]
        assert await repo.list_sensitive_fields(SensitiveRecordKind.COMMENT) == [
            ("c-1", {"body": "sealed"})
        ]

    @pytest.mark.asyncio
    async def test_update_rejects_other_columns(self, session):
        repo = SqlSensitiveRecordRepository(session)

        with pytest.raises(ValueError):
            await repo.update_fields(SensitiveRecordKind.INCIDENT, "inc-1", {"event_id": "x"})


class TestSqlSettingsRepository:
    @pytest.mark.asyncio
    async def test_upsert_inserts_then_updates(self, session):
        repo = SqlSettingsRepository(session)

        await repo.upsert(SystemSetting(key="email", value='{"a": 1}'))
        await repo.upsert(SystemSetting(key="email", value='{"a": 2}'))

        setting = await repo.get("email")
        assert setting.parse() == {"a": 2}
        assert await repo.list_keys() == ["email"]
        assert await repo.get("missing") is None


class TestToSyncUrl:
    def test_drivers_are_stripped(self):
        assert to_sync_url("sqlite+aiosqlite:///./x.db") == "sqlite:///./x.db"
        assert to_sync_url("postgresql+asyncpg://u@h/db") == "postgresql://u@h/db"
