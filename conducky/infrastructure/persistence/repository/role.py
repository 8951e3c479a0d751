"""SQL implementations of RoleRepository and RoleAssignmentRepository."""

from uuid import UUID

from sqlalchemy import delete, insert, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from conducky.domain.auth.model.role import Role, RoleId, RoleScope
from conducky.domain.auth.model.role_assignment import (
    RoleAssignment,
    RoleAssignmentId,
    Scope,
)
from conducky.domain.auth.model.value import UserId
from conducky.domain.auth.port.role_repository import (
    RoleAssignmentFilter,
    RoleAssignmentRepository,
    RoleRepository,
)
from conducky.domain.shared.error import ConflictError, NotFoundError
from conducky.infrastructure.persistence.tables import (
    roles_table,
    user_roles_table,
    users_table,
)


def _row_to_role(row: dict) -> Role:
    return Role(
        id=RoleId(UUID(row["id"])),
        name=row["name"],
        scope=RoleScope(row["scope"]),
        level=row["level"],
        description=row["description"] or "",
    )


def _role_to_dict(role: Role) -> dict:
    return {
        "id": str(role.id),
        "name": role.name,
        "scope": role.scope.value,
        "level": role.level,
        "description": role.description,
    }


def _row_to_role_assignment(row: dict) -> RoleAssignment:
    """Convert a joined user_roles/roles row to a RoleAssignment model."""
    return RoleAssignment(
        id=RoleAssignmentId(UUID(row["id"])),
        user_id=UserId(UUID(row["user_id"])),
        role_id=RoleId(UUID(row["role_id"])),
        role_name=row["role_name"],
        scope=Scope(type=RoleScope(row["scope_type"]), id=row["scope_id"]),
        granted_by=UserId(UUID(row["granted_by"])) if row["granted_by"] else None,
        granted_at=row["granted_at"],
    )


def _role_assignment_to_dict(assignment: RoleAssignment) -> dict:
    return {
        "id": str(assignment.id),
        "user_id": str(assignment.user_id),
        "role_id": str(assignment.role_id),
        "scope_type": assignment.scope.type.value,
        "scope_id": assignment.scope.id,
        "granted_by": str(assignment.granted_by) if assignment.granted_by else None,
        "granted_at": assignment.granted_at,
    }


class SqlRoleRepository(RoleRepository):
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get_by_name(self, name: str) -> Role | None:
        stmt = select(roles_table).where(roles_table.c.name == str(name))
        result = await self.session.execute(stmt)
        row = result.mappings().first()
        return _row_to_role(dict(row)) if row else None

    async def list_all(self) -> list[Role]:
        stmt = select(roles_table).order_by(roles_table.c.level.desc())
        result = await self.session.execute(stmt)
        return [_row_to_role(dict(row)) for row in result.mappings().all()]

    async def save(self, role: Role) -> None:
        try:
            async with self.session.begin_nested():
                await self.session.execute(insert(roles_table).values(**_role_to_dict(role)))
        except IntegrityError as e:
            raise ConflictError(f"Role already exists: {role.name}", code="role_exists") from e


class SqlRoleAssignmentRepository(RoleAssignmentRepository):
    """user_roles joined to roles so every assignment carries its role name."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    def _select(self):
        return select(
            user_roles_table,
            roles_table.c.name.label("role_name"),
        ).join(roles_table, roles_table.c.id == user_roles_table.c.role_id)

    async def list_for_user(
        self,
        user_id: UserId,
        filter: RoleAssignmentFilter | None = None,
    ) -> list[RoleAssignment]:
        stmt = self._select().where(user_roles_table.c.user_id == str(user_id))
        if filter is not None:
            if filter.scope_type is not None:
                stmt = stmt.where(user_roles_table.c.scope_type == filter.scope_type.value)
            if filter.scope_id is not None:
                stmt = stmt.where(user_roles_table.c.scope_id == filter.scope_id)
            if filter.role_names is not None:
                stmt = stmt.where(roles_table.c.name.in_(sorted(filter.role_names)))
            if filter.granted_after is not None:
                stmt = stmt.where(user_roles_table.c.granted_at >= filter.granted_after)
            if filter.granted_before is not None:
                stmt = stmt.where(user_roles_table.c.granted_at < filter.granted_before)
        stmt = stmt.order_by(user_roles_table.c.granted_at)

        result = await self.session.execute(stmt)
        return [_row_to_role_assignment(dict(row)) for row in result.mappings().all()]

    async def _missing_user(self, assignment: RoleAssignment) -> UserId | None:
        """First of user_id/granted_by with no users row, if any."""
        candidates = [assignment.user_id]
        if assignment.granted_by is not None:
            candidates.append(assignment.granted_by)
        stmt = select(users_table.c.id).where(
            users_table.c.id.in_([str(c) for c in candidates])
        )
        found = set((await self.session.execute(stmt)).scalars().all())
        for candidate in candidates:
            if str(candidate) not in found:
                return candidate
        return None

    async def _grant_exists(self, assignment: RoleAssignment) -> bool:
        stmt = select(user_roles_table.c.id).where(
            user_roles_table.c.user_id == str(assignment.user_id),
            user_roles_table.c.role_id == str(assignment.role_id),
            user_roles_table.c.scope_type == assignment.scope.type.value,
            user_roles_table.c.scope_id == assignment.scope.id,
        )
        return (await self.session.execute(stmt)).first() is not None

    async def save(self, assignment: RoleAssignment) -> None:
        stmt = insert(user_roles_table).values(**_role_assignment_to_dict(assignment))
        try:
            async with self.session.begin_nested():
                await self.session.execute(stmt)
        except IntegrityError as e:
            # Foreign-key and unique violations share one exception type
            missing = await self._missing_user(assignment)
            if missing is not None:
                raise NotFoundError(f"User not found: {missing}", code="user_not_found") from e
            if await self._grant_exists(assignment):
                raise ConflictError(
                    f"Role {assignment.role_name} already granted at {assignment.scope}",
                    code="role_already_assigned",
                ) from e
            raise

    async def delete(self, user_id: UserId, role_id: RoleId, scope: Scope) -> bool:
        stmt = delete(user_roles_table).where(
            user_roles_table.c.user_id == str(user_id),
            user_roles_table.c.role_id == str(role_id),
            user_roles_table.c.scope_type == scope.type.value,
            user_roles_table.c.scope_id == scope.id,
        )
        result = await self.session.execute(stmt)
        await self.session.flush()
        return result.rowcount > 0
