"""RoleAssignment entity and the Scope it is granted at."""

from datetime import UTC, datetime
from uuid import UUID, uuid4

from pydantic import RootModel, model_validator

from conducky.domain.auth.model.role import RoleId, RoleScope
from conducky.domain.auth.model.value import SYSTEM_SCOPE_ID, UserId
from conducky.domain.shared.error import ValidationError
from conducky.domain.shared.model.entity import Entity
from conducky.domain.shared.model.value import ValueObject


class RoleAssignmentId(RootModel[UUID]):
    """Unique identifier for a RoleAssignment."""

    @classmethod
    def generate(cls) -> "RoleAssignmentId":
        return cls(uuid4())

    def __str__(self) -> str:
        return str(self.root)

    def __hash__(self) -> int:
        return hash(self.root)


class Scope(ValueObject):
    """A concrete scope instance: the system singleton, an organization, or an event."""

    type: RoleScope
    id: str

    @model_validator(mode="after")
    def _check_id(self) -> "Scope":
        if self.type == RoleScope.SYSTEM and self.id != SYSTEM_SCOPE_ID:
            raise ValueError(f"System scope id must be {SYSTEM_SCOPE_ID!r}")
        if not self.id:
            raise ValueError("Scope id must not be empty")
        return self

    @classmethod
    def system(cls) -> "Scope":
        return cls(type=RoleScope.SYSTEM, id=SYSTEM_SCOPE_ID)

    @classmethod
    def organization(cls, organization_id: str) -> "Scope":
        return cls(type=RoleScope.ORGANIZATION, id=organization_id)

    @classmethod
    def event(cls, event_id: str) -> "Scope":
        return cls(type=RoleScope.EVENT, id=event_id)

    @classmethod
    def parse(cls, scope_type: str, scope_id: str | None) -> "Scope":
        """Build a Scope from raw API input, mapping failures to ValidationError."""
        try:
            kind = RoleScope(scope_type)
        except ValueError as e:
            raise ValidationError(
                f"Unknown scope type: {scope_type}", field="scope_type"
            ) from e
        if kind == RoleScope.SYSTEM:
            return cls.system()
        if not scope_id:
            raise ValidationError(f"{kind.value} scope requires an id", field="scope_id")
        return cls(type=kind, id=scope_id)

    def __str__(self) -> str:
        return f"{self.type.value}:{self.id}"


class RoleAssignment(Entity):
    """Grant of one role to one user at one scope.

    Never mutated in place: re-granting deletes and re-creates the row.
    """

    id: RoleAssignmentId
    user_id: UserId
    role_id: RoleId
    role_name: str
    scope: Scope
    granted_by: UserId | None = None
    granted_at: datetime

    @classmethod
    def create(
        cls,
        user_id: UserId,
        role_id: RoleId,
        role_name: str,
        scope: Scope,
        granted_by: UserId | None = None,
    ) -> "RoleAssignment":
        return cls(
            id=RoleAssignmentId.generate(),
            user_id=user_id,
            role_id=role_id,
            role_name=role_name,
            scope=scope,
            granted_by=granted_by,
            granted_at=datetime.now(UTC),
        )
