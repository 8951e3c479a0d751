"""Value objects for the auth domain."""

from uuid import UUID, uuid4

from pydantic import RootModel


class UserId(RootModel[UUID]):
    """Unique identifier for a User."""

    @classmethod
    def generate(cls) -> "UserId":
        return cls(uuid4())

    def __str__(self) -> str:
        return str(self.root)

    def __hash__(self) -> int:
        return hash(self.root)


SYSTEM_SCOPE_ID = "SYSTEM"
"""Sentinel scope id for assignments held at the singleton system scope."""
