from pydantic import BaseModel, ConfigDict


class Entity(BaseModel):
    """Base for domain entities: identity-bearing, validated on assignment."""

    model_config = ConfigDict(validate_assignment=True)
