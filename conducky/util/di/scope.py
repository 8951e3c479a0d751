"""Custom Dishka scopes for Conducky."""

from dishka import BaseScope, new_scope


class Scope(BaseScope):  # type: ignore[misc]  # BaseScope is designed to be subclassed
    """Dependency injection scopes.

    Hierarchy: APP -> UOW

    - APP: Application lifetime (config, engine, session factory, encryptor)
    - UOW: Unit of Work (one HTTP request or one CLI command)
    """

    APP = new_scope("APP")
    UOW = new_scope("UOW")
