"""Command and CommandHandler base classes with authorization gate."""

from abc import ABCMeta, abstractmethod
from collections.abc import Callable, Coroutine
from dataclasses import dataclass
from functools import wraps
from typing import Any, Generic, TypeVar, dataclass_transform

from pydantic import BaseModel


class Command(BaseModel): ...


class Result(BaseModel): ...


C = TypeVar("C", bound=Command)
R = TypeVar("R", bound=Result)

# Unbound async handler method: (self, cmd) -> Coroutine -> Result
_HandlerMethod = Callable[..., Coroutine[Any, Any, Any]]


def _wrap_run_with_auth(original_run: _HandlerMethod) -> _HandlerMethod:
    """Wrap run() so the handler's __auth__ policy is enforced first."""

    @wraps(original_run)
    async def auth_wrapped_run(self: Any, cmd: Any) -> Any:
        from conducky.domain.auth.model.identity import Anonymous
        from conducky.domain.shared.authorization.policy import Policy, Public
        from conducky.domain.shared.error import ConfigurationError

        policy = getattr(type(self), "__auth__", None)
        if not isinstance(policy, Policy):
            raise ConfigurationError(f"Handler {type(self).__name__} has no __auth__ declaration")

        if not isinstance(policy, Public):
            identity = getattr(self, "_identity", None) or Anonymous()
            await policy.enforce(self._gate, identity, cmd)

        return await original_run(self, cmd)

    return auth_wrapped_run


@dataclass_transform()
class HandlerMeta(ABCMeta):
    """Metaclass that combines ABC with auto-dataclass and the __auth__ gate for subclasses."""

    def __new__(mcs, name: str, bases: tuple[type, ...], namespace: dict[str, Any]):
        cls = super().__new__(mcs, name, bases, namespace)
        if any(isinstance(b, mcs) for b in bases):
            cls = dataclass(cls)
            original_run = cls.__dict__.get("run")
            if original_run is not None:
                cls.run = _wrap_run_with_auth(original_run)
        return cls


class CommandHandler(Generic[C, R], metaclass=HandlerMeta):
    """Base class for command handlers. Subclasses are automatically dataclasses.

    Declare __auth__ and the collaborators the gate needs:
        class MyHandler(CommandHandler[MyCmd, MyResult]):
            __auth__ = requires_system_admin()
            _gate: AccessGate
            _identity: Identity
    """

    @abstractmethod
    async def run(self, cmd: C) -> R: ...
