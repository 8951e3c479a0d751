"""Query and QueryHandler base classes; same __auth__ gate as commands."""

from abc import abstractmethod
from typing import Generic, TypeVar

from pydantic import BaseModel

from conducky.domain.shared.command import HandlerMeta


class Query(BaseModel): ...


class Result(BaseModel): ...


Q = TypeVar("Q", bound=Query)
R = TypeVar("R", bound=Result)


class QueryHandler(Generic[Q, R], metaclass=HandlerMeta):
    @abstractmethod
    async def run(self, cmd: Q) -> R: ...
