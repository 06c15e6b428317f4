"""
Command/query seams shared by every use case.

A command or query is a frozen dataclass; its handler gets collaborators
from the DI container and exposes a single async `execute`. T is what
`execute` hands back to the socket or route that dispatched it.

    @dataclass(frozen=True)
    class TypingCommand(Command[None]):
        connection_id: str
        active: bool
"""
from abc import ABC, abstractmethod
from typing import TypeVar, Generic

T = TypeVar("T")


class Command(ABC, Generic[T]):
    """Changes chat state: messages, reactions, sessions."""


class CommandHandler(ABC, Generic[T]):
    @abstractmethod
    async def execute(self, command: Command[T]) -> T: ...


class Query(ABC, Generic[T]):
    """Reads chat state without touching it."""


class QueryHandler(ABC, Generic[T]):
    @abstractmethod
    async def execute(self, query: Query[T]) -> T: ...
