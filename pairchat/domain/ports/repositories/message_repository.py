"""
Message Repository Port - Interface for message persistence.
Implementation: pairchat/infrastructure/persistence/sqlalchemy_message_repository.py

Every method raises PersistenceError when the store fails or times out.
"""

from abc import ABC, abstractmethod

from pairchat.domain.entities.message import Message
from pairchat.domain.value_objects.message_id import MessageId
from pairchat.domain.value_objects.reaction import Reaction


class MessageRepository(ABC):
    @abstractmethod
    async def add(self, message: Message) -> Message:
        """Store a new message; returns it with id and created_at assigned."""

    @abstractmethod
    async def list_all(self) -> list[Message]:
        """All messages, oldest first."""

    @abstractmethod
    async def get_reactions(
        self, message_id: MessageId, for_update: bool = False
    ) -> list[Reaction]:
        """Raises EntityNotFoundError when the message does not exist."""

    @abstractmethod
    async def replace_reactions(
        self, message_id: MessageId, reactions: list[Reaction]
    ) -> None: ...
