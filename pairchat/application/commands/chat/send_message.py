"""
Send Message Command - persist a chat message and broadcast it to everyone.

Flow:
  bound sender → validate body → snapshot replyTo → store → broadcast

The broadcast always happens once validation passes. When the store write
fails the message still goes out with `id: null`, a local timestamp and
`persisted: false`.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Optional, Union

from pairchat.application.common.interfaces import Command, CommandHandler
from pairchat.application.dto.chat import ChatMessageEvent
from pairchat.application.services.session_registry import SessionRegistry
from pairchat.domain.entities.message import Message
from pairchat.domain.exceptions import DomainValidationError, PersistenceError
from pairchat.domain.ports.event_bus import EventBus
from pairchat.domain.ports.repositories import MessageRepository
from pairchat.domain.value_objects.reply_snapshot import ReplySnapshot
from pairchat.observability.metrics import (
    MessageOutcome,
    StoreOperation,
    increment_message,
    increment_store_error,
)

logger = logging.getLogger(__name__)

CHAT_MESSAGE_EVENT = "chat message"


@dataclass(frozen=True)
class Persisted:
    """The store accepted the message; id and created_at are set."""

    message: Message

    @property
    def timestamp(self) -> datetime:
        return self.message.created_at


@dataclass(frozen=True)
class Unpersisted:
    """The store failed; the message was broadcast without an id."""

    message: Message
    fallback_timestamp: datetime
    error: str

    @property
    def timestamp(self) -> datetime:
        return self.fallback_timestamp


PersistOutcome = Union[Persisted, Unpersisted]


@dataclass(frozen=True)
class SendMessageCommand(Command[Optional[PersistOutcome]]):
    connection_id: str
    body: Any
    reply_to: Any = None


class SendMessageHandler(CommandHandler[Optional[PersistOutcome]]):
    def __init__(
        self,
        registry: SessionRegistry,
        msg_repo: MessageRepository,
        event_bus: EventBus,
        max_length: Optional[int] = None,
    ):
        self._registry = registry
        self._msg_repo = msg_repo
        self._event_bus = event_bus
        self._max_length = max_length

    async def execute(self, command: SendMessageCommand) -> Optional[PersistOutcome]:
        """
        Returns:
            Persisted / Unpersisted, or None when the event was dropped
        """
        sender = self._registry.identity_of(command.connection_id)
        try:
            message = Message.create(
                sender=sender,
                body=command.body,
                reply_snapshot=ReplySnapshot.from_payload(command.reply_to),
                max_length=self._max_length,
            )
        except DomainValidationError as e:
            logger.debug("Dropping chat message on %s: %s", command.connection_id, e.message)
            return None

        outcome = await self._persist(message)
        event = ChatMessageEvent.from_domain(
            outcome.message,
            timestamp=outcome.timestamp,
            persisted=isinstance(outcome, Persisted),
        )
        await self._event_bus.emit_all(CHAT_MESSAGE_EVENT, event.to_payload())
        return outcome

    async def _persist(self, message: Message) -> PersistOutcome:
        try:
            stored = await self._msg_repo.add(message)
        except PersistenceError as e:
            logger.error("Message from %s not stored, broadcasting anyway: %s", message.sender, e)
            increment_store_error(StoreOperation.PERSIST)
            increment_message(MessageOutcome.UNPERSISTED)
            return Unpersisted(
                message=message,
                fallback_timestamp=datetime.now(timezone.utc),
                error=e.message,
            )
        increment_message(MessageOutcome.PERSISTED)
        return Persisted(message=stored)
