"""
Toggle Reaction Command - add or remove the sender's emoji on a message.

Toggles on the same message run one at a time (KeyedLock), and the store
read locks the row, so concurrent toggles never overwrite each other.
Lookup and store failures are logged and nothing is broadcast.
"""

import logging
from dataclasses import dataclass
from typing import Any, Optional

from pairchat.application.common.interfaces import Command, CommandHandler
from pairchat.application.dto.chat import ReactionDTO, ReactionUpdatedEvent
from pairchat.application.services.keyed_lock import KeyedLock
from pairchat.application.services.session_registry import SessionRegistry
from pairchat.domain.exceptions import (
    DomainValidationError,
    EntityNotFoundError,
    PersistenceError,
)
from pairchat.domain.ports.event_bus import EventBus
from pairchat.domain.ports.repositories import MessageRepository
from pairchat.domain.services.reactions import toggle_reaction
from pairchat.domain.value_objects.message_id import MessageId
from pairchat.domain.value_objects.reaction import Reaction
from pairchat.observability.metrics import (
    StoreOperation,
    increment_reaction_toggle,
    increment_store_error,
)

logger = logging.getLogger(__name__)

REACTION_UPDATED_EVENT = "reaction updated"


@dataclass(frozen=True)
class ToggleReactionCommand(Command[Optional[list[Reaction]]]):
    connection_id: str
    message_id: Any
    emoji: Any


class ToggleReactionHandler(CommandHandler[Optional[list[Reaction]]]):
    def __init__(
        self,
        registry: SessionRegistry,
        msg_repo: MessageRepository,
        event_bus: EventBus,
        locks: KeyedLock,
        max_emoji_length: Optional[int] = None,
    ):
        self._registry = registry
        self._msg_repo = msg_repo
        self._event_bus = event_bus
        self._locks = locks
        self._max_emoji_length = max_emoji_length

    def _validate(self, command: ToggleReactionCommand) -> tuple[MessageId, Reaction]:
        user = self._registry.identity_of(command.connection_id)
        if user is None:
            raise DomainValidationError("Reaction from an unbound connection")
        message_id = MessageId.parse(command.message_id)
        emoji = command.emoji
        if not isinstance(emoji, str) or not emoji.strip():
            raise DomainValidationError("Emoji is required")
        if self._max_emoji_length is not None and len(emoji) > self._max_emoji_length:
            raise DomainValidationError("Emoji is too long")
        return message_id, Reaction(user=user, emoji=emoji)

    async def execute(self, command: ToggleReactionCommand) -> Optional[list[Reaction]]:
        """
        Returns:
            The message's reaction set after the toggle, or None if nothing changed
        """
        try:
            message_id, reaction = self._validate(command)
        except DomainValidationError as e:
            logger.debug("Dropping reaction toggle on %s: %s", command.connection_id, e.message)
            return None

        async with self._locks.hold(message_id.value):
            try:
                current = await self._msg_repo.get_reactions(message_id, for_update=True)
                updated, added = toggle_reaction(current, reaction)
                await self._msg_repo.replace_reactions(message_id, updated)
            except EntityNotFoundError:
                logger.info("Reaction toggle for unknown message %s", message_id)
                return None
            except PersistenceError as e:
                logger.error("Reaction toggle on message %s failed: %s", message_id, e)
                increment_store_error(StoreOperation.REACTIONS)
                return None

        increment_reaction_toggle(added)
        event = ReactionUpdatedEvent(
            message_id=message_id.value,
            reactions=[ReactionDTO.from_domain(r) for r in updated],
        )
        await self._event_bus.emit_all(REACTION_UPDATED_EVENT, event.to_payload())
        return updated
