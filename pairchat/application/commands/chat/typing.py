"""
Typing Command - relay typing / stop typing to everyone but the sender.
Never persisted.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from pairchat.application.common.interfaces import Command, CommandHandler
from pairchat.application.services.session_registry import SessionRegistry
from pairchat.domain.ports.event_bus import EventBus

logger = logging.getLogger(__name__)

TYPING_EVENT = "typing"
STOP_TYPING_EVENT = "stop typing"


@dataclass(frozen=True)
class TypingCommand(Command[Optional[str]]):
    connection_id: str
    active: bool


class TypingHandler(CommandHandler[Optional[str]]):
    def __init__(self, registry: SessionRegistry, event_bus: EventBus):
        self._registry = registry
        self._event_bus = event_bus

    async def execute(self, command: TypingCommand) -> Optional[str]:
        sender = self._registry.identity_of(command.connection_id)
        if sender is None:
            logger.debug("Dropping typing event from unbound %s", command.connection_id)
            return None
        event = TYPING_EVENT if command.active else STOP_TYPING_EVENT
        await self._event_bus.emit_all_except(
            command.connection_id, event, {"sender": sender}
        )
        return sender
