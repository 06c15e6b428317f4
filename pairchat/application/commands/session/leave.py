"""
Leave Command - forget a closed connection and refresh presence if it was bound.
"""

from dataclasses import dataclass
from typing import Optional

from pairchat.application.common.interfaces import Command, CommandHandler
from pairchat.application.services.presence import PresenceBroadcaster
from pairchat.application.services.session_registry import SessionRegistry
from pairchat.domain.entities.session import Session
from pairchat.domain.ports.event_bus import EventBus


@dataclass(frozen=True)
class LeaveCommand(Command[Optional[Session]]):
    connection_id: str


class LeaveHandler(CommandHandler[Optional[Session]]):
    def __init__(
        self,
        registry: SessionRegistry,
        presence: PresenceBroadcaster,
        event_bus: EventBus,
    ):
        self._registry = registry
        self._presence = presence
        self._event_bus = event_bus

    async def execute(self, command: LeaveCommand) -> Optional[Session]:
        await self._event_bus.disconnect(command.connection_id)
        session = self._registry.unregister(command.connection_id)
        if session is not None and session.is_bound:
            await self._presence.publish()
        return session
