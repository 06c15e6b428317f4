"""Presence Broadcaster - pushes the online identity list to every connection."""

from pairchat.application.services.session_registry import SessionRegistry
from pairchat.domain.ports.event_bus import EventBus

ONLINE_USERS_EVENT = "online users"


class PresenceBroadcaster:
    def __init__(self, registry: SessionRegistry, event_bus: EventBus):
        self._registry = registry
        self._event_bus = event_bus

    async def publish(self) -> list[str]:
        online = self._registry.online_identities()
        await self._event_bus.emit_all(ONLINE_USERS_EVENT, online)
        return online
