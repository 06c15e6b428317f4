"""
PORTS - Interfaces that infrastructure implements

- repositories/message_repository.py → durable message store
- event_bus.py                       → realtime delivery to connections
"""

from pairchat.domain.ports.event_bus import EventBus

__all__ = ["EventBus"]
