"""
Event Bus Port - named events delivered to live connections.

Connections are addressed by the opaque id handed out by `connect`.
Delivery is best-effort: a connection that cannot be written to is dropped.
"""

from abc import ABC, abstractmethod
from typing import Any


class EventBus(ABC):
    @abstractmethod
    async def connect(self, transport: Any) -> str:
        """Register an accepted transport and return its connection id."""

    @abstractmethod
    async def disconnect(self, connection_id: str) -> None: ...

    @abstractmethod
    def is_connected(self, connection_id: str) -> bool: ...

    @abstractmethod
    async def emit_all(self, event: str, payload: Any) -> None: ...

    @abstractmethod
    async def emit_to(self, connection_id: str, event: str, payload: Any) -> None: ...

    @abstractmethod
    async def emit_all_except(
        self, connection_id: str, event: str, payload: Any
    ) -> None: ...

    @abstractmethod
    async def close(
        self, connection_id: str, code: int = 1008, reason: str = ""
    ) -> None:
        """Close the transport and forget the connection."""
