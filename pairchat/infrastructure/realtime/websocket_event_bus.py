"""
WebSocket Event Bus - EventBus over FastAPI WebSocket connections.

Frames are JSON objects `{"event": <name>, "data": <payload>}`.

- Broadcasts go out concurrently with asyncio.gather()
- A connection whose send fails is removed from the bus
- Single event loop only; not thread-safe
"""

import asyncio
import logging
import uuid
from typing import Any, Iterable

from fastapi import WebSocket

from pairchat.domain.ports.event_bus import EventBus
from pairchat.observability.metrics import set_open_connections

logger = logging.getLogger(__name__)


def make_frame(event: str, payload: Any) -> dict[str, Any]:
    return {"event": event, "data": payload}


class WebSocketEventBus(EventBus):
    def __init__(self):
        self._connections: dict[str, WebSocket] = {}

    async def connect(self, transport: WebSocket) -> str:
        """Register an already accepted WebSocket."""
        connection_id = uuid.uuid4().hex
        self._connections[connection_id] = transport
        set_open_connections(len(self._connections))
        logger.info("Connection %s opened (%d open)", connection_id, len(self._connections))
        return connection_id

    async def disconnect(self, connection_id: str) -> None:
        if self._connections.pop(connection_id, None) is not None:
            set_open_connections(len(self._connections))
            logger.info(
                "Connection %s closed (%d open)", connection_id, len(self._connections)
            )

    def is_connected(self, connection_id: str) -> bool:
        return connection_id in self._connections

    def connection_ids(self) -> list[str]:
        return list(self._connections)

    async def emit_all(self, event: str, payload: Any) -> None:
        await self._broadcast(self._connections.items(), make_frame(event, payload))

    async def emit_all_except(self, connection_id: str, event: str, payload: Any) -> None:
        targets = [(cid, ws) for cid, ws in self._connections.items() if cid != connection_id]
        await self._broadcast(targets, make_frame(event, payload))

    async def emit_to(self, connection_id: str, event: str, payload: Any) -> None:
        websocket = self._connections.get(connection_id)
        if websocket is None:
            logger.debug("Dropping %r for unknown connection %s", event, connection_id)
            return
        if not await self._safe_send(websocket, make_frame(event, payload)):
            await self.disconnect(connection_id)

    async def close(self, connection_id: str, code: int = 1008, reason: str = "") -> None:
        websocket = self._connections.get(connection_id)
        await self.disconnect(connection_id)
        if websocket is None:
            return
        try:
            await websocket.close(code=code, reason=reason)
        except RuntimeError as e:
            # already closed by the client
            logger.debug("Close on %s ignored: %s", connection_id, e)

    async def _broadcast(
        self, targets: Iterable[tuple[str, WebSocket]], frame: dict[str, Any]
    ) -> None:
        targets = list(targets)
        if not targets:
            return
        results = await asyncio.gather(
            *[self._safe_send(ws, frame) for _, ws in targets],
            return_exceptions=True,
        )
        failed = [cid for (cid, _), ok in zip(targets, results) if ok is not True]
        for cid in failed:
            await self.disconnect(cid)
        if failed:
            logger.info("Removed %d dead connection(s) during broadcast", len(failed))

    async def _safe_send(self, websocket: WebSocket, frame: dict[str, Any]) -> bool:
        """
        Send one frame.

        Returns:
            True if successful, False if connection failed.
        """
        try:
            await websocket.send_json(frame)
            return True
        except Exception as e:
            logger.debug("Failed to send to connection: %s", e)
            return False
