"""
Chat WebSocket endpoint.

Every frame in both directions is a JSON object:
    {"event": "<name>", "data": <payload>}

Client → server events:
    join            {identity, token}
    chat message    {body | message, replyTo?}
    typing          {}
    stop typing     {}
    toggle reaction {messageId, emoji}

Frames from a connection are handled one at a time, each inside its own
Dishka REQUEST scope. Client-supplied sender/user fields are ignored; the
identity bound by `join` is always used.
"""

import json
import logging
from functools import partial
from typing import Any, Awaitable, Callable, Optional

from dishka import AsyncContainer
from fastapi import APIRouter, WebSocket

from pairchat.application.commands.chat import (
    SendMessageCommand,
    SendMessageHandler,
    ToggleReactionCommand,
    ToggleReactionHandler,
    TypingCommand,
    TypingHandler,
)
from pairchat.application.commands.session import (
    JoinCommand,
    JoinHandler,
    LeaveCommand,
    LeaveHandler,
)
from pairchat.application.services.session_registry import SessionRegistry
from pairchat.config.logging_config import correlation_id_var
from pairchat.domain.ports.event_bus import EventBus

logger = logging.getLogger(__name__)

router = APIRouter(tags=["realtime"])

InboundHandler = Callable[[AsyncContainer, str, dict[str, Any]], Awaitable[None]]


async def _on_join(container: AsyncContainer, connection_id: str, data: dict[str, Any]):
    handler = await container.get(JoinHandler)
    await handler.execute(
        JoinCommand(
            connection_id=connection_id,
            identity=data.get("identity"),
            token=data.get("token"),
        )
    )


async def _on_chat_message(
    container: AsyncContainer, connection_id: str, data: dict[str, Any]
):
    handler = await container.get(SendMessageHandler)
    await handler.execute(
        SendMessageCommand(
            connection_id=connection_id,
            body=data.get("body", data.get("message")),
            reply_to=data.get("replyTo"),
        )
    )


async def _on_toggle_reaction(
    container: AsyncContainer, connection_id: str, data: dict[str, Any]
):
    handler = await container.get(ToggleReactionHandler)
    await handler.execute(
        ToggleReactionCommand(
            connection_id=connection_id,
            message_id=data.get("messageId"),
            emoji=data.get("emoji"),
        )
    )


async def _on_typing(
    container: AsyncContainer, connection_id: str, data: dict[str, Any], active: bool
):
    handler = await container.get(TypingHandler)
    await handler.execute(TypingCommand(connection_id=connection_id, active=active))


EVENT_HANDLERS: dict[str, InboundHandler] = {
    "join": _on_join,
    "chat message": _on_chat_message,
    "toggle reaction": _on_toggle_reaction,
    "typing": partial(_on_typing, active=True),
    "stop typing": partial(_on_typing, active=False),
}


def parse_frame(raw: Optional[str]) -> Optional[tuple[str, dict[str, Any]]]:
    """Decode one inbound frame into (event, data); malformed frames yield None."""
    if not raw:
        return None
    try:
        frame = json.loads(raw)
    except ValueError:
        return None
    if not isinstance(frame, dict) or not isinstance(frame.get("event"), str):
        return None
    data = frame.get("data")
    return frame["event"], data if isinstance(data, dict) else {}


@router.websocket("/ws")
async def chat_socket(websocket: WebSocket):
    container: AsyncContainer = websocket.app.state.dishka_container
    event_bus = await container.get(EventBus)
    registry = await container.get(SessionRegistry)

    await websocket.accept()
    connection_id = await event_bus.connect(websocket)
    context_token = correlation_id_var.set(connection_id)
    registry.open(connection_id)

    try:
        while event_bus.is_connected(connection_id):
            message = await websocket.receive()
            if message["type"] == "websocket.disconnect":
                break
            frame = parse_frame(message.get("text"))
            if frame is None:
                logger.debug("Ignoring malformed frame on %s", connection_id)
                continue
            event, data = frame
            handler = EVENT_HANDLERS.get(event)
            if handler is None:
                logger.debug("Ignoring unknown event %r on %s", event, connection_id)
                continue
            try:
                async with container() as request_container:
                    await handler(request_container, connection_id, data)
            except Exception:
                # one bad frame must not end a bound session
                logger.exception("Handling %r on %s failed", event, connection_id)
    finally:
        async with container() as request_container:
            leave = await request_container.get(LeaveHandler)
            await leave.execute(LeaveCommand(connection_id=connection_id))
        correlation_id_var.reset(context_token)
