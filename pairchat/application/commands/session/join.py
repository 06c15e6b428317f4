"""
Join Command - bind a live connection to a whitelisted identity.

Flow on success:
  verify token → register in SessionRegistry → publish presence → send history

Any auth failure emits `auth_error {message}` to the connection and closes it;
the connection is never bound and never touches the store.
"""

import logging
from dataclasses import dataclass
from typing import Any, Optional

from pairchat.application.common.interfaces import Command, CommandHandler
from pairchat.application.queries.chat import GetChatHistoryHandler, GetChatHistoryQuery
from pairchat.application.services.presence import PresenceBroadcaster
from pairchat.application.services.session_registry import SessionRegistry
from pairchat.domain.entities.session import Session
from pairchat.domain.exceptions import AuthConfigurationError, AuthError
from pairchat.domain.ports.event_bus import EventBus
from pairchat.infrastructure.auth import TokenService
from pairchat.observability.metrics import increment_auth_rejection

logger = logging.getLogger(__name__)

AUTH_ERROR_EVENT = "auth_error"
HISTORY_EVENT = "history"
# RFC 6455 policy violation
POLICY_VIOLATION = 1008


@dataclass(frozen=True)
class JoinCommand(Command[Optional[Session]]):
    connection_id: str
    identity: Any
    token: Optional[str] = None


class JoinHandler(CommandHandler[Optional[Session]]):
    def __init__(
        self,
        registry: SessionRegistry,
        token_service: TokenService,
        presence: PresenceBroadcaster,
        event_bus: EventBus,
        history_handler: GetChatHistoryHandler,
        require_token: bool = True,
    ):
        self._registry = registry
        self._token_service = token_service
        self._presence = presence
        self._event_bus = event_bus
        self._history_handler = history_handler
        self._require_token = require_token

    async def execute(self, command: JoinCommand) -> Optional[Session]:
        """
        Returns:
            The bound Session, or None when the join was rejected
        """
        current = self._registry.get(command.connection_id)
        if current is not None and current.is_bound:
            logger.info(
                "Ignoring join on %s: already bound to %s",
                command.connection_id,
                current.identity,
            )
            return current

        try:
            # without REQUIRE_JOIN_TOKEN a token is still checked when presented
            if self._require_token or command.token:
                self._token_service.verify(command.token)
            session = self._registry.register(command.connection_id, command.identity)
        except AuthError as e:
            await self._reject(command.connection_id, e.message, e.reason)
            return None
        except AuthConfigurationError as e:
            logger.error("Join unavailable: %s", e.message)
            await self._reject(
                command.connection_id, "Authentication unavailable", "configuration"
            )
            return None

        await self._presence.publish()
        history = await self._history_handler.execute(GetChatHistoryQuery())
        await self._event_bus.emit_to(
            command.connection_id, HISTORY_EVENT, [view.to_payload() for view in history]
        )
        return session

    async def _reject(self, connection_id: str, message: str, reason: str) -> None:
        logger.warning("Join rejected on %s: %s", connection_id, message)
        increment_auth_rejection(reason)
        await self._event_bus.emit_to(connection_id, AUTH_ERROR_EVENT, {"message": message})
        await self._event_bus.close(connection_id, code=POLICY_VIOLATION, reason=reason)
