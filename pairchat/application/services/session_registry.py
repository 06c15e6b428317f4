"""
Session Registry - live connections and the identities bound to them.

All mutations happen synchronously on the event loop, so no locking is
needed: a handler never yields between reading and writing registry state.
"""

import logging
from typing import Optional

from pairchat.domain.entities.session import Session
from pairchat.domain.value_objects.identity import IdentityWhitelist

logger = logging.getLogger(__name__)


class SessionRegistry:
    def __init__(self, whitelist: IdentityWhitelist):
        self._whitelist = whitelist
        self._sessions: dict[str, Session] = {}
        # connection ids in the order they were bound
        self._bound: dict[str, str] = {}

    def open(self, connection_id: str) -> Session:
        session = self._sessions.get(connection_id)
        if session is None:
            session = Session(connection_id=connection_id)
            self._sessions[connection_id] = session
        return session

    def get(self, connection_id: str) -> Optional[Session]:
        return self._sessions.get(connection_id)

    def register(self, connection_id: str, identity: str) -> Session:
        """
        Bind `identity` to an open connection.

        Raises:
            Unauthorized: identity is not whitelisted
            DomainValidationError: connection already bound
        """
        self._whitelist.require(identity)
        session = self.open(connection_id)
        session.bind(identity)
        self._bound[connection_id] = identity
        logger.info("Connection %s bound to %s", connection_id, identity)
        return session

    def unregister(self, connection_id: str) -> Optional[Session]:
        self._bound.pop(connection_id, None)
        return self._sessions.pop(connection_id, None)

    def identity_of(self, connection_id: str) -> Optional[str]:
        return self._bound.get(connection_id)

    def online_identities(self) -> list[str]:
        """Whitelisted identities with at least one bound connection, first-bound first."""
        return self._whitelist.filter(dict.fromkeys(self._bound.values()))

    def __len__(self) -> int:
        return len(self._sessions)
