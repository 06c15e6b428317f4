"""
GetChatHistory Query - the full backlog sent to a connection after it joins.

Fails open: a store error yields an empty history instead of an error frame.
"""

import logging
from dataclasses import dataclass

from pairchat.application.common.interfaces import Query, QueryHandler
from pairchat.application.dto.chat import MessageView
from pairchat.domain.exceptions import PersistenceError
from pairchat.domain.ports.repositories import MessageRepository
from pairchat.observability.metrics import StoreOperation, increment_store_error

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GetChatHistoryQuery(Query[list[MessageView]]):
    pass


class GetChatHistoryHandler(QueryHandler[list[MessageView]]):
    def __init__(self, msg_repo: MessageRepository):
        self._msg_repo = msg_repo

    async def execute(self, query: GetChatHistoryQuery) -> list[MessageView]:
        """
        Returns:
            Every stored message, oldest first, as wire views
        """
        try:
            messages = await self._msg_repo.list_all()
        except PersistenceError as e:
            logger.warning("History unavailable, sending empty backlog: %s", e)
            increment_store_error(StoreOperation.HISTORY)
            return []
        return [MessageView.from_domain(m) for m in messages]
