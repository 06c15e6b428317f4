"""
SQLAlchemy Message Repository Implementation.

- Implements MessageRepository port from domain layer
- One AsyncSession per unit of work (REQUEST scope in the DI container)
- Maps between MessageRow and domain entities
- Every store call is bounded by a timeout; SQLAlchemy errors, driver
  overflows and timeouts surface as PersistenceError
- Inserts on one engine run one at a time, so the stamped timestamp and the
  store-assigned id always agree on order

Mapping:
- Row: message (str)           ←→ Domain: body
- Row: timestamp (datetime)    ←→ Domain: created_at (always UTC-aware)
- Row: reply_to_* columns      ←→ Domain: reply_snapshot (ReplySnapshot | None)
- Row: reactions (JSON list)   ←→ Domain: reactions (list[Reaction])
"""

import asyncio
import logging
from datetime import datetime, timezone
from typing import Any, Awaitable, Optional, TypeVar
from weakref import WeakKeyDictionary

from sqlalchemy import select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from pairchat.domain.entities.message import Message
from pairchat.domain.exceptions import EntityNotFoundError, PersistenceError
from pairchat.domain.ports.repositories.message_repository import MessageRepository
from pairchat.domain.services.reactions import unique_reactions
from pairchat.domain.value_objects.message_id import MessageId
from pairchat.domain.value_objects.reaction import Reaction
from pairchat.domain.value_objects.reply_snapshot import ReplySnapshot
from pairchat.infrastructure.persistence.models import MessageRow

logger = logging.getLogger(__name__)

T = TypeVar("T")

# one insert lock per engine
_insert_locks: "WeakKeyDictionary[Any, asyncio.Lock]" = WeakKeyDictionary()


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes; everything is stored as UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def _reactions_from_json(raw: Any) -> list[Reaction]:
    if not isinstance(raw, list):
        return []
    parsed = (Reaction.from_dict(item) for item in raw)
    return unique_reactions(r for r in parsed if r is not None)


class SqlAlchemyMessageRepository(MessageRepository):
    """SQLAlchemy implementation of MessageRepository."""

    _session: AsyncSession

    def __init__(self, session: AsyncSession, timeout_seconds: Optional[float] = None):
        """
        Args:
            session: AsyncSession owned by the caller (injected by DI container)
            timeout_seconds: upper bound for each store call, None to disable
        """
        self._session = session
        self._timeout = timeout_seconds

    def _to_entity(self, row: MessageRow) -> Message:
        return Message(
            id=MessageId(row.id),
            sender=row.sender,
            body=row.message,
            created_at=_as_utc(row.timestamp),
            reply_snapshot=ReplySnapshot.from_columns(
                row.reply_to_id, row.reply_to_sender, row.reply_to_text
            ),
            reactions=_reactions_from_json(row.reactions),
        )

    async def _guard(self, operation: str, awaitable: Awaitable[T]) -> T:
        try:
            return await asyncio.wait_for(awaitable, timeout=self._timeout)
        except asyncio.TimeoutError:
            await self._rollback()
            raise PersistenceError(f"{operation} timed out after {self._timeout}s")
        except (SQLAlchemyError, OverflowError) as e:
            # the DBAPI raises OverflowError itself for integers it cannot bind
            await self._rollback()
            raise PersistenceError(f"{operation} failed: {e}") from e

    async def _rollback(self) -> None:
        try:
            await self._session.rollback()
        except SQLAlchemyError as e:
            logger.warning("Rollback failed: %s", e)

    def _insert_lock(self) -> asyncio.Lock:
        bind = self._session.bind
        engine = getattr(bind, "sync_engine", bind)
        lock = _insert_locks.get(engine)
        if lock is None:
            lock = _insert_locks[engine] = asyncio.Lock()
        return lock

    async def add(self, message: Message) -> Message:
        """
        Persist a new message; the store assigns both id and timestamp.

        The timestamp is taken inside the insert lock, right before the row
        is written, so a later id never carries an earlier timestamp.
        """
        snapshot = message.reply_snapshot

        async def _insert() -> MessageRow:
            row = MessageRow(
                sender=message.sender,
                message=message.body,
                timestamp=datetime.now(timezone.utc),
                reply_to_id=snapshot.id if snapshot else None,
                reply_to_sender=snapshot.sender if snapshot else None,
                reply_to_text=snapshot.text if snapshot else None,
                reactions=[r.to_dict() for r in message.reactions],
            )
            self._session.add(row)
            await self._session.commit()
            return row

        async with self._insert_lock():
            stored = await self._guard("insert message", _insert())
        logger.debug("Stored message %s from %s", stored.id, stored.sender)
        return self._to_entity(stored)

    async def list_all(self) -> list[Message]:
        """
        All messages in chronological order (oldest first).

        The id is the ordering key: rows are fetched newest id first, then
        reversed.
        """

        async def _select() -> list[MessageRow]:
            result = await self._session.execute(
                select(MessageRow).order_by(MessageRow.id.desc())
            )
            return list(result.scalars().all())

        rows = await self._guard("load history", _select())
        rows.reverse()  # Now oldest first
        return [self._to_entity(row) for row in rows]

    async def get_reactions(
        self, message_id: MessageId, for_update: bool = False
    ) -> list[Reaction]:
        """
        Read the reaction set of one message.

        With for_update the row stays locked until replace_reactions commits
        (ignored by SQLite, which has no row locks).
        """
        stmt = select(MessageRow.reactions).where(MessageRow.id == message_id.value)
        if for_update:
            stmt = stmt.with_for_update()

        async def _select():
            result = await self._session.execute(stmt)
            return result.first()

        found = await self._guard("load reactions", _select())
        if found is None:
            raise EntityNotFoundError(f"Message {message_id} not found")
        return _reactions_from_json(found[0])

    async def replace_reactions(
        self, message_id: MessageId, reactions: list[Reaction]
    ) -> None:
        payload = [r.to_dict() for r in unique_reactions(reactions)]

        async def _update() -> int:
            result = await self._session.execute(
                update(MessageRow)
                .where(MessageRow.id == message_id.value)
                .values(reactions=payload)
            )
            await self._session.commit()
            return result.rowcount

        updated = await self._guard("update reactions", _update())
        if not updated:
            raise EntityNotFoundError(f"Message {message_id} not found")
