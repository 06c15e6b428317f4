"""
Message Entity - A single chat message.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from pairchat.domain.exceptions import DomainValidationError
from pairchat.domain.value_objects.message_id import MessageId
from pairchat.domain.value_objects.reaction import Reaction
from pairchat.domain.value_objects.reply_snapshot import ReplySnapshot


@dataclass
class Message:
    sender: str
    body: str
    id: Optional[MessageId] = None
    created_at: Optional[datetime] = None
    reply_snapshot: Optional[ReplySnapshot] = None
    reactions: list[Reaction] = field(default_factory=list)

    @property
    def is_persisted(self) -> bool:
        return self.id is not None

    @classmethod
    def create(
        cls,
        sender: Optional[str],
        body: object,
        reply_snapshot: Optional[ReplySnapshot] = None,
        max_length: Optional[int] = None,
    ) -> Message:
        """Factory for a new, not yet stored message. id and created_at are assigned by the store."""
        if not sender:
            raise DomainValidationError("Message sender must be a bound identity")
        if not isinstance(body, str) or not body.strip():
            raise DomainValidationError("Message body must not be empty")
        if max_length is not None and len(body) > max_length:
            raise DomainValidationError(
                f"Message body exceeds {max_length} characters"
            )
        return cls(sender=sender, body=body, reply_snapshot=reply_snapshot)
