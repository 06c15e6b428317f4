"""
ReplySnapshot Value Object - frozen copy of the message being replied to.

The snapshot is captured when the reply is sent and never follows later
changes to the original message.
"""

from dataclasses import dataclass
from typing import Any, Optional

from pairchat.domain.exceptions import DomainValidationError
from pairchat.domain.value_objects.message_id import is_message_id


@dataclass(frozen=True)
class ReplySnapshot:
    id: int
    sender: str
    text: str

    def __post_init__(self):
        if not is_message_id(self.id):
            raise DomainValidationError("Reply target id must be a valid message id")
        if not isinstance(self.sender, str) or not self.sender.strip():
            raise DomainValidationError("Reply target sender is required")
        if not isinstance(self.text, str) or not self.text.strip():
            raise DomainValidationError("Reply target text is required")

    @classmethod
    def from_payload(cls, raw: Any) -> Optional["ReplySnapshot"]:
        """Build from a client `replyTo` object, or None when it is not a complete triple."""
        if not isinstance(raw, dict):
            return None
        try:
            return cls(id=raw.get("id"), sender=raw.get("sender"), text=raw.get("text"))
        except DomainValidationError:
            return None

    @classmethod
    def from_columns(
        cls, reply_id: Optional[int], sender: Optional[str], text: Optional[str]
    ) -> Optional["ReplySnapshot"]:
        """Rebuild from stored columns; a snapshot exists only when reply_id is a valid message id."""
        if not is_message_id(reply_id):
            return None
        try:
            return cls(id=reply_id, sender=sender, text=text)
        except DomainValidationError:
            return None

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "sender": self.sender, "text": self.text}
