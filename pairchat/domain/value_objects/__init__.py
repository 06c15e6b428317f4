"""
VALUE OBJECTS - Immutable domain types

Each value object:
- Has no identity (compared by value, not by ID)
- Is immutable (frozen dataclass)
- Validates itself on creation
"""

from pairchat.domain.value_objects.message_id import MessageId
from pairchat.domain.value_objects.reaction import Reaction
from pairchat.domain.value_objects.reply_snapshot import ReplySnapshot
from pairchat.domain.value_objects.identity import IdentityWhitelist

__all__ = [
    "MessageId",
    "Reaction",
    "ReplySnapshot",
    "IdentityWhitelist",
]
