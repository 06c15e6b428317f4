"""
ENTITIES - Business objects with identity

- Message: durable chat message, identified by its store-assigned id
- Session: one live connection, identified by its connection id
"""

from pairchat.domain.entities.message import Message
from pairchat.domain.entities.session import Session

__all__ = [
    "Message",
    "Session",
]
