"""
DTOs - Data Transfer Objects

- chat.py → MessageView, ChatMessageEvent, ReactionDTO, ReplyToDTO
- auth.py → LoginRequest, LoginResponse

DTOs carry the camelCase wire names; entities stay snake_case.
"""

from pairchat.application.dto.chat import (
    ReactionDTO,
    ReplyToDTO,
    MessageView,
    ChatMessageEvent,
    ReactionUpdatedEvent,
)
from pairchat.application.dto.auth import LoginRequest, LoginResponse

__all__ = [
    "ReactionDTO",
    "ReplyToDTO",
    "MessageView",
    "ChatMessageEvent",
    "ReactionUpdatedEvent",
    "LoginRequest",
    "LoginResponse",
]
