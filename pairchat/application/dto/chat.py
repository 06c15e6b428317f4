"""Chat DTOs for websocket payloads."""

from datetime import datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field

from pairchat.domain.entities.message import Message
from pairchat.domain.value_objects.reaction import Reaction


class ReactionDTO(BaseModel):
    user: str
    emoji: str

    @classmethod
    def from_domain(cls, reaction: Reaction) -> "ReactionDTO":
        return cls(user=reaction.user, emoji=reaction.emoji)


class ReplyToDTO(BaseModel):
    id: int
    sender: str
    text: str


class MessageView(BaseModel):
    """A message as sent in `history`."""

    model_config = ConfigDict(populate_by_name=True)

    id: Optional[int] = None
    sender: str
    message: str
    timestamp: datetime
    reply_to: Optional[ReplyToDTO] = Field(default=None, alias="replyTo")
    reactions: list[ReactionDTO] = Field(default_factory=list)

    @classmethod
    def from_domain(
        cls, message: Message, timestamp: Optional[datetime] = None, **extra
    ) -> "MessageView":
        snapshot = message.reply_snapshot
        return cls(
            id=message.id.value if message.id is not None else None,
            sender=message.sender,
            message=message.body,
            timestamp=timestamp or message.created_at,
            reply_to=(
                ReplyToDTO(id=snapshot.id, sender=snapshot.sender, text=snapshot.text)
                if snapshot
                else None
            ),
            reactions=[ReactionDTO.from_domain(r) for r in message.reactions],
            **extra,
        )

    def to_payload(self) -> dict:
        return self.model_dump(by_alias=True, mode="json")


class ChatMessageEvent(MessageView):
    """A live `chat message` broadcast; `persisted` is false when the store write failed."""

    persisted: bool = True


class ReactionUpdatedEvent(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    message_id: int = Field(alias="messageId")
    reactions: list[ReactionDTO]

    def to_payload(self) -> dict:
        return self.model_dump(by_alias=True, mode="json")
