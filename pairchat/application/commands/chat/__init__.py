from pairchat.application.commands.chat.send_message import (
    SendMessageCommand,
    SendMessageHandler,
    Persisted,
    Unpersisted,
    PersistOutcome,
)
from pairchat.application.commands.chat.toggle_reaction import (
    ToggleReactionCommand,
    ToggleReactionHandler,
)
from pairchat.application.commands.chat.typing import TypingCommand, TypingHandler

__all__ = [
    "SendMessageCommand",
    "SendMessageHandler",
    "Persisted",
    "Unpersisted",
    "PersistOutcome",
    "ToggleReactionCommand",
    "ToggleReactionHandler",
    "TypingCommand",
    "TypingHandler",
]
