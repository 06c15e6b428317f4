"""
Reaction Value Object - one (user, emoji) pair on a message.
"""

from dataclasses import dataclass
from typing import Any, Optional


@dataclass(frozen=True)
class Reaction:
    user: str
    emoji: str

    def __post_init__(self):
        if not self.user or not self.emoji:
            raise ValueError("Reaction needs both user and emoji")

    @classmethod
    def from_dict(cls, raw: Any) -> Optional["Reaction"]:
        """Rebuild from a stored {user, emoji} mapping; malformed entries yield None."""
        if not isinstance(raw, dict):
            return None
        user, emoji = raw.get("user"), raw.get("emoji")
        if not isinstance(user, str) or not isinstance(emoji, str) or not user or not emoji:
            return None
        return cls(user=user, emoji=emoji)

    def to_dict(self) -> dict[str, str]:
        return {"user": self.user, "emoji": self.emoji}
