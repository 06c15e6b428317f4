"""
IdentityWhitelist Value Object - the closed set of identities allowed to chat.

Identities themselves travel as plain strings; the whitelist is the only
place that decides whether a string is one of them.
"""

from dataclasses import dataclass
from typing import Iterable

from pairchat.domain.exceptions import Unauthorized


@dataclass(frozen=True)
class IdentityWhitelist:
    identities: tuple[str, ...]

    def __post_init__(self):
        if not self.identities:
            raise ValueError("At least one chat identity must be configured")
        if any(not isinstance(i, str) or not i for i in self.identities):
            raise ValueError("Chat identities must be non-empty strings")
        if len(set(self.identities)) != len(self.identities):
            raise ValueError(f"Duplicate chat identities: {self.identities}")

    @classmethod
    def from_names(cls, names: Iterable[str]) -> "IdentityWhitelist":
        """Build from configured names, ignoring blanks and surrounding spaces."""
        return cls(tuple(n.strip() for n in names if n and n.strip()))

    def __contains__(self, identity: object) -> bool:
        return isinstance(identity, str) and identity in self.identities

    def require(self, identity: object) -> str:
        if identity not in self:
            raise Unauthorized(f"Unknown identity: {identity!r}")
        return identity

    def filter(self, identities: Iterable[str]) -> list[str]:
        return [i for i in identities if i in self]
