"""
Session Entity - one live connection, optionally bound to an identity.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional

from pairchat.domain.exceptions import DomainValidationError


@dataclass
class Session:
    connection_id: str
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    identity: Optional[str] = None

    @property
    def is_bound(self) -> bool:
        return self.identity is not None

    def bind(self, identity: str) -> None:
        """Attach an identity. Binding happens once per connection."""
        if self.identity is not None:
            raise DomainValidationError(
                f"Connection {self.connection_id} is already bound to {self.identity}"
            )
        self.identity = identity
