"""
MessageId Value Object - store-assigned integer message identity.
"""

from dataclasses import dataclass
from typing import Any

from pairchat.domain.exceptions import DomainValidationError

# ids live in a signed 64-bit column
MAX_MESSAGE_ID = 2**63 - 1


def is_message_id(value: Any) -> bool:
    # bool is an int subclass; True must not address message 1
    return (
        isinstance(value, int)
        and not isinstance(value, bool)
        and 0 < value <= MAX_MESSAGE_ID
    )


@dataclass(frozen=True)
class MessageId:
    value: int

    def __post_init__(self):
        if isinstance(self.value, bool) or not isinstance(self.value, int):
            raise DomainValidationError(f"Message ID must be an integer: {self.value!r}")
        if not is_message_id(self.value):
            raise DomainValidationError(f"Message ID out of range: {self.value}")

    @classmethod
    def parse(cls, raw: Any) -> "MessageId":
        """Accept ints and ASCII digit strings coming off the wire."""
        if isinstance(raw, str):
            digits = raw.strip()
            if not (digits.isascii() and digits.isdigit()):
                raise DomainValidationError(f"Message ID must be an integer: {raw!r}")
            raw = int(digits)
        return cls(raw)

    def __int__(self) -> int:
        return self.value

    def __str__(self) -> str:
        return str(self.value)
