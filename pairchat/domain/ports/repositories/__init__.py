"""
REPOSITORY PORTS - Data persistence interfaces
"""

from pairchat.domain.ports.repositories.message_repository import MessageRepository

__all__ = [
    "MessageRepository",
]
