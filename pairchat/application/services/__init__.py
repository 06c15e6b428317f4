"""Stateful application services shared across connections (APP scope)."""

from pairchat.application.services.session_registry import SessionRegistry
from pairchat.application.services.presence import PresenceBroadcaster
from pairchat.application.services.keyed_lock import KeyedLock

__all__ = [
    "SessionRegistry",
    "PresenceBroadcaster",
    "KeyedLock",
]
