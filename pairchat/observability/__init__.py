"""Observability package for the chat service."""

from pairchat.observability.metrics import (
    set_open_connections,
    increment_message,
    increment_reaction_toggle,
    increment_login_attempt,
    increment_auth_rejection,
    increment_store_error,
    get_metrics_content,
    MessageOutcome,
    StoreOperation,
)

__all__ = [
    "set_open_connections",
    "increment_message",
    "increment_reaction_toggle",
    "increment_login_attempt",
    "increment_auth_rejection",
    "increment_store_error",
    "get_metrics_content",
    "MessageOutcome",
    "StoreOperation",
]
