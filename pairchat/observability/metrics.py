"""
Prometheus Metrics for the chat service.

DATA FLOW:
    This file                  presentation/api/metrics.py
    ─────────                  ────────────────────────────
    Define metrics ──────────► /metrics endpoint ──────────► Prometheus scraper

METRIC TYPES:
    - Gauge: Value goes up/down (open websocket connections)
    - Counter: Value only goes up (messages, reactions, logins)
"""

from prometheus_client import (
    Gauge,
    Counter,
    generate_latest,
    CONTENT_TYPE_LATEST,
)


# =============================================================================
# METRICS DEFINITIONS
# =============================================================================
OPEN_CONNECTIONS = Gauge(
    "pairchat_open_connections", "Number of websocket connections currently open"
)

MESSAGES_TOTAL = Counter(
    "pairchat_messages_total",
    "Chat messages broadcast, by store outcome",
    ["outcome"],
)

REACTION_TOGGLES_TOTAL = Counter(
    "pairchat_reaction_toggles_total",
    "Reaction toggles applied, by action",
    ["action"],
)

LOGIN_ATTEMPTS_TOTAL = Counter(
    "pairchat_login_attempts_total",
    "Login attempts, by outcome",
    ["outcome"],
)

AUTH_REJECTIONS_TOTAL = Counter(
    "pairchat_auth_rejections_total",
    "Websocket joins rejected, by reason",
    ["reason"],
)

STORE_ERRORS_TOTAL = Counter(
    "pairchat_store_errors_total",
    "Message store failures, by operation",
    ["operation"],
)


# =============================================================================
# LABEL CONSTANTS
# =============================================================================
class MessageOutcome:
    PERSISTED = "persisted"
    UNPERSISTED = "unpersisted"


class StoreOperation:
    PERSIST = "persist"
    HISTORY = "history"
    REACTIONS = "reactions"


# =============================================================================
# RECORDING FUNCTIONS
# =============================================================================
def set_open_connections(count: int):
    OPEN_CONNECTIONS.set(count)


def increment_message(outcome: str):
    MESSAGES_TOTAL.labels(outcome=outcome).inc()


def increment_reaction_toggle(added: bool):
    REACTION_TOGGLES_TOTAL.labels(action="added" if added else "removed").inc()


def increment_login_attempt(outcome: str):
    """outcome: success, invalid_credential, error"""
    LOGIN_ATTEMPTS_TOTAL.labels(outcome=outcome).inc()


def increment_auth_rejection(reason: str):
    AUTH_REJECTIONS_TOTAL.labels(reason=reason).inc()


def increment_store_error(operation: str):
    STORE_ERRORS_TOTAL.labels(operation=operation).inc()


def get_metrics_content() -> tuple[bytes, str]:
    """Return (payload, content type) for the /metrics endpoint."""
    return generate_latest(), CONTENT_TYPE_LATEST
