"""
API Routers - FastAPI endpoint definitions.
"""

from pairchat.presentation.api.auth import router as auth_router
from pairchat.presentation.api.metrics import router as metrics_router

__all__ = [
    "auth_router",
    "metrics_router",
]
