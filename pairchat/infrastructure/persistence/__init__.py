"""
Persistence Layer - Database implementations.

Contains the SQLAlchemy (async) repository for the message store.
"""

from pairchat.infrastructure.persistence.database import create_engine, init_models
from pairchat.infrastructure.persistence.sqlalchemy_message_repository import (
    SqlAlchemyMessageRepository,
)

__all__ = [
    "create_engine",
    "init_models",
    "SqlAlchemyMessageRepository",
]
