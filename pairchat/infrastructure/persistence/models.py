"""
Chat Database Models
"""

from datetime import datetime, timezone

from sqlalchemy import BigInteger, Column, Integer, String, Text, DateTime, JSON
from sqlalchemy.orm import declarative_base

Base = declarative_base()

# BIGINT on PostgreSQL; SQLite needs plain INTEGER for an autoincrementing rowid
IdType = BigInteger().with_variant(Integer, "sqlite")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class MessageRow(Base):
    __tablename__ = "messages"
    # AUTOINCREMENT keeps SQLite from reusing the ids of removed rows
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column(IdType, primary_key=True, autoincrement=True)
    sender = Column(String(64), nullable=False)
    message = Column(Text, nullable=False)
    timestamp = Column(DateTime(timezone=True), nullable=False, default=_utcnow)
    reply_to_id = Column(IdType, nullable=True)
    reply_to_sender = Column(String(64), nullable=True)
    reply_to_text = Column(Text, nullable=True)
    reactions = Column(JSON, nullable=False, default=list)

    def __repr__(self):
        return f"<MessageRow(id={self.id}, sender='{self.sender}')>"
