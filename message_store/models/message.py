"""
Message database model.
"""
from sqlalchemy import Boolean, Column, DateTime, Index, Integer, String, Text, func

from message_store.core.database import Base


class Message(Base):
    """A chat message waiting for, or already past, delivery to a user."""

    __tablename__ = "messages"

    # Surrogate key, only used to break updated_at ties
    id = Column(Integer, primary_key=True, autoincrement=True)

    user_id = Column(String(255), nullable=False, index=True)

    message = Column(Text, nullable=False)

    # True until the user's messages are unqueued
    queued = Column(Boolean, nullable=False)

    # Database clock; re-stamped on unqueue
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    # Composite index for per-user ordered reads
    __table_args__ = (
        Index("ix_messages_user_id_updated_at_id", "user_id", "updated_at", "id"),
    )

    def __repr__(self) -> str:
        return f"<Message(id={self.id}, user_id={self.user_id}, queued={self.queued})>"
