"""
Queries over the messages table.
"""
from typing import List

from sqlalchemy import func, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from message_store.core.errors import StorageError, BatchValidationError
from message_store.core.logging import get_logger
from message_store.models.message import Message

logger = get_logger(__name__)


class MessageStore:
    """
    Message queue operations for a single database session.

    Every failure raised by SQLAlchemy is rolled back and re-raised as
    StorageError. Nothing is retried.
    """

    def __init__(self, db: Session):
        self.db = db

    def enqueue(self, user_id: str, queued: bool, messages: List[str]) -> List[str]:
        """
        Insert one row per text, all for the same user and queued flag.

        Returns the stored texts in insertion order.
        """
        if not messages:
            raise BatchValidationError("msgs must contain at least one message")

        rows = [Message(user_id=user_id, queued=queued, message=text) for text in messages]
        try:
            self.db.add_all(rows)
            # Flush in list order so ids follow insertion order
            self.db.flush()
            stored = [row.message for row in rows]
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise StorageError("enqueue", e) from e

        logger.info(
            "Messages enqueued",
            extra={"extra_data": {"user_id": user_id, "queued": queued, "count": len(stored)}}
        )
        return stored

    def list_all(self, user_id: str) -> List[str]:
        """All texts for a user, oldest first (updated_at ASC, id ASC)."""
        try:
            rows = (
                self.db.query(Message.message)
                .filter(Message.user_id == user_id)
                .order_by(Message.updated_at.asc(), Message.id.asc())
                .all()
            )
        except SQLAlchemyError as e:
            self.db.rollback()
            raise StorageError("list_all", e) from e

        return [message for (message,) in rows]

    def list_queued(self, user_id: str) -> List[str]:
        """Texts still queued for a user. No ordering guarantee."""
        try:
            rows = (
                self.db.query(Message.message)
                .filter(Message.user_id == user_id, Message.queued.is_(True))
                .all()
            )
        except SQLAlchemyError as e:
            self.db.rollback()
            raise StorageError("list_queued", e) from e

        return [message for (message,) in rows]

    def unqueue(self, user_id: str) -> List[str]:
        """
        Mark every message of a user as delivered and re-stamp updated_at.

        Rows that are already unqueued are touched as well, so their
        updated_at moves forward too. Runs as a single UPDATE. Returns the
        texts of all touched rows; they share the new updated_at, so id
        order is also their listing order.
        """
        statement = (
            update(Message)
            .where(Message.user_id == user_id)
            .values(queued=False, updated_at=func.now())
            .returning(Message.id, Message.message)
            .execution_options(synchronize_session=False)
        )
        try:
            rows = self.db.execute(statement).all()
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise StorageError("unqueue", e) from e

        updated = [message for _, message in sorted(rows)]

        logger.info(
            "Messages unqueued",
            extra={"extra_data": {"user_id": user_id, "count": len(updated)}}
        )
        return updated
