"""
Message queue endpoints.
"""
from typing import Annotated, List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from message_store.core.database import get_db
from message_store.core.logging import get_logger
from message_store.schemas.message import EnqueueRequest, ErrorResponse
from message_store.store import MessageStore

logger = get_logger(__name__)

router = APIRouter(prefix="/messages", tags=["Messages"])

STORAGE_ERROR_RESPONSES = {
    500: {"model": ErrorResponse, "description": "Database failure"},
}


def get_store(db: Annotated[Session, Depends(get_db)]) -> MessageStore:
    """Dependency to get a store bound to the request's session."""
    return MessageStore(db)


@router.post(
    "",
    response_model=List[str],
    responses={
        **STORAGE_ERROR_RESPONSES,
        422: {"model": ErrorResponse, "description": "Empty message batch"},
    },
    summary="Enqueue messages",
    description="Store a batch of messages for one user. Returns the stored texts."
)
def enqueue_messages(
    body: EnqueueRequest,
    store: Annotated[MessageStore, Depends(get_store)],
) -> List[str]:
    return store.enqueue(body.user_id, body.queued, body.msgs)


@router.get(
    "/{user_id}",
    response_model=List[str],
    responses=STORAGE_ERROR_RESPONSES,
    summary="List messages",
    description="All messages of a user ordered by last update, then insertion."
)
def list_messages(
    user_id: str,
    store: Annotated[MessageStore, Depends(get_store)],
) -> List[str]:
    messages = store.list_all(user_id)
    logger.debug(
        "Listed messages",
        extra={"extra_data": {"user_id": user_id, "returned": len(messages)}}
    )
    return messages


@router.get(
    "/{user_id}/queued",
    response_model=List[str],
    responses=STORAGE_ERROR_RESPONSES,
    summary="List queued messages",
    description="Messages of a user that have not been unqueued yet."
)
def list_queued_messages(
    user_id: str,
    store: Annotated[MessageStore, Depends(get_store)],
) -> List[str]:
    messages = store.list_queued(user_id)
    logger.debug(
        "Listed queued messages",
        extra={"extra_data": {"user_id": user_id, "returned": len(messages)}}
    )
    return messages


@router.put(
    "/{user_id}/unqueue",
    response_model=List[str],
    responses=STORAGE_ERROR_RESPONSES,
    summary="Unqueue messages",
    description="Mark all messages of a user as delivered. Returns the updated texts."
)
def unqueue_messages(
    user_id: str,
    store: Annotated[MessageStore, Depends(get_store)],
) -> List[str]:
    """
    Unqueue every message of the user.

    Already-delivered messages are included and get a fresh updated_at.
    """
    return store.unqueue(user_id)
