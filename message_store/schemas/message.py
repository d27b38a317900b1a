"""
Pydantic schemas for request/response validation.
"""
from typing import Dict, List, Optional

from pydantic import BaseModel, Field


class EnqueueRequest(BaseModel):
    """Request schema for POST /messages."""

    user_id: str = Field(..., description="Conversation/user the messages belong to")
    queued: bool = Field(..., description="True if the messages are not delivered yet")
    msgs: List[str] = Field(..., description="Message texts, stored in this order")

    model_config = {
        "json_schema_extra": {
            "example": {
                "user_id": "u1",
                "queued": True,
                "msgs": ["Hello", "How can I help?"],
            }
        }
    }


class HealthResponse(BaseModel):
    """Response schema for health endpoints."""
    status: str
    checks: Optional[Dict[str, str]] = None


class ErrorResponse(BaseModel):
    """Standard error response schema."""
    error: str
