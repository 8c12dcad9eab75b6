"""
Chat message request/response schemas.
"""

from pydantic import BaseModel, Field


class MessageRequest(BaseModel):
    message: str = Field(..., min_length=1, max_length=4000)
    conversation_id: str | None = Field(default=None, max_length=128)


class MessageResponse(BaseModel):
    response: str
    conversation_id: str
    lead_status: str
    persisted: bool = True
