"""
Operator lead schemas (dashboard listing, manual notification).
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict


class NotifyQualifiedRequest(BaseModel):
    conversation_id: str
    force: bool = False  # Resend even if the notification already fired


class NotifyQualifiedResponse(BaseModel):
    success: bool
    conversation_id: str
    sent: bool
    skipped_reason: str | None = None


class LeadListItem(BaseModel):
    """One conversation as shown on the lead dashboard."""

    model_config = ConfigDict(from_attributes=True)

    conversation_id: str
    customer_id: str
    lead_status: str
    lead_fields: dict[str, Any]
    qualified_notified_at: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
