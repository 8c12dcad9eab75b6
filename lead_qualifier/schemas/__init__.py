"""
Pydantic schemas for API request/response validation.
"""

from lead_qualifier.schemas.conversations import MessageRequest, MessageResponse
from lead_qualifier.schemas.customers import CustomerCreateRequest, CustomerOut, CustomerResponse
from lead_qualifier.schemas.leads import (
    LeadListItem,
    NotifyQualifiedRequest,
    NotifyQualifiedResponse,
)

__all__ = [
    "MessageRequest",
    "MessageResponse",
    "CustomerCreateRequest",
    "CustomerOut",
    "CustomerResponse",
    "LeadListItem",
    "NotifyQualifiedRequest",
    "NotifyQualifiedResponse",
]
