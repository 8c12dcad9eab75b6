"""
Customer API request/response schemas.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class CustomerCreateRequest(BaseModel):
    """Request schema for creating a customer. customer_id is generated when omitted."""

    customer_id: str | None = Field(default=None, max_length=64)
    company_name: str = Field(..., min_length=1, max_length=255)
    contact_email: str | None = Field(default=None, max_length=255)
    service_areas: str = ""  # Comma-separated zip prefixes; only the first is matched
    minimum_budget: int = Field(default=0, ge=0)
    timeline_threshold: int = Field(default=12, ge=1)  # Months


class CustomerOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    customer_id: str
    company_name: str
    contact_email: str | None = None
    service_areas: str
    minimum_budget: int
    timeline_threshold: int
    created_at: datetime | None = None


class CustomerResponse(BaseModel):
    success: bool = True
    customer: CustomerOut
