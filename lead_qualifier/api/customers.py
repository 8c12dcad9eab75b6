"""
Customer lookup and registration.

Lookup is public (the chat widget loads its company profile by id);
responses use the {success, customer} / {success, message} envelope.
"""

import logging

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from lead_qualifier.db.deps import get_db
from lead_qualifier.schemas.customers import CustomerCreateRequest, CustomerOut, CustomerResponse
from lead_qualifier.services.customers import create_customer, get_customer
from lead_qualifier.services.errors import ConflictError, PersistenceError

logger = logging.getLogger(__name__)

router = APIRouter()


def _failure(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "message": message})


def _lookup(db: Session, customer_id: str | None):
    if not customer_id or not customer_id.strip():
        return _failure(status.HTTP_400_BAD_REQUEST, "Customer ID required")
    customer = get_customer(db, customer_id.strip())
    if customer is None:
        logger.info(f"Customer lookup miss: {customer_id}")
        return _failure(status.HTTP_404_NOT_FOUND, "Customer not found")
    return CustomerResponse(customer=CustomerOut.model_validate(customer))


@router.get("", response_model=CustomerResponse)
def lookup_customer_by_query(customerId: str | None = None, db: Session = Depends(get_db)):  # noqa: N803
    """GET /customers?customerId=... (query form used by the widget loader)."""
    return _lookup(db, customerId)


@router.get("/{customer_id}", response_model=CustomerResponse)
def lookup_customer(customer_id: str, db: Session = Depends(get_db)):
    return _lookup(db, customer_id)


@router.post("", response_model=CustomerResponse, status_code=status.HTTP_201_CREATED)
def register_customer(body: CustomerCreateRequest, db: Session = Depends(get_db)):
    try:
        customer = create_customer(
            db,
            company_name=body.company_name,
            contact_email=body.contact_email,
            service_areas=body.service_areas,
            minimum_budget=body.minimum_budget,
            timeline_threshold=body.timeline_threshold,
            customer_id=body.customer_id,
        )
    except ConflictError as e:
        return _failure(status.HTTP_409_CONFLICT, str(e))
    except PersistenceError:
        return _failure(status.HTTP_500_INTERNAL_SERVER_ERROR, "Server error")
    return CustomerResponse(customer=CustomerOut.model_validate(customer))
