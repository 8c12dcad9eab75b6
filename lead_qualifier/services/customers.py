"""
Customer records - the remodeling companies that receive qualified leads.
"""

import logging
import secrets
import string
import time

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from lead_qualifier.db.helpers import commit_and_refresh
from lead_qualifier.db.models import Customer
from lead_qualifier.services.errors import ConflictError, PersistenceError

logger = logging.getLogger(__name__)

CUSTOMER_ID_PREFIX = "CUSTOMER_"
_CUSTOMER_ID_ALPHABET = string.ascii_uppercase + string.digits


def generate_customer_id() -> str:
    """CUSTOMER_<epoch millis><5 random uppercase letters/digits>, e.g. CUSTOMER_1757835381571NCBTR."""
    suffix = "".join(secrets.choice(_CUSTOMER_ID_ALPHABET) for _ in range(5))
    return f"{CUSTOMER_ID_PREFIX}{int(time.time() * 1000)}{suffix}"


def get_customer(db: Session, customer_id: str) -> Customer | None:
    stmt = select(Customer).where(Customer.customer_id == customer_id)
    return db.execute(stmt).scalar_one_or_none()


def create_customer(
    db: Session,
    company_name: str,
    contact_email: str | None = None,
    service_areas: str = "",
    minimum_budget: int = 0,
    timeline_threshold: int = 12,
    customer_id: str | None = None,
) -> Customer:
    """
    Create a customer.

    Raises:
        ConflictError: customer_id already taken
        PersistenceError: any other database failure
    """
    customer = Customer(
        customer_id=customer_id or generate_customer_id(),
        company_name=company_name,
        contact_email=contact_email,
        service_areas=service_areas,
        minimum_budget=minimum_budget,
        timeline_threshold=timeline_threshold,
    )
    db.add(customer)
    try:
        commit_and_refresh(db, customer)
    except IntegrityError as e:
        db.rollback()
        raise ConflictError(f"Customer {customer.customer_id} already exists") from e
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Failed to create customer {customer.customer_id}: {e}")
        raise PersistenceError(f"create_customer failed: {e}") from e

    logger.info(f"Created customer {customer.customer_id} ({company_name})")
    return customer
