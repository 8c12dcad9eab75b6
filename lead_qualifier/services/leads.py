"""
Operator-side lead operations: listing conversations and (re)sending the
qualified-lead notification by hand.
"""

import logging
from dataclasses import dataclass

from sqlalchemy import desc, func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from lead_qualifier.constants.event_types import (
    EVENT_NOTIFICATION_FAILURE,
    EVENT_NOTIFICATION_SENT,
)
from lead_qualifier.constants.statuses import LEAD_STATUSES, STATUS_QUALIFIED
from lead_qualifier.db.models import Conversation
from lead_qualifier.services.customers import get_customer
from lead_qualifier.services.errors import NotFoundError, PersistenceError
from lead_qualifier.services.notifications import NotificationSink
from lead_qualifier.services.profiles import CustomerProfile, ProfileDefaults
from lead_qualifier.services.system_event_service import error, info

logger = logging.getLogger(__name__)

MAX_LIST_LIMIT = 200


def get_conversation_or_none(db: Session, conversation_id: str) -> Conversation | None:
    stmt = select(Conversation).where(Conversation.conversation_id == conversation_id)
    return db.execute(stmt).scalar_one_or_none()


def list_leads(
    db: Session,
    customer_id: str | None = None,
    status: str | None = None,
    limit: int = 50,
) -> list[Conversation]:
    """
    Most recently updated conversations first.

    Raises:
        ValueError: status is not a known lead status
    """
    stmt = select(Conversation).order_by(desc(Conversation.updated_at), desc(Conversation.id))
    if customer_id:
        stmt = stmt.where(Conversation.customer_id == customer_id)
    if status:
        status = status.lower()
        if status not in LEAD_STATUSES:
            raise ValueError(f"Unknown lead status '{status}'. Expected one of: {', '.join(LEAD_STATUSES)}")
        stmt = stmt.where(Conversation.lead_status == status)
    stmt = stmt.limit(max(0, min(limit, MAX_LIST_LIMIT)))
    return list(db.execute(stmt).scalars().all())


@dataclass
class ManualNotifyResult:
    conversation_id: str
    sent: bool
    skipped_reason: str | None = None


def _record_event(db: Session, log_fn, event_type: str, conversation_id: str, payload: dict) -> None:
    """Event logging failures are logged, never raised into the operator request."""
    try:
        log_fn(db, event_type, conversation_id=conversation_id, payload=payload)
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Failed to record system event {event_type} for {conversation_id}: {e}")


async def notify_qualified_lead(
    db: Session,
    notifier: NotificationSink,
    conversation_id: str,
    defaults: ProfileDefaults,
    force: bool = False,
) -> ManualNotifyResult:
    """
    Send the qualified-lead notification for a stored conversation.

    Without force, a conversation that already fired its notification is
    skipped. A successful send records the notification claim.

    Raises:
        NotFoundError: unknown conversation
        ValueError: conversation is not qualified
        PersistenceError: recording the claim failed
    """
    conversation = get_conversation_or_none(db, conversation_id)
    if conversation is None:
        raise NotFoundError(f"Conversation {conversation_id} not found")

    if conversation.lead_status != STATUS_QUALIFIED:
        raise ValueError(
            f"Cannot notify for conversation in status '{conversation.lead_status}'. "
            f"Lead must be '{STATUS_QUALIFIED}'."
        )

    if conversation.qualified_notified_at is not None and not force:
        logger.info(f"Qualified notification for {conversation_id} already sent - skipping")
        return ManualNotifyResult(conversation_id=conversation_id, sent=False, skipped_reason="already_notified")

    customer = get_customer(db, conversation.customer_id)
    if customer is not None:
        profile = CustomerProfile.from_model(customer)
    else:
        profile = defaults.profile_for(conversation.customer_id)

    fields = dict(conversation.lead_fields or {})
    delivered = await notifier.notify_qualified(profile, fields, conversation_id)
    if not delivered:
        _record_event(db, error, EVENT_NOTIFICATION_FAILURE, conversation_id, {"manual": True})
        return ManualNotifyResult(conversation_id=conversation_id, sent=False, skipped_reason="delivery_failed")

    try:
        if conversation.qualified_notified_at is None:
            conversation.qualified_notified_at = func.now()
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Sent notification for {conversation_id} but failed to record it: {e}")
        raise PersistenceError(f"notify_qualified_lead failed: {e}") from e

    _record_event(db, info, EVENT_NOTIFICATION_SENT, conversation_id, {"manual": True, "force": force})
    return ManualNotifyResult(conversation_id=conversation_id, sent=True)
