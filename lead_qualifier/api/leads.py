"""
Operator endpoints: manual qualified-lead notification and the lead list.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Security
from sqlalchemy.orm import Session

from lead_qualifier.api.auth import get_admin_auth
from lead_qualifier.api.dependencies import get_notification_sink, get_profile_defaults
from lead_qualifier.db.deps import get_db
from lead_qualifier.schemas.leads import (
    LeadListItem,
    NotifyQualifiedRequest,
    NotifyQualifiedResponse,
)
from lead_qualifier.services.errors import NotFoundError, PersistenceError
from lead_qualifier.services.leads import list_leads, notify_qualified_lead
from lead_qualifier.services.notifications import NotificationSink
from lead_qualifier.services.profiles import ProfileDefaults

logger = logging.getLogger(__name__)

router = APIRouter()
dashboard_router = APIRouter()


@router.post("/notify-qualified", response_model=NotifyQualifiedResponse)
async def notify_qualified(
    body: NotifyQualifiedRequest,
    db: Session = Depends(get_db),
    notifier: NotificationSink = Depends(get_notification_sink),
    defaults: ProfileDefaults = Depends(get_profile_defaults),
    _auth: bool = Security(get_admin_auth),
):
    """
    (Re)send the qualified-lead email for a conversation.
    Skips conversations already notified unless force=true.
    """
    try:
        result = await notify_qualified_lead(
            db, notifier, body.conversation_id, defaults=defaults, force=body.force
        )
    except NotFoundError:
        raise HTTPException(status_code=404, detail="Conversation not found")
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except PersistenceError:
        raise HTTPException(status_code=500, detail="Notification sent but could not be recorded")

    return NotifyQualifiedResponse(
        success=result.sent or result.skipped_reason == "already_notified",
        conversation_id=result.conversation_id,
        sent=result.sent,
        skipped_reason=result.skipped_reason,
    )


@dashboard_router.get("/leads", response_model=list[LeadListItem])
def dashboard_leads(
    customer_id: str | None = None,
    status: str | None = None,
    limit: int = 50,
    db: Session = Depends(get_db),
    _auth: bool = Security(get_admin_auth),
):
    """
    Read-only lead list, most recently active first.
    Query params: customer_id, status (in_progress, qualified, disqualified), limit (max 200).
    """
    try:
        conversations = list_leads(db, customer_id=customer_id, status=status, limit=limit)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return [LeadListItem.model_validate(c) for c in conversations]
