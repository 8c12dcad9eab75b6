"""
System event logging service.

Provides structured logging of key events and failures (qualified leads,
notification failures, responder fallbacks) to the database. All SystemEvent
creation should go through log_event (or info/warn/error) to keep the payload
shape consistent.
"""

import logging

from sqlalchemy.orm import Session

from lead_qualifier.db.models import SystemEvent

logger = logging.getLogger(__name__)


def _resolve_correlation_id(correlation_id: str | None) -> str | None:
    """Use request-scoped contextvar when not explicitly passed."""
    if correlation_id is not None:
        return correlation_id
    from lead_qualifier.middleware.correlation_id import get_correlation_id

    return get_correlation_id(None)


def log_event(
    db: Session,
    level: str,
    event_type: str,
    conversation_id: str | None = None,
    payload: dict | None = None,
    exc: BaseException | None = None,
    correlation_id: str | None = None,
) -> SystemEvent:
    """
    Log a system event to the database.

    Args:
        db: Database session
        level: Event level (INFO, WARN, ERROR)
        event_type: Type of event (see constants.event_types)
        conversation_id: Optional conversation the event belongs to
        payload: Optional additional event data (dict). Will be copied.
        exc: Optional exception; if provided, error type and message are added to payload.
        correlation_id: Optional correlation ID for request tracing.

    Returns:
        Created SystemEvent object
    """
    normalized: dict = dict(payload) if payload else {}
    if exc is not None:
        normalized["error"] = {
            "type": type(exc).__name__,
            "message": str(exc)[:500],  # Truncate to avoid huge payloads
        }
    resolved_cid = _resolve_correlation_id(correlation_id)
    if resolved_cid is not None:
        normalized["correlation_id"] = resolved_cid

    event = SystemEvent(
        level=level.upper(),
        event_type=event_type,
        conversation_id=conversation_id,
        payload=normalized if normalized else None,
    )
    db.add(event)
    db.commit()
    db.refresh(event)
    return event


def info(db: Session, event_type: str, conversation_id: str | None = None, **kwargs) -> SystemEvent:
    """Log an INFO-level system event."""
    return log_event(db, "INFO", event_type, conversation_id=conversation_id, **kwargs)


def warn(db: Session, event_type: str, conversation_id: str | None = None, **kwargs) -> SystemEvent:
    """Log a WARN-level system event."""
    return log_event(db, "WARN", event_type, conversation_id=conversation_id, **kwargs)


def error(db: Session, event_type: str, conversation_id: str | None = None, **kwargs) -> SystemEvent:
    """Log an ERROR-level system event."""
    return log_event(db, "ERROR", event_type, conversation_id=conversation_id, **kwargs)
