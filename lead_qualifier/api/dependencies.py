"""FastAPI dependencies that assemble per-request services from settings."""

from fastapi import Depends
from sqlalchemy.orm import Session

from lead_qualifier.core.config import settings
from lead_qualifier.db.deps import get_db
from lead_qualifier.services.conversation import (
    ConversationOrchestrator,
    OrchestratorDeps,
    SqlConversationStore,
    conversation_locks,
)
from lead_qualifier.services.notifications import NotificationSink, get_notifier
from lead_qualifier.services.profiles import ProfileDefaults
from lead_qualifier.services.responder import GenerativeResponder, get_responder


def get_profile_defaults() -> ProfileDefaults:
    return ProfileDefaults.from_settings(settings)


def get_notification_sink() -> NotificationSink:
    return get_notifier()


def get_generative_responder() -> GenerativeResponder | None:
    return get_responder()


def get_orchestrator(
    db: Session = Depends(get_db),
    notifier: NotificationSink = Depends(get_notification_sink),
    responder: GenerativeResponder | None = Depends(get_generative_responder),
    defaults: ProfileDefaults = Depends(get_profile_defaults),
) -> ConversationOrchestrator:
    """Orchestrator bound to the request's session. The lock registry is process-wide."""
    deps = OrchestratorDeps(
        store=SqlConversationStore(db),
        notifier=notifier,
        responder=responder,
        defaults=defaults,
        locks=conversation_locks,
    )
    return ConversationOrchestrator(deps)
