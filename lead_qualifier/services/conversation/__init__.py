"""
Conversation flow: state, store, per-conversation locks, orchestrator.

Re-exports for stable public API: from lead_qualifier.services.conversation import ConversationOrchestrator, etc.
"""

from lead_qualifier.services.conversation.locks import ConversationLocks, conversation_locks
from lead_qualifier.services.conversation.orchestrator import (
    ConversationOrchestrator,
    OrchestratorDeps,
    TurnResult,
)
from lead_qualifier.services.conversation.state import ConversationState, Turn
from lead_qualifier.services.conversation.store import ConversationStore, SqlConversationStore

__all__ = [
    "ConversationLocks",
    "ConversationOrchestrator",
    "ConversationState",
    "ConversationStore",
    "OrchestratorDeps",
    "SqlConversationStore",
    "Turn",
    "TurnResult",
    "conversation_locks",
]
