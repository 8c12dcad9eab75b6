"""
Conversation state as seen by the orchestrator (independent of storage).
"""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

from lead_qualifier.constants.statuses import STATUS_IN_PROGRESS


@dataclass
class Turn:
    role: str  # user, assistant
    message: str
    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC))


@dataclass
class ConversationState:
    conversation_id: str
    customer_id: str
    turns: list[Turn] = field(default_factory=list)
    fields: dict[str, Any] = field(default_factory=dict)
    lead_status: str = STATUS_IN_PROGRESS
    qualified_notified: bool = False

    @classmethod
    def new(cls, conversation_id: str, customer_id: str) -> "ConversationState":
        return cls(conversation_id=conversation_id, customer_id=customer_id)

    @property
    def history(self) -> list[dict[str, str]]:
        """Turns as role/content dicts, oldest first (chat-completion message shape)."""
        return [{"role": turn.role, "content": turn.message} for turn in self.turns]
