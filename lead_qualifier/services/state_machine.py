"""
State machine service - defines allowed lead status transitions.

Statuses are recomputed by the evaluator on every turn; this module validates
the move and identifies the qualifying edge, which drives the one-time
notification.

- in_progress -> qualified | disqualified
- qualified -> disqualified (a disqualifying fact learned after qualifying)
- disqualified never leaves: first-write-wins cannot remove the offending fact
"""

import logging

from lead_qualifier.constants.statuses import (
    STATUS_DISQUALIFIED,
    STATUS_IN_PROGRESS,
    STATUS_QUALIFIED,
)

logger = logging.getLogger(__name__)

# Format: {from_status: [allowed_to_statuses]} (staying put is always allowed)
ALLOWED_TRANSITIONS = {
    STATUS_IN_PROGRESS: [STATUS_QUALIFIED, STATUS_DISQUALIFIED],
    STATUS_QUALIFIED: [STATUS_DISQUALIFIED],
    STATUS_DISQUALIFIED: [],
}

STATE_SEMANTICS = {
    STATUS_IN_PROGRESS: "Still collecting project, area, budget, timeline or contact details",
    STATUS_QUALIFIED: "Meets the customer's criteria and supplied name, email and phone",
    STATUS_DISQUALIFIED: "A known fact is outside the customer's area, budget or timeline",
}


def is_transition_allowed(from_status: str, to_status: str) -> bool:
    """
    Check if a status transition is allowed.

    Args:
        from_status: Current status
        to_status: Target status

    Returns:
        True if transition is allowed (or a no-op), False otherwise
    """
    if from_status == to_status:
        return True
    return to_status in ALLOWED_TRANSITIONS.get(from_status, [])


def record_transition(conversation_id: str, from_status: str, to_status: str) -> bool:
    """
    Log a status change for a conversation.

    The evaluator is authoritative, so a transition outside the table is
    logged and accepted rather than rejected.

    Returns:
        True if the transition is in the allowed table
    """
    if from_status == to_status:
        return True
    allowed = is_transition_allowed(from_status, to_status)
    if allowed:
        logger.info(f"Conversation {conversation_id} transitioned: {from_status} -> {to_status}")
    else:
        logger.warning(
            f"Unexpected status transition for conversation {conversation_id}: "
            f"{from_status} -> {to_status}. "
            f"Allowed transitions from {from_status}: {ALLOWED_TRANSITIONS.get(from_status, [])}"
        )
    return allowed


def should_fire_qualified_notification(to_status: str, already_notified: bool) -> bool:
    """
    Edge trigger for the qualified-lead notification: fires on reaching
    qualified, at most once per conversation.
    """
    return to_status == STATUS_QUALIFIED and not already_notified


def get_allowed_transitions(from_status: str) -> list[str]:
    """Allowed target statuses from a status (excluding staying put)."""
    return ALLOWED_TRANSITIONS.get(from_status, [])


def is_terminal_state(status: str) -> bool:
    """True if no transitions leave this status."""
    return not ALLOWED_TRANSITIONS.get(status)


def get_state_semantics(status: str) -> str | None:
    """Semantic meaning of a status (for documentation/debugging)."""
    return STATE_SEMANTICS.get(status)
