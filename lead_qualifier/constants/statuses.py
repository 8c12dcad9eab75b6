"""
Lead status constants - centralized to avoid circular imports.
"""

STATUS_IN_PROGRESS = "in_progress"
STATUS_QUALIFIED = "qualified"
STATUS_DISQUALIFIED = "disqualified"

LEAD_STATUSES = (STATUS_IN_PROGRESS, STATUS_QUALIFIED, STATUS_DISQUALIFIED)

# Turn roles
ROLE_USER = "user"
ROLE_ASSISTANT = "assistant"
