"""
Event type constants for SystemEvent.

Use these instead of string literals to ensure consistency.
"""

# ---- Qualification ----
EVENT_LEAD_QUALIFIED = "lead.qualified"
EVENT_LEAD_DISQUALIFIED = "lead.disqualified"
EVENT_STATUS_REGRESSION = "lead.status_regression"

# ---- Notifications ----
EVENT_NOTIFICATION_SENT = "notification.qualified_sent"
EVENT_NOTIFICATION_FAILURE = "notification.qualified_failure"

# ---- Responder ----
EVENT_RESPONDER_FALLBACK = "responder.fallback"
