"""
Error taxonomy for the qualification flow.

Absence of an extracted field is not an error; extraction never raises.
"""


class LeadQualifierError(Exception):
    """Base class for errors raised by lead_qualifier services."""


class NotFoundError(LeadQualifierError):
    """Unknown customer or conversation. Callers fall back to defaults / new state."""


class PersistenceError(LeadQualifierError):
    """Store read or write failed. Logged and surfaced to operators, never to the chat user."""


class ResponderUnavailable(LeadQualifierError):
    """Generative responder failed or is not configured. Always falls back to the dialogue policy."""


class ConflictError(LeadQualifierError):
    """A record with the same unique key already exists (e.g. duplicate customer_id)."""
