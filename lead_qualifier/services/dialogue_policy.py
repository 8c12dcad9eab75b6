"""
Pure policy helpers for the qualification dialogue (no DB, no IO).

Decides the deterministic reply for a turn: a rejection naming the failing
criterion, the next missing-field question, or the closing confirmation.
This is also the fallback whenever the generative responder fails.
"""

from collections.abc import Mapping
from typing import Any

from lead_qualifier.constants.lead_fields import FIELD_PROJECT_TYPE
from lead_qualifier.constants.statuses import STATUS_DISQUALIFIED
from lead_qualifier.services.metadata_merge import is_empty_value
from lead_qualifier.services.profiles import CustomerProfile
from lead_qualifier.services.qualification import (
    REASON_AREA,
    REASON_BUDGET,
    REASON_TIMELINE,
    disqualification_reason,
)
from lead_qualifier.services.questions import QUALIFICATION_QUESTIONS

# Shown when a turn fails outright; the chat user never sees a raw error
FALLBACK_GREETING = (
    "Thanks for reaching out! I'm Mason, your remodeling specialist. "
    "What type of project are you thinking about?"
)

COMPANY_QUESTION_PHRASES = (
    "what company",
    "which company",
    "who do you work for",
    "who are you with",
    "what business",
)


def format_currency(amount: int) -> str:
    """75000 -> '$75,000'."""
    return f"${amount:,}"


def normalize_message(text: str | None) -> str:
    """Normalize inbound text for phrase matching (strip, lower)."""
    return (text or "").strip().lower()


def is_company_question(message_text: str | None) -> bool:
    """True if the user asks who they are talking to."""
    lower = normalize_message(message_text)
    return any(phrase in lower for phrase in COMPANY_QUESTION_PHRASES)


def rejection_message(reason: str | None, profile: CustomerProfile) -> str:
    """Polite rejection worded with the customer's thresholds."""
    company = profile.company_name
    if reason == REASON_AREA:
        return (
            f"Thank you so much for reaching out! Unfortunately, {company} currently only serves "
            f"the {profile.service_areas} area, so we aren't able to take on your project. "
            "We wish you the best of luck with it!"
        )
    if reason == REASON_BUDGET:
        return (
            f"Thank you for sharing that! {company} works with projects starting at "
            f"{format_currency(profile.minimum_budget)}, so we may not be the best fit for this one. "
            "We wish you the best of luck with your project!"
        )
    if reason == REASON_TIMELINE:
        return (
            f"Thanks for letting me know! {company} is currently scheduling projects that start "
            f"within {profile.timeline_threshold} months, so we can't take this one on right now. "
            "Please reach out again when your timeline gets closer!"
        )
    return (
        f"Thank you for your interest in {company}! Unfortunately, your project is outside "
        "what we can take on right now. We wish you the best of luck with it!"
    )


def closing_message(fields: Mapping[str, Any]) -> str:
    project_type = fields.get(FIELD_PROJECT_TYPE) or "remodeling"
    return (
        f"Excellent! Our design team will reach out within 24 hours to discuss your "
        f"{project_type} project. Thank you!"
    )


def next_prompt(fields: Mapping[str, Any], status: str, profile: CustomerProfile) -> str:
    """
    Select the deterministic reply for the current fields and status.

    Order: rejection if disqualified, then the first missing field in
    project type, zip, budget, timeline, name, email, phone; otherwise the
    closing confirmation.
    """
    if status == STATUS_DISQUALIFIED:
        return rejection_message(disqualification_reason(fields, profile), profile)

    for question in QUALIFICATION_QUESTIONS:
        if is_empty_value(fields.get(question.key)):
            return question.text.format(
                company_name=profile.company_name,
                minimum_budget=format_currency(profile.minimum_budget),
            )

    return closing_message(fields)


def reply_for_message(
    message_text: str | None,
    fields: Mapping[str, Any],
    status: str,
    profile: CustomerProfile,
) -> str:
    """
    next_prompt, prefixed with the company name when the user asks who they are
    talking to (unless the lead is disqualified).
    """
    prompt = next_prompt(fields, status, profile)
    if status != STATUS_DISQUALIFIED and is_company_question(message_text):
        return f"I work for {profile.company_name}. {prompt}"
    return prompt
