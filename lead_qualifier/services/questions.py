"""
Question configuration for the qualification flow.

Asked in order; the first question whose field is still missing is the next
prompt. Texts are str.format templates over the customer profile.
"""

from dataclasses import dataclass

from lead_qualifier.constants.lead_fields import (
    FIELD_BUDGET,
    FIELD_EMAIL,
    FIELD_NAME,
    FIELD_PHONE,
    FIELD_PROJECT_TYPE,
    FIELD_TIMELINE_MONTHS,
    FIELD_ZIP_CODE,
)


@dataclass
class Question:
    """Represents a single question in the qualification flow."""

    key: str
    text: str


QUALIFICATION_QUESTIONS = [
    Question(
        key=FIELD_PROJECT_TYPE,
        text=(
            "Hi! I'm Mason from {company_name}. I'd love to hear about your remodeling project. "
            "What type of project are you thinking about? (kitchen, bathroom, basement, addition...)"
        ),
    ),
    Question(
        key=FIELD_ZIP_CODE,
        text="Great! What's your zip code so I can make sure we service your area?",
    ),
    Question(
        key=FIELD_BUDGET,
        text=(
            "Perfect! To ensure we're the right fit, what's your approximate budget for this project? "
            "We typically work with projects starting at {minimum_budget}."
        ),
    ),
    Question(
        key=FIELD_TIMELINE_MONTHS,
        text="Excellent! When are you hoping to complete this project? (e.g. 3 months, 8 weeks, 1 year)",
    ),
    Question(
        key=FIELD_NAME,
        text="Based on what you've shared, I'd love to connect you with our design team! What's your full name?",
    ),
    Question(
        key=FIELD_EMAIL,
        text="Great! What's the best email address to reach you?",
    ),
    Question(
        key=FIELD_PHONE,
        text="Perfect! And what's your phone number?",
    ),
]


def get_question(key: str) -> Question | None:
    """Get question by the field it collects."""
    return next((q for q in QUALIFICATION_QUESTIONS if q.key == key), None)


def get_total_questions() -> int:
    """Get total number of questions."""
    return len(QUALIFICATION_QUESTIONS)
