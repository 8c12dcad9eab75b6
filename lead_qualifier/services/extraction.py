"""
Field extraction - pulls typed lead fields out of a single chat message.

Reads only the message it is given, never prior state. Runs as an ordered
pipeline: email -> phone -> budget -> timeline -> zip, then project type and
name. Each digit-consuming field masks its span so later fields do not
re-read the same digits (a phone number is never a zip code or a budget).

Extraction never raises; a field that is not found is simply omitted.
"""

import logging
import math
import re
from typing import Any

from lead_qualifier.constants.lead_fields import (
    FIELD_BUDGET,
    FIELD_EMAIL,
    FIELD_NAME,
    FIELD_PHONE,
    FIELD_PROJECT_TYPE,
    FIELD_TIMELINE_MONTHS,
    FIELD_ZIP_CODE,
)
from lead_qualifier.services.text_normalization import mask_span, normalize_text

logger = logging.getLogger(__name__)

# Budgets at or below this are rejected (stray numbers, "$500 deposit", etc.)
BUDGET_SANITY_FLOOR = 1000

EMAIL_PATTERN = re.compile(r"\b[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}\b")

# 10 digits: 555-123-4567, 555.123.4567, 555 123 4567, 5551234567, (555) 123-4567
PHONE_PATTERN = re.compile(r"(?<![\d(])(?:\(\d{3}\)\s?|\d{3}[-.\s]?)\d{3}[-.\s]?\d{4}(?!\d)")

_AMOUNT = r"(?P<amount>\d{1,3}(?:,\d{3})+(?:\.\d+)?|\d+(?:\.\d+)?)"
_THOUSANDS_UNIT = r"(?P<unit>k|thousand)\b"

# Priority order: currency-prefixed, then bare "75k" / "75 thousand", then "75000 dollars"
BUDGET_PATTERNS = (
    re.compile(r"\$\s?" + _AMOUNT + r"(?:\s*" + _THOUSANDS_UNIT + r")?", re.IGNORECASE),
    re.compile(r"(?<![\w$.,])" + _AMOUNT + r"\s*" + _THOUSANDS_UNIT, re.IGNORECASE),
    re.compile(r"(?<![\w$.,])" + _AMOUNT + r"\s*(?:dollars?|bucks|usd)\b", re.IGNORECASE),
)

NUMBER_WORDS = {
    "one": 1,
    "two": 2,
    "three": 3,
    "four": 4,
    "five": 5,
    "six": 6,
    "seven": 7,
    "eight": 8,
    "nine": 9,
    "ten": 10,
    "eleven": 11,
    "twelve": 12,
}

TIMELINE_PATTERN = re.compile(
    r"\b(?P<count>\d+|" + "|".join(NUMBER_WORDS) + r")\s*-?\s*(?P<unit>months?|weeks?|years?)\b",
    re.IGNORECASE,
)

ZIP_PATTERN = re.compile(r"(?<!\d)(\d{5})(?!\d)")

# (keyword, canonical project type). Multi-word phrases first so the more
# specific project wins; aliases canonicalize to a single value.
PROJECT_TYPE_KEYWORDS = (
    ("master suite", "master suite"),
    ("living room", "living room"),
    ("family room", "family room"),
    ("dining room", "dining room"),
    ("whole house", "whole house"),
    ("whole home", "whole house"),
    ("full remodel", "full remodel"),
    ("kitchen", "kitchen"),
    ("bathroom", "bathroom"),
    ("bath", "bathroom"),
    ("bedroom", "bedroom"),
    ("basement", "basement"),
    ("addition", "addition"),
    ("extension", "extension"),
    ("office", "office"),
    ("den", "den"),
    ("renovation", "renovation"),
)

_PROJECT_TYPE_PATTERNS = tuple(
    (re.compile(rf"\b{re.escape(keyword)}s?\b", re.IGNORECASE), canonical)
    for keyword, canonical in PROJECT_TYPE_KEYWORDS
)

# Words that make a "name" candidate conversational filler rather than a name
NAME_STOPWORDS = frozenset(
    {
        # greetings / acknowledgements
        "yes", "yeah", "yep", "yup", "no", "nope", "nah", "sure", "ok", "okay",
        "good", "great", "fine", "hello", "hi", "hey", "thanks", "thank", "you",
        "cool", "awesome", "perfect", "sounds", "nice", "please", "maybe",
        # time words
        "soon", "asap", "later", "now", "today", "tomorrow", "next", "month",
        "months", "week", "weeks", "year", "years",
        # function words
        "a", "an", "the", "and", "or", "but", "for", "to", "in", "on", "at",
        "of", "with", "my", "me", "i", "is", "it", "its", "we", "us", "our",
        "your", "this", "that", "not", "just", "very", "so", "really", "also",
        "here", "there", "from", "new",
        # intent words
        "looking", "interested", "thinking", "planning", "hoping", "ready",
        "want", "wanting", "need", "needing", "trying", "calling", "wondering",
        "going", "getting", "paying", "buying", "selling", "moving", "renting",
        "asking", "checking", "considering", "waiting",
        # states and filler replies
        "excited", "happy", "glad", "curious", "super", "busy", "free", "flexible",
        "available", "done", "open", "based", "located", "still", "sorry", "unsure",
        "what", "why", "how", "when", "where", "who", "which", "else", "whatever",
        "anything", "something", "nothing", "more", "works", "idea", "think",
        "know", "dunno", "let", "tell", "see", "got", "all", "set",
        # project words
        "remodel", "remodeling", "renovate", "project", "home", "house",
        "room", "redo", "update", "upgrade", "budget", "zip", "code",
    }
    | {word for keyword, _ in PROJECT_TYPE_KEYWORDS for word in keyword.split()}
)

EXPLICIT_NAME_PATTERN = re.compile(r"\bmy name is\s+([A-Za-z]+(?:\s+[A-Za-z]+){1,2})", re.IGNORECASE)
# Case-insensitive; the stoplist rejects "I'm looking for..." and similar
INTRODUCTION_NAME_PATTERN = re.compile(
    r"\b(?:I['\u2019]m|I am|this is)\s+([A-Za-z]+(?:\s+[A-Za-z]+){1,2})", re.IGNORECASE
)
BARE_NAME_PATTERN = re.compile(r"^([A-Za-z]+(?:\s+[A-Za-z]+){1,2})[.!]?$")


def _find_email(text: str) -> tuple[str, tuple[int, int]] | None:
    match = EMAIL_PATTERN.search(text)
    if not match:
        return None
    return match.group(0), match.span()


def _find_phone(text: str) -> tuple[str, tuple[int, int]] | None:
    match = PHONE_PATTERN.search(text)
    if not match:
        return None
    return match.group(0), match.span()


def _budget_from_match(match: re.Match) -> int | None:
    amount = match.group("amount").replace(",", "")
    try:
        value = float(amount)
    except ValueError:
        return None
    unit = match.groupdict().get("unit")
    if unit:
        value *= 1000
    budget = int(round(value))
    if budget <= BUDGET_SANITY_FLOOR:
        return None
    return budget


def _find_budget(text: str) -> tuple[int, tuple[int, int]] | None:
    for pattern in BUDGET_PATTERNS:
        for match in pattern.finditer(text):
            budget = _budget_from_match(match)
            if budget is not None:
                return budget, match.span()
    return None


def _timeline_to_months(count: int, unit: str) -> int:
    unit = unit.lower()
    if unit.startswith("week"):
        return math.ceil(count / 4)
    if unit.startswith("year"):
        return count * 12
    return count


def _find_timeline(text: str) -> tuple[int, tuple[int, int]] | None:
    for match in TIMELINE_PATTERN.finditer(text):
        raw_count = match.group("count").lower()
        count = NUMBER_WORDS.get(raw_count)
        if count is None:
            count = int(raw_count)
        if count <= 0:
            continue
        return _timeline_to_months(count, match.group("unit")), match.span()
    return None


def _find_zip(text: str) -> str | None:
    match = ZIP_PATTERN.search(text)
    return match.group(1) if match else None


def _find_project_type(text: str) -> str | None:
    for pattern, canonical in _PROJECT_TYPE_PATTERNS:
        if pattern.search(text):
            return canonical
    return None


def _leading_name_tokens(candidate: str) -> list[str]:
    """Tokens up to (not including) the first stopword: 'Jane Doe and' -> ['Jane', 'Doe']."""
    tokens = []
    for token in candidate.split():
        if token.lower() in NAME_STOPWORDS:
            break
        tokens.append(token)
    return tokens


def _is_plausible_name(tokens: list[str]) -> bool:
    if len(tokens) < 2:
        return False
    if not all(token.isalpha() for token in tokens):
        return False
    if any(token.lower() in NAME_STOPWORDS for token in tokens):
        return False
    return len(" ".join(tokens)) > 3


def _find_name(text: str) -> str | None:
    for pattern in (EXPLICIT_NAME_PATTERN, INTRODUCTION_NAME_PATTERN):
        for match in pattern.finditer(text):
            tokens = _leading_name_tokens(match.group(1))
            if _is_plausible_name(tokens):
                return " ".join(tokens)

    bare = BARE_NAME_PATTERN.match(text)
    if bare:
        tokens = bare.group(1).split()
        if _is_plausible_name(tokens):
            return " ".join(tokens)
    return None


def parse_budget(text: str | None) -> int | None:
    """
    Parse a budget amount from text ("$75k", "$75,000", "75 thousand", "80000 dollars").

    Returns:
        Whole currency units, or None if nothing above the sanity floor was found.
    """
    found = _find_budget(normalize_text(text))
    return found[0] if found else None


def parse_timeline_months(text: str | None) -> int | None:
    """Parse a timeline ("8 weeks", "6 months", "1 year") into whole months."""
    found = _find_timeline(normalize_text(text))
    return found[0] if found else None


def extract(message: str | None) -> dict[str, Any]:
    """
    Extract lead fields found in this message only.

    Args:
        message: Raw chat message

    Returns:
        Partial lead fields - only keys that matched. Empty dict for empty/non-string input.
    """
    text = normalize_text(message)
    if not text:
        return {}

    fields: dict[str, Any] = {}
    remaining = text

    email = _find_email(remaining)
    if email:
        fields[FIELD_EMAIL] = email[0]
        remaining = mask_span(remaining, *email[1])

    phone = _find_phone(remaining)
    if phone:
        fields[FIELD_PHONE] = phone[0]
        remaining = mask_span(remaining, *phone[1])

    budget = _find_budget(remaining)
    if budget:
        fields[FIELD_BUDGET] = budget[0]
        remaining = mask_span(remaining, *budget[1])

    timeline = _find_timeline(remaining)
    if timeline:
        fields[FIELD_TIMELINE_MONTHS] = timeline[0]
        remaining = mask_span(remaining, *timeline[1])

    zip_code = _find_zip(remaining)
    if zip_code:
        fields[FIELD_ZIP_CODE] = zip_code

    # Masked text: "kitchenpros@gmail.com" is not a kitchen project
    project_type = _find_project_type(remaining)
    if project_type:
        fields[FIELD_PROJECT_TYPE] = project_type

    # Name runs on the original text: the bare-line rule needs the whole message
    name = _find_name(text)
    if name:
        fields[FIELD_NAME] = name

    if fields:
        logger.debug(f"Extracted fields from message: {sorted(fields)}")
    return fields
