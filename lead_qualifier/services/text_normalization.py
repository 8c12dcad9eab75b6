"""
Text normalization for parsing - strip, collapse spaces, normalize unicode.

Use before field extraction to handle chat-widget copy/paste: non-breaking
spaces, zero-width chars, fullwidth digits.
"""

import re
import unicodedata

# Common unicode replacements
NBSP = "\u00A0"
ZWSP = "\u200B"
ZWNBSP = "\uFEFF"
NARROW_NBSP = "\u202F"


def normalize_text(text: str | None) -> str:
    """
    Normalize user input for parsing: strip, collapse spaces, fix common unicode.

    Args:
        text: Raw user message (or None)

    Returns:
        Normalized string (empty string if input is None/empty)
    """
    if text is None:
        return ""
    if not isinstance(text, str):
        return ""
    s = text.strip()
    s = s.replace(NBSP, " ").replace(NARROW_NBSP, " ")
    s = s.replace(ZWSP, "")
    s = s.replace(ZWNBSP, "")
    # NFKC folds fullwidth digits/letters to ASCII so the patterns see them
    s = unicodedata.normalize("NFKC", s)
    s = re.sub(r"\s+", " ", s)
    return s.strip()


def mask_span(text: str, start: int, end: int) -> str:
    """
    Blank out text[start:end] with spaces, keeping offsets stable.

    Used by the extraction pipeline so digits consumed by one field
    (phone, budget) are not re-read by a later one (zip).
    """
    return text[:start] + " " * (end - start) + text[end:]
