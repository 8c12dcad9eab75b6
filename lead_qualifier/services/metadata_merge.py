"""
Metadata merge - first-write-wins combination of known and newly extracted fields.

A field's first non-empty value is permanent for the conversation: later
extractions only fill gaps, they never overwrite.
"""

from collections.abc import Mapping
from typing import Any

from lead_qualifier.constants.lead_fields import LEAD_FIELD_NAMES


def is_empty_value(value: Any) -> bool:
    """True for values that count as 'not yet known' (None or blank string)."""
    if value is None:
        return True
    if isinstance(value, str) and not value.strip():
        return True
    return False


def merge(existing: Mapping[str, Any] | None, incoming: Mapping[str, Any] | None) -> dict[str, Any]:
    """
    Merge newly extracted fields into the known fields without clobbering.

    For each field in incoming, the value is taken only if the field is empty
    in existing. Keys outside the lead field set are dropped. Neither input
    is mutated.

    Args:
        existing: Fields already known for the conversation
        incoming: Fields extracted from the latest message

    Returns:
        New merged fields dict
    """
    merged: dict[str, Any] = {
        key: value
        for key, value in (existing or {}).items()
        if key in LEAD_FIELD_NAMES and not is_empty_value(value)
    }
    for key, value in (incoming or {}).items():
        if key not in LEAD_FIELD_NAMES or is_empty_value(value):
            continue
        if key not in merged:
            merged[key] = value
    return merged


def newly_learned(existing: Mapping[str, Any] | None, merged: Mapping[str, Any]) -> list[str]:
    """Field names present in merged that were empty in existing, in field order."""
    existing = existing or {}
    return [
        key
        for key in LEAD_FIELD_NAMES
        if not is_empty_value(merged.get(key)) and is_empty_value(existing.get(key))
    ]
