"""
Qualification evaluator - decides in_progress / qualified / disqualified.

Disqualification is checked first and wins: any known fact outside the
customer's area, budget or timeline disqualifies regardless of what else is
known. Qualification needs every criterion met plus name, email and phone.
"""

from collections.abc import Mapping
from dataclasses import dataclass
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
from lead_qualifier.constants.statuses import (
    STATUS_DISQUALIFIED,
    STATUS_IN_PROGRESS,
    STATUS_QUALIFIED,
)
from lead_qualifier.services.metadata_merge import is_empty_value
from lead_qualifier.services.profiles import CustomerProfile

# Disqualification reasons, in the order they are checked
REASON_AREA = "area"
REASON_BUDGET = "budget"
REASON_TIMELINE = "timeline"


@dataclass(frozen=True)
class QualificationResult:
    status: str
    has_project_type: bool
    has_location: bool
    has_valid_location: bool
    has_budget: bool
    meets_min_budget: bool
    has_timeline: bool
    meets_timeline: bool
    has_name: bool
    has_email: bool
    has_phone: bool
    disqualification_reason: str | None = None

    @property
    def has_all_contact_info(self) -> bool:
        return self.has_name and self.has_email and self.has_phone


def _as_int(value: Any) -> int | None:
    """Stored fields may come back from JSON as strings; compare numerically."""
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def is_in_service_area(zip_code: Any, profile: CustomerProfile) -> bool:
    """Plain prefix test against the first listed service area."""
    return str(zip_code).startswith(profile.primary_service_area)


def assess(fields: Mapping[str, Any], profile: CustomerProfile) -> QualificationResult:
    """
    Evaluate every qualification criterion and derive the lead status.

    Args:
        fields: Merged lead fields
        profile: Customer thresholds

    Returns:
        QualificationResult with per-criterion flags, status and the first
        failing disqualification reason (area, then budget, then timeline)
    """

    def has(key: str) -> bool:
        return not is_empty_value(fields.get(key))

    budget = _as_int(fields.get(FIELD_BUDGET))
    timeline = _as_int(fields.get(FIELD_TIMELINE_MONTHS))

    has_location = has(FIELD_ZIP_CODE)
    has_valid_location = has_location and is_in_service_area(fields[FIELD_ZIP_CODE], profile)
    has_budget = budget is not None
    meets_min_budget = has_budget and budget >= profile.minimum_budget
    has_timeline = timeline is not None
    meets_timeline = has_timeline and timeline <= profile.timeline_threshold

    reason = None
    if has_location and not has_valid_location:
        reason = REASON_AREA
    elif has_budget and not meets_min_budget:
        reason = REASON_BUDGET
    elif has_timeline and not meets_timeline:
        reason = REASON_TIMELINE

    has_name = has(FIELD_NAME)
    has_email = has(FIELD_EMAIL)
    has_phone = has(FIELD_PHONE)

    if reason is not None:
        status = STATUS_DISQUALIFIED
    elif (
        has(FIELD_PROJECT_TYPE)
        and has_valid_location
        and meets_min_budget
        and meets_timeline
        and has_name
        and has_email
        and has_phone
    ):
        status = STATUS_QUALIFIED
    else:
        status = STATUS_IN_PROGRESS

    return QualificationResult(
        status=status,
        has_project_type=has(FIELD_PROJECT_TYPE),
        has_location=has_location,
        has_valid_location=has_valid_location,
        has_budget=has_budget,
        meets_min_budget=meets_min_budget,
        has_timeline=has_timeline,
        meets_timeline=meets_timeline,
        has_name=has_name,
        has_email=has_email,
        has_phone=has_phone,
        disqualification_reason=reason,
    )


def evaluate(fields: Mapping[str, Any], profile: CustomerProfile) -> str:
    """Lead status for the given fields under the customer's thresholds."""
    return assess(fields, profile).status


def disqualification_reason(fields: Mapping[str, Any], profile: CustomerProfile) -> str | None:
    """The first failing criterion (area, budget, timeline), or None."""
    return assess(fields, profile).disqualification_reason
