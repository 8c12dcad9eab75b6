"""
Lead field names - the closed key set of the merged-knowledge record.
"""

FIELD_EMAIL = "email"
FIELD_PHONE = "phone"
FIELD_BUDGET = "budget"
FIELD_TIMELINE_MONTHS = "timeline_months"
FIELD_ZIP_CODE = "zip_code"
FIELD_NAME = "name"
FIELD_PROJECT_TYPE = "project_type"

LEAD_FIELD_NAMES = (
    FIELD_EMAIL,
    FIELD_PHONE,
    FIELD_BUDGET,
    FIELD_TIMELINE_MONTHS,
    FIELD_ZIP_CODE,
    FIELD_NAME,
    FIELD_PROJECT_TYPE,
)
