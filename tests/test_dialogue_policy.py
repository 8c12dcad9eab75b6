"""
Tests for the deterministic dialogue policy (question order, rejections, closing).
"""

import pytest

from lead_qualifier.constants.statuses import (
    STATUS_DISQUALIFIED,
    STATUS_IN_PROGRESS,
    STATUS_QUALIFIED,
)
from lead_qualifier.services.dialogue_policy import (
    format_currency,
    is_company_question,
    next_prompt,
    reply_for_message,
)
from lead_qualifier.services.profiles import CustomerProfile
from lead_qualifier.services.questions import QUALIFICATION_QUESTIONS, get_question, get_total_questions

PROFILE = CustomerProfile(
    customer_id="CUST_1",
    company_name="Elite Remodeling",
    contact_email="owner@example.com",
    service_areas="90210",
    minimum_budget=75000,
    timeline_threshold=12,
)


def test_empty_fields_ask_for_project_type():
    prompt = next_prompt({}, STATUS_IN_PROGRESS, PROFILE)
    assert "Elite Remodeling" in prompt
    assert "What type of project" in prompt


def test_project_type_known_asks_for_zip():
    prompt = next_prompt({"project_type": "kitchen"}, STATUS_IN_PROGRESS, PROFILE)
    assert "zip code" in prompt


def test_budget_question_mentions_minimum():
    fields = {"project_type": "kitchen", "zip_code": "90210"}
    prompt = next_prompt(fields, STATUS_IN_PROGRESS, PROFILE)
    assert "$75,000" in prompt


@pytest.mark.parametrize(
    "fields,expected_key",
    [
        ({"project_type": "kitchen", "zip_code": "90210", "budget": 90000}, "timeline_months"),
        (
            {"project_type": "kitchen", "zip_code": "90210", "budget": 90000, "timeline_months": 6},
            "name",
        ),
        (
            {
                "project_type": "kitchen",
                "zip_code": "90210",
                "budget": 90000,
                "timeline_months": 6,
                "name": "John Smith",
            },
            "email",
        ),
        (
            {
                "project_type": "kitchen",
                "zip_code": "90210",
                "budget": 90000,
                "timeline_months": 6,
                "name": "John Smith",
                "email": "john@example.com",
            },
            "phone",
        ),
    ],
)
def test_asks_first_missing_field(fields, expected_key):
    prompt = next_prompt(fields, STATUS_IN_PROGRESS, PROFILE)
    assert prompt == get_question(expected_key).text


def test_gaps_are_filled_in_order():
    # Contact info volunteered early does not skip the budget question
    fields = {"project_type": "kitchen", "zip_code": "90210", "email": "john@example.com"}
    prompt = next_prompt(fields, STATUS_IN_PROGRESS, PROFILE)
    assert "budget" in prompt


def test_qualified_gets_closing_message():
    fields = {"project_type": "bathroom"}
    prompt = next_prompt(
        {
            **fields,
            "zip_code": "90210",
            "budget": 90000,
            "timeline_months": 6,
            "name": "John Smith",
            "email": "john@example.com",
            "phone": "555-123-4567",
        },
        STATUS_QUALIFIED,
        PROFILE,
    )
    assert "within 24 hours" in prompt
    assert "bathroom project" in prompt


@pytest.mark.parametrize(
    "fields,expected",
    [
        ({"zip_code": "10001"}, "90210 area"),
        ({"budget": 40000}, "$75,000"),
        ({"timeline_months": 24}, "within 12 months"),
    ],
)
def test_rejection_names_failing_criterion(fields, expected):
    prompt = next_prompt(fields, STATUS_DISQUALIFIED, PROFILE)
    assert expected in prompt
    assert "Elite Remodeling" in prompt


def test_company_question_prefix():
    reply = reply_for_message("Which company is this?", {}, STATUS_IN_PROGRESS, PROFILE)
    assert reply.startswith("I work for Elite Remodeling. ")
    assert "What type of project" in reply


def test_company_question_not_prefixed_when_disqualified():
    reply = reply_for_message("what company are you?", {"budget": 40000}, STATUS_DISQUALIFIED, PROFILE)
    assert not reply.startswith("I work for")


def test_is_company_question():
    assert is_company_question("Who do you work for?")
    assert not is_company_question("I need a new kitchen")
    assert not is_company_question(None)


def test_format_currency():
    assert format_currency(75000) == "$75,000"


def test_question_order():
    assert [q.key for q in QUALIFICATION_QUESTIONS] == [
        "project_type",
        "zip_code",
        "budget",
        "timeline_months",
        "name",
        "email",
        "phone",
    ]
    assert get_total_questions() == 7
    assert get_question("unknown") is None
