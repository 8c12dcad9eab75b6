"""
Tests for lead status transitions and the qualified-notification edge trigger.
"""

import logging

from lead_qualifier.constants.statuses import (
    STATUS_DISQUALIFIED,
    STATUS_IN_PROGRESS,
    STATUS_QUALIFIED,
)
from lead_qualifier.services.state_machine import (
    get_allowed_transitions,
    get_state_semantics,
    is_terminal_state,
    is_transition_allowed,
    record_transition,
    should_fire_qualified_notification,
)


def test_is_transition_allowed_valid():
    """Test valid transitions."""
    assert is_transition_allowed(STATUS_IN_PROGRESS, STATUS_QUALIFIED) is True
    assert is_transition_allowed(STATUS_IN_PROGRESS, STATUS_DISQUALIFIED) is True
    assert is_transition_allowed(STATUS_QUALIFIED, STATUS_DISQUALIFIED) is True


def test_self_loops_allowed():
    for status in (STATUS_IN_PROGRESS, STATUS_QUALIFIED, STATUS_DISQUALIFIED):
        assert is_transition_allowed(status, status) is True


def test_is_transition_allowed_invalid():
    """Test invalid transitions."""
    assert is_transition_allowed(STATUS_DISQUALIFIED, STATUS_QUALIFIED) is False  # Terminal state
    assert is_transition_allowed(STATUS_DISQUALIFIED, STATUS_IN_PROGRESS) is False
    assert is_transition_allowed(STATUS_QUALIFIED, STATUS_IN_PROGRESS) is False


def test_get_allowed_transitions():
    assert set(get_allowed_transitions(STATUS_IN_PROGRESS)) == {STATUS_QUALIFIED, STATUS_DISQUALIFIED}
    assert get_allowed_transitions(STATUS_DISQUALIFIED) == []
    assert get_allowed_transitions("unknown") == []


def test_terminal_state():
    assert is_terminal_state(STATUS_DISQUALIFIED)
    assert not is_terminal_state(STATUS_IN_PROGRESS)
    assert not is_terminal_state(STATUS_QUALIFIED)


def test_record_transition_logs_unexpected(caplog):
    with caplog.at_level(logging.WARNING):
        assert record_transition("conv_1", STATUS_DISQUALIFIED, STATUS_QUALIFIED) is False
    assert "Unexpected status transition" in caplog.text


def test_record_transition_valid(caplog):
    with caplog.at_level(logging.INFO):
        assert record_transition("conv_1", STATUS_IN_PROGRESS, STATUS_QUALIFIED) is True
    assert "in_progress -> qualified" in caplog.text


def test_notification_fires_only_on_first_qualified():
    assert should_fire_qualified_notification(STATUS_QUALIFIED, already_notified=False) is True
    assert should_fire_qualified_notification(STATUS_QUALIFIED, already_notified=True) is False
    assert should_fire_qualified_notification(STATUS_IN_PROGRESS, already_notified=False) is False
    assert should_fire_qualified_notification(STATUS_DISQUALIFIED, already_notified=False) is False


def test_state_semantics():
    assert get_state_semantics(STATUS_QUALIFIED) is not None
    assert get_state_semantics("unknown") is None
