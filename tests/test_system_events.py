"""
Tests for system events service.
"""

from lead_qualifier.db.models import SystemEvent
from lead_qualifier.services.system_event_service import error, info, log_event, warn


def test_system_event_info(db):
    """Test logging INFO-level system event."""
    event = info(
        db=db,
        event_type="test.info_event",
        conversation_id="conv_1",
        payload={"test_key": "test_value"},
    )

    assert event.id is not None
    assert event.level == "INFO"
    assert event.event_type == "test.info_event"
    assert event.conversation_id == "conv_1"
    assert event.payload == {"test_key": "test_value"}
    assert event.created_at is not None
    assert db.get(SystemEvent, event.id) is not None


def test_system_event_warn_and_error_levels(db):
    assert warn(db, "test.warn").level == "WARN"
    assert error(db, "test.error").level == "ERROR"


def test_level_is_uppercased(db):
    assert log_event(db, "info", "test.lower").level == "INFO"


def test_exception_details_in_payload(db):
    try:
        raise ValueError("bad budget")
    except ValueError as e:
        event = error(db, "test.exception", payload={"step": "extract"}, exc=e)

    assert event.payload["step"] == "extract"
    assert event.payload["error"] == {"type": "ValueError", "message": "bad budget"}


def test_empty_payload_stored_as_null(db):
    assert info(db, "test.no_payload").payload is None


def test_payload_is_copied(db):
    payload = {"k": "v"}
    info(db, "test.copy", payload=payload, correlation_id="cid-1")
    assert payload == {"k": "v"}
