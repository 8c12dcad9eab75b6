"""
Tests for POST /conversations/{customer_id}/message.
"""

from unittest.mock import AsyncMock, patch

from lead_qualifier.api.dependencies import get_notification_sink
from lead_qualifier.db.models import Conversation, ConversationTurn, SystemEvent
from lead_qualifier.main import app
from lead_qualifier.services.dialogue_policy import FALLBACK_GREETING
from tests.helpers.fakes import QUALIFYING_CONTACT, QUALIFYING_DETAILS, RecordingNotifier


def post_message(client, customer_id, message, conversation_id=None):
    body = {"message": message}
    if conversation_id:
        body["conversation_id"] = conversation_id
    return client.post(f"/conversations/{customer_id}/message", json=body)


def test_first_message_generates_conversation_id(client, db, customer):
    response = post_message(client, customer.customer_id, "Looking to remodel our kitchen")

    assert response.status_code == 200
    data = response.json()
    assert data["conversation_id"].startswith("conv_")
    assert data["lead_status"] == "in_progress"
    assert data["persisted"] is True
    assert "zip code" in data["response"]

    conversation = db.query(Conversation).filter_by(conversation_id=data["conversation_id"]).one()
    assert conversation.customer_id == customer.customer_id
    assert conversation.lead_fields == {"project_type": "kitchen"}
    assert db.query(ConversationTurn).count() == 2


def test_full_conversation_qualifies_and_notifies_once(client, db, customer):
    notifier = RecordingNotifier()
    app.dependency_overrides[get_notification_sink] = lambda: notifier

    first = post_message(client, customer.customer_id, QUALIFYING_DETAILS, "conv_web_1")
    assert first.json()["lead_status"] == "in_progress"

    second = post_message(client, customer.customer_id, QUALIFYING_CONTACT, "conv_web_1")
    assert second.json()["lead_status"] == "qualified"
    assert "within 24 hours" in second.json()["response"]

    third = post_message(client, customer.customer_id, "Great, thank you", "conv_web_1")
    assert third.json()["lead_status"] == "qualified"

    assert len(notifier.calls) == 1
    profile = notifier.calls[0][0]
    assert profile.contact_email == "owner@testremodeling.com"

    conversation = db.query(Conversation).filter_by(conversation_id="conv_web_1").one()
    assert conversation.lead_status == "qualified"
    assert conversation.qualified_notified_at is not None
    assert conversation.lead_fields["email"] == "john@example.com"
    assert db.query(ConversationTurn).count() == 6

    event_types = {e.event_type for e in db.query(SystemEvent).all()}
    assert "lead.qualified" in event_types
    assert "notification.qualified_sent" in event_types


def test_disqualified_out_of_area(client, customer):
    response = post_message(client, customer.customer_id, "Bathroom remodel, zip 10001", "conv_web_2")

    data = response.json()
    assert data["lead_status"] == "disqualified"
    assert "90210" in data["response"]


def test_unknown_customer_uses_default_profile(client, db):
    response = post_message(client, "CUSTOMER_DOES_NOT_EXIST", "hello")

    assert response.status_code == 200
    assert "Elite Remodeling" in response.json()["response"]


def test_unexpected_error_returns_fallback_greeting(client, customer):
    with patch(
        "lead_qualifier.services.conversation.orchestrator.ConversationOrchestrator.handle_message",
        new=AsyncMock(side_effect=RuntimeError("boom")),
    ):
        response = post_message(client, customer.customer_id, "hello", "conv_web_3")

    assert response.status_code == 200
    data = response.json()
    assert data["response"] == FALLBACK_GREETING
    assert data["conversation_id"] == "conv_web_3"
    assert data["persisted"] is False


def test_empty_message_rejected(client, customer):
    response = client.post(f"/conversations/{customer.customer_id}/message", json={"message": ""})
    assert response.status_code == 422
