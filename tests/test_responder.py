"""
Tests for the OpenAI-backed generative responder.
"""

import json

import httpx
import pytest

from lead_qualifier.services.errors import ResponderUnavailable
from lead_qualifier.services.responder import OpenAIResponder
from lead_qualifier.services.responder.openai_responder import OPENAI_CHAT_URL
from tests.helpers.fakes import REFERENCE_PROFILE

HISTORY = [
    {"role": "user", "content": "I need a kitchen remodel"},
    {"role": "assistant", "content": "Great! What's your zip code?"},
]


def completion(content):
    return httpx.Response(200, json={"choices": [{"message": {"role": "assistant", "content": content}}]})


def make_responder(handler, api_key="sk-test"):
    return OpenAIResponder(api_key=api_key, transport=httpx.MockTransport(handler))


@pytest.mark.asyncio
async def test_generate_returns_reply_and_sends_history():
    captured = {}

    def handler(request):
        captured["url"] = str(request.url)
        captured["auth"] = request.headers["Authorization"]
        captured["body"] = json.loads(request.content)
        return completion("  Perfect, 90210 is in our area!  ")

    responder = make_responder(handler)
    reply = await responder.generate("90210", {"zip_code": "90210"}, "in_progress", REFERENCE_PROFILE, HISTORY)

    assert reply == "Perfect, 90210 is in our area!"
    assert captured["url"] == OPENAI_CHAT_URL
    assert captured["auth"] == "Bearer sk-test"
    messages = captured["body"]["messages"]
    assert messages[0]["role"] == "system"
    assert "Elite Remodeling" in messages[0]["content"]
    assert "$75,000" in messages[0]["content"]
    assert messages[1:3] == HISTORY
    assert messages[-1] == {"role": "user", "content": "90210"}
    assert captured["body"]["model"] == "gpt-4o-mini"


@pytest.mark.asyncio
async def test_missing_api_key_raises():
    responder = make_responder(lambda request: completion("hi"), api_key=None)
    with pytest.raises(ResponderUnavailable):
        await responder.generate("hi", {}, "in_progress", REFERENCE_PROFILE, [])


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "response",
    [
        httpx.Response(500, text="upstream error"),
        httpx.Response(429, json={"error": "rate limited"}),
        httpx.Response(200, text="not json"),
        httpx.Response(200, json={"choices": []}),
        httpx.Response(200, json={"choices": [{"message": {"content": "   "}}]}),
    ],
)
async def test_bad_responses_raise_unavailable(response):
    responder = make_responder(lambda request: response)
    with pytest.raises(ResponderUnavailable):
        await responder.generate("hi", {}, "in_progress", REFERENCE_PROFILE, [])


@pytest.mark.asyncio
async def test_transport_error_raises_unavailable():
    def handler(request):
        raise httpx.ReadTimeout("timed out", request=request)

    with pytest.raises(ResponderUnavailable):
        await make_responder(handler).generate("hi", {}, "in_progress", REFERENCE_PROFILE, [])


def test_get_responder_disabled_by_default():
    from lead_qualifier.services.responder import get_responder

    assert get_responder() is None


def test_get_responder_when_enabled(monkeypatch):
    from lead_qualifier.core.config import settings
    from lead_qualifier.services.responder import get_responder

    monkeypatch.setattr(settings, "ai_responder_enabled", True)
    monkeypatch.setattr(settings, "openai_api_key", "sk-test")
    responder = get_responder()
    assert isinstance(responder, OpenAIResponder)
    assert responder.model == settings.openai_model
