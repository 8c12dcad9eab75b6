"""
Tests for startup validation of production settings.
"""

import pytest

from lead_qualifier.core.config import settings
from lead_qualifier.main import startup_event, validate_production_settings


@pytest.fixture
def production(monkeypatch):
    monkeypatch.setattr(settings, "app_env", "production")
    monkeypatch.setattr(settings, "admin_api_key", "strong-key")
    monkeypatch.setattr(settings, "notifications_dry_run", False)
    monkeypatch.setattr(settings, "sendgrid_api_key", "SG.live")
    monkeypatch.setattr(settings, "ai_responder_enabled", False)


def test_valid_production_settings(production):
    assert validate_production_settings() == []


def test_missing_admin_key(production, monkeypatch):
    monkeypatch.setattr(settings, "admin_api_key", None)
    errors = validate_production_settings()
    assert len(errors) == 1
    assert "ADMIN_API_KEY" in errors[0]


def test_live_sending_requires_sendgrid_key(production, monkeypatch):
    monkeypatch.setattr(settings, "sendgrid_api_key", None)
    assert any("SENDGRID_API_KEY" in e for e in validate_production_settings())


def test_responder_requires_openai_key(production, monkeypatch):
    monkeypatch.setattr(settings, "ai_responder_enabled", True)
    monkeypatch.setattr(settings, "openai_api_key", None)
    assert any("OPENAI_API_KEY" in e for e in validate_production_settings())


@pytest.mark.asyncio
async def test_startup_refuses_unsafe_production(production, monkeypatch):
    monkeypatch.setattr(settings, "admin_api_key", None)
    with pytest.raises(RuntimeError, match="Production environment validation failed"):
        await startup_event()


def test_admin_auth_refuses_production_without_key(client, monkeypatch):
    monkeypatch.setattr(settings, "app_env", "production")
    monkeypatch.setattr(settings, "admin_api_key", None)
    with pytest.raises(RuntimeError, match="ADMIN_API_KEY"):
        client.get("/dashboard/leads")
