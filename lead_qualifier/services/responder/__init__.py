"""Generative responders. Re-exports for stable public API."""

from lead_qualifier.services.responder.base import GenerativeResponder
from lead_qualifier.services.responder.openai_responder import OpenAIResponder


def get_responder() -> GenerativeResponder | None:
    """Responder configured from settings, or None when disabled/unconfigured."""
    from lead_qualifier.core.config import settings

    if not settings.ai_responder_enabled or not settings.openai_api_key:
        return None
    return OpenAIResponder(
        api_key=settings.openai_api_key,
        model=settings.openai_model,
        temperature=settings.openai_temperature,
        max_tokens=settings.openai_max_tokens,
    )


__all__ = [
    "GenerativeResponder",
    "OpenAIResponder",
    "get_responder",
]
