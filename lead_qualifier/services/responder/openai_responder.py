import json
import logging
from collections.abc import Mapping, Sequence
from typing import Any

import httpx

from lead_qualifier.services.dialogue_policy import format_currency
from lead_qualifier.services.errors import ResponderUnavailable
from lead_qualifier.services.integrations.http_client import create_httpx_client
from lead_qualifier.services.profiles import CustomerProfile
from lead_qualifier.services.responder.base import GenerativeResponder

logger = logging.getLogger(__name__)

OPENAI_CHAT_URL = "https://api.openai.com/v1/chat/completions"


class OpenAIResponder(GenerativeResponder):
    """Replies as "Mason", the remodeling specialist, via OpenAI chat completions."""

    def __init__(
        self,
        api_key: str | None,
        model: str = "gpt-4o-mini",
        temperature: float = 0.7,
        max_tokens: int = 200,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.api_key = api_key
        self.model = model
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.transport = transport

    def build_system_prompt(
        self, fields: Mapping[str, Any], status: str, profile: CustomerProfile
    ) -> str:
        return f"""You are Mason, a friendly remodeling specialist for {profile.company_name}.

COMPANY INFO:
- Company: {profile.company_name}
- Service Areas: {profile.service_areas}
- Minimum Budget: {format_currency(profile.minimum_budget)}
- Timeline: Projects within {profile.timeline_threshold} months

QUALIFICATION SEQUENCE (ask only what's missing):
1. PROJECT TYPE: What remodeling project are they considering?
2. LOCATION: What's their zip code?
3. BUDGET: What's their budget range?
4. TIMELINE: When do they want to complete the project?

CONTACT INFO (only ask after the above):
5. NAME: Full name
6. EMAIL: Best email address
7. PHONE: Phone number

GUIDELINES:
- Be warm and professional
- Ask ONE question at a time
- If they provide multiple pieces of info, acknowledge all of it
- Don't repeat questions if info already provided
- For timeline: anything {profile.timeline_threshold} months or LESS qualifies
- If all information is collected, thank them and say the design team will reach out within 24 hours

CURRENT LEAD STATUS: {status}
CURRENT INFO COLLECTED: {json.dumps(dict(fields))}"""

    def build_messages(
        self,
        message: str,
        fields: Mapping[str, Any],
        status: str,
        profile: CustomerProfile,
        history: Sequence[Mapping[str, str]],
    ) -> list[dict]:
        messages = [{"role": "system", "content": self.build_system_prompt(fields, status, profile)}]
        messages.extend(
            {"role": turn["role"], "content": turn["content"]} for turn in history
        )
        messages.append({"role": "user", "content": message})
        return messages

    async def generate(
        self,
        message: str,
        fields: Mapping[str, Any],
        status: str,
        profile: CustomerProfile,
        history: Sequence[Mapping[str, str]],
    ) -> str:
        if not self.api_key:
            raise ResponderUnavailable("OpenAI API key not configured")

        payload = {
            "model": self.model,
            "messages": self.build_messages(message, fields, status, profile, history),
            "temperature": self.temperature,
            "max_tokens": self.max_tokens,
        }
        logger.debug(f"OpenAI request: model={self.model}, messages_count={len(payload['messages'])}")

        try:
            async with create_httpx_client(self.transport) as client:
                response = await client.post(
                    OPENAI_CHAT_URL,
                    headers={
                        "Authorization": f"Bearer {self.api_key}",
                        "Content-Type": "application/json",
                    },
                    json=payload,
                )
        except httpx.HTTPError as e:
            raise ResponderUnavailable(f"OpenAI request failed: {e}") from e

        if response.status_code != 200:
            logger.error(f"OpenAI error: {response.status_code} - {response.text[:200]}")
            raise ResponderUnavailable(f"OpenAI API error: {response.status_code}")

        try:
            data = response.json()
        except ValueError as e:
            raise ResponderUnavailable("OpenAI returned a non-JSON response") from e

        content = ""
        choices = data.get("choices") or []
        if choices:
            content = (choices[0].get("message") or {}).get("content") or ""
        if not content.strip():
            raise ResponderUnavailable("OpenAI returned an empty reply")
        return content.strip()
