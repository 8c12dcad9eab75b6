"""
Qualified-lead notification - emails the customer when a lead qualifies.

Sent through the SendGrid v3 HTTP API, with a dry-run mode for development.
Delivery failures are logged and reported as False; they never raise into a
conversation turn.
"""

import html
import logging
from abc import ABC, abstractmethod
from collections.abc import Mapping
from typing import Any

import httpx

from lead_qualifier.constants.lead_fields import (
    FIELD_BUDGET,
    FIELD_EMAIL,
    FIELD_NAME,
    FIELD_PHONE,
    FIELD_PROJECT_TYPE,
    FIELD_TIMELINE_MONTHS,
    FIELD_ZIP_CODE,
)
from lead_qualifier.services.integrations.http_client import create_httpx_client
from lead_qualifier.services.profiles import CustomerProfile

logger = logging.getLogger(__name__)

SENDGRID_SEND_URL = "https://api.sendgrid.com/v3/mail/send"


class NotificationSink(ABC):
    @abstractmethod
    async def notify_qualified(
        self,
        profile: CustomerProfile,
        fields: Mapping[str, Any],
        conversation_id: str,
    ) -> bool:
        """Deliver the qualified-lead notification. Returns False on failure, never raises."""


def _lead_detail_rows(fields: Mapping[str, Any]) -> list[tuple[str, str]]:
    budget = fields.get(FIELD_BUDGET)
    timeline = fields.get(FIELD_TIMELINE_MONTHS)
    return [
        ("Name", str(fields.get(FIELD_NAME) or "Not provided")),
        ("Email", str(fields.get(FIELD_EMAIL) or "Not provided")),
        ("Phone", str(fields.get(FIELD_PHONE) or "Not provided")),
        ("Project Type", str(fields.get(FIELD_PROJECT_TYPE) or "Not specified")),
        ("Budget", f"${int(budget):,}" if budget else "Not specified"),
        ("Timeline", f"{timeline} months" if timeline else "Not specified"),
        ("ZIP Code", str(fields.get(FIELD_ZIP_CODE) or "Not specified")),
    ]


def format_qualified_lead_subject(fields: Mapping[str, Any]) -> str:
    return f"New Qualified Lead - {fields.get(FIELD_NAME) or 'Unknown'}"


def format_qualified_lead_text(
    fields: Mapping[str, Any], conversation_id: str, dashboard_url: str
) -> str:
    """Plain-text body of the qualified-lead email."""
    lines = ["New Qualified Lead!", ""]
    lines.extend(f"{label}: {value}" for label, value in _lead_detail_rows(fields))
    lines.extend(["", f"Conversation: {conversation_id}", f"View in Dashboard: {dashboard_url}"])
    return "\n".join(lines)


def format_qualified_lead_html(
    fields: Mapping[str, Any], conversation_id: str, dashboard_url: str
) -> str:
    """HTML body of the qualified-lead email. Lead values are escaped (they are user input)."""
    rows = "".join(
        f'<p style="margin: 10px 0;"><strong>{label}:</strong> {html.escape(value)}</p>'
        for label, value in _lead_detail_rows(fields)
    )
    return (
        '<div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">'
        '<div style="background: #667eea; padding: 30px; text-align: center;">'
        '<h1 style="color: white; margin: 0;">New Qualified Lead!</h1>'
        "</div>"
        '<div style="padding: 30px; background: #f7f8fa;">'
        '<h2 style="color: #333; margin-top: 0;">Lead Details</h2>'
        f'<div style="background: white; padding: 20px; border-radius: 8px;">{rows}</div>'
        f'<p style="color: #888;">Conversation: {html.escape(conversation_id)}</p>'
        f'<p style="text-align: center;"><a href="{html.escape(dashboard_url)}">View in Dashboard</a></p>'
        "</div>"
        "</div>"
    )


class EmailNotificationSink(NotificationSink):
    """Sends the qualified-lead email to the customer's contact address via SendGrid."""

    def __init__(
        self,
        api_key: str | None,
        from_email: str,
        dashboard_url: str,
        dry_run: bool = True,
        enabled: bool = True,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.api_key = api_key
        self.from_email = from_email
        self.dashboard_url = dashboard_url
        self.dry_run = dry_run
        self.enabled = enabled
        self.transport = transport

    def build_payload(
        self, to_email: str, fields: Mapping[str, Any], conversation_id: str
    ) -> dict:
        return {
            "personalizations": [{"to": [{"email": to_email}]}],
            "from": {"email": self.from_email},
            "subject": format_qualified_lead_subject(fields),
            "content": [
                {
                    "type": "text/plain",
                    "value": format_qualified_lead_text(fields, conversation_id, self.dashboard_url),
                },
                {
                    "type": "text/html",
                    "value": format_qualified_lead_html(fields, conversation_id, self.dashboard_url),
                },
            ],
        }

    async def notify_qualified(
        self,
        profile: CustomerProfile,
        fields: Mapping[str, Any],
        conversation_id: str,
    ) -> bool:
        if not self.enabled:
            logger.debug(
                f"Notifications feature disabled - skipping qualified notification for {conversation_id}"
            )
            return False

        if not profile.contact_email:
            logger.warning(
                f"Customer {profile.customer_id} has no contact email - "
                f"cannot notify qualified lead {conversation_id}"
            )
            return False

        payload = self.build_payload(profile.contact_email, fields, conversation_id)

        if self.dry_run or not self.api_key:
            logger.info(
                f"[DRY-RUN] Would send qualified lead email to {profile.contact_email}: "
                f"{payload['subject']}"
            )
            return True

        try:
            async with create_httpx_client(self.transport) as client:
                response = await client.post(
                    SENDGRID_SEND_URL,
                    headers={
                        "Authorization": f"Bearer {self.api_key}",
                        "Content-Type": "application/json",
                    },
                    json=payload,
                )
                response.raise_for_status()
        except httpx.HTTPError as e:
            logger.error(
                f"Failed to send qualified lead email for {conversation_id} "
                f"to {profile.contact_email}: {e}"
            )
            return False

        logger.info(f"Sent qualified lead email for {conversation_id} to {profile.contact_email}")
        return True


def get_notifier() -> NotificationSink:
    """Notification sink configured from settings."""
    from lead_qualifier.core.config import settings

    return EmailNotificationSink(
        api_key=settings.sendgrid_api_key,
        from_email=settings.notification_from_email,
        dashboard_url=settings.dashboard_url,
        dry_run=settings.notifications_dry_run,
        enabled=settings.feature_notifications_enabled,
    )
