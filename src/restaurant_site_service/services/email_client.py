"""Client for the transactional email HTTP API.

Sends are fire-and-forget: nothing is retried and failures are reported in
the result rather than raised, so a failed email never fails the request
that triggered it.
"""

import logging
from typing import NamedTuple

import httpx

from restaurant_site_service.observability.metrics import record_email_delivery

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 10.0


class EmailSendResult(NamedTuple):
    """Result of sending an email through the provider."""

    success: bool
    provider_message_id: str | None = None
    error_message: str | None = None


class EmailClient:
    """Sends HTML email through a Resend-compatible ``POST /emails`` API."""

    def __init__(
        self,
        api_key: str | None,
        sender: str,
        base_url: str = "https://api.resend.com",
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
    ) -> None:
        """Initialize the email client.

        Args:
            api_key: Provider API key; without one every send is skipped
            sender: From header (e.g., "Reservation System <bookings@example.com>")
            base_url: Provider API base URL
            timeout_seconds: Request timeout
        """
        self.api_key = api_key
        self.sender = sender
        self.base_url = base_url.rstrip("/")
        self.timeout_seconds = timeout_seconds

    @property
    def enabled(self) -> bool:
        """Whether an API key is configured."""
        return bool(self.api_key)

    async def send(self, to: str, subject: str, html: str, template: str = "custom") -> EmailSendResult:
        """Send one email.

        Args:
            to: Recipient address
            subject: Subject line
            html: HTML body
            template: Template name, used for metrics only

        Returns:
            EmailSendResult describing the outcome
        """
        if not self.enabled:
            logger.warning(f"Email API key not configured, skipping '{template}' email")
            record_email_delivery(template, sent=False)
            return EmailSendResult(success=False, error_message="Email delivery is not configured")

        try:
            async with httpx.AsyncClient(timeout=self.timeout_seconds) as client:
                response = await client.post(
                    f"{self.base_url}/emails",
                    headers={"Authorization": f"Bearer {self.api_key}"},
                    json={"from": self.sender, "to": [to], "subject": subject, "html": html},
                )

            if response.status_code not in (200, 201, 202):
                logger.error(f"Email provider rejected '{template}' email: {response.status_code}")
                record_email_delivery(template, sent=False)
                return EmailSendResult(
                    success=False, error_message=f"Provider returned {response.status_code}"
                )

            message_id = response.json().get("id")
            logger.info(f"Sent '{template}' email", extra={"provider_message_id": message_id})
            record_email_delivery(template, sent=True)
            return EmailSendResult(success=True, provider_message_id=message_id)

        except (httpx.HTTPError, ValueError) as e:
            logger.error(f"Failed to send '{template}' email: {e}")
            record_email_delivery(template, sent=False)
            return EmailSendResult(success=False, error_message=str(e))
