"""Transactional email through the Resend HTTP API."""

import html
import logging
from collections.abc import Sequence
from typing import Protocol

import httpx

from src.config import Settings, get_settings

logger = logging.getLogger(__name__)

CELL_STYLE = "padding:8px;border:1px solid #ddd"
HEADER_STYLE = f"text-align:left;{CELL_STYLE}"
TABLE_STYLE = "border-collapse:collapse;width:100%;font-family:Arial,sans-serif;font-size:14px"


class EmailSendError(Exception):
    """Raised when the email provider rejects or cannot receive a message."""


class EmailSender(Protocol):
    """Anything that can deliver one HTML email to a list of addresses."""

    def send(self, to: Sequence[str], subject: str, html_body: str) -> None: ...


class ResendEmailSender:
    """Send email through Resend. One call is one all-or-nothing API request."""

    def __init__(
        self,
        api_key: str,
        from_email: str,
        api_url: str = "https://api.resend.com/emails",
        timeout: float = 30.0,
    ) -> None:
        self.api_key = api_key
        self.from_email = from_email
        self.api_url = api_url
        self.timeout = timeout

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> "ResendEmailSender":
        """Build a sender from application settings."""
        settings = settings or get_settings()
        return cls(
            api_key=settings.resend_api_key or "",
            from_email=settings.alert_from_email or "",
            api_url=settings.resend_api_url,
        )

    def send(self, to: Sequence[str], subject: str, html_body: str) -> None:
        """Send one message.

        Raises:
            EmailSendError: on a non-2xx response or a transport failure
        """
        try:
            with httpx.Client(timeout=self.timeout) as client:
                response = client.post(
                    self.api_url,
                    headers={"Authorization": f"Bearer {self.api_key}"},
                    json={
                        "from": self.from_email,
                        "to": list(to),
                        "subject": subject,
                        "html": html_body,
                    },
                )
        except httpx.HTTPError as e:
            raise EmailSendError(f"Resend request failed: {e}") from e

        if not response.is_success:
            raise EmailSendError(f"Resend error {response.status_code}: {response.text}")

        logger.info(f"Email '{subject}' sent to {len(to)} recipient(s)")


def _cell(value: object) -> str:
    text = "-" if value is None or value == "" else str(value)
    return f'<td style="{CELL_STYLE}">{html.escape(text)}</td>'


def build_items_table(items: Sequence) -> str:
    """Render low-stock items as an inline-styled HTML table.

    Items need ``name``, ``category``, ``quantity``, ``minimum_quantity`` and
    ``location_name`` attributes.
    """
    headers = "".join(
        f'<th style="{HEADER_STYLE}">{label}</th>'
        for label in ("Item", "Category", "Qty", "Min", "Location")
    )
    rows = "\n".join(
        "<tr>"
        + _cell(item.name)
        + _cell(item.category)
        + _cell(item.quantity)
        + _cell(item.minimum_quantity)
        + _cell(item.location_name)
        + "</tr>"
        for item in items
    )
    return (
        f'<table style="{TABLE_STYLE}">'
        f"<thead><tr>{headers}</tr></thead>"
        f"<tbody>{rows}</tbody>"
        "</table>"
    )


def build_threshold_email(items: Sequence, organization_name: str) -> tuple[str, str]:
    """Build subject and body for the newly-low alert."""
    subject = f"Threshold: Inventory low-stock alert (new) - {organization_name}"
    body = (
        '<p style="font-family:Arial,sans-serif">'
        "New inventory items are now below minimum quantity:</p>" + build_items_table(items)
    )
    return subject, body


def build_daily_digest_email(items: Sequence, organization_name: str) -> tuple[str, str]:
    """Build subject and body for the daily digest."""
    subject = f"Daily inventory low-stock digest - {organization_name}"
    body = (
        '<p style="font-family:Arial,sans-serif">Daily low-stock inventory digest.</p>'
        + build_items_table(items)
    )
    return subject, body
