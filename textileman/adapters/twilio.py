"""
Twilio WhatsApp Adapter — Sends notifications through the Twilio REST API.

Usage in settings.py:
    TEXTILEMAN = {
        "NOTIFICATION_SENDER": "textileman.adapters.twilio.TwilioWhatsAppSender",
        "TWILIO_ACCOUNT_SID": "AC...",
        "TWILIO_AUTH_TOKEN": "...",
        "TWILIO_FROM_NUMBER": "whatsapp:+14155238886",
    }

One message is posted per recipient. A failure for one recipient is logged
and does not stop the others.
"""

from __future__ import annotations

import logging
from typing import Sequence

import requests

from textileman.conf import textileman_settings
from textileman.exceptions import NotificationDeliveryFailure
from textileman.protocols.notification import DeliveryResult, Recipient

logger = logging.getLogger(__name__)

API_URL = "https://api.twilio.com/2010-04-01/Accounts/{sid}/Messages.json"


def whatsapp_address(number: str) -> str:
    """Normalize a phone number to Twilio's ``whatsapp:+<digits>`` form."""
    number = number.strip()
    if number.startswith("whatsapp:"):
        return number
    if not number.startswith("+"):
        number = f"+{number}"
    return f"whatsapp:{number}"


class TwilioWhatsAppSender:
    """WhatsApp delivery via Twilio. Implements ``NotificationSender``."""

    def __init__(self, session: requests.Session | None = None):
        self.session = session or requests.Session()

    def send(self, message: str, recipients: Sequence[Recipient]) -> DeliveryResult:
        sid = textileman_settings.TWILIO_ACCOUNT_SID
        token = textileman_settings.TWILIO_AUTH_TOKEN
        if not sid or not token:
            raise NotificationDeliveryFailure("NOT_CONFIGURED")

        url = API_URL.format(sid=sid)
        sent = 0
        failed = []

        for recipient in recipients:
            try:
                response = self.session.post(
                    url,
                    data={
                        "From": whatsapp_address(textileman_settings.TWILIO_FROM_NUMBER),
                        "To": whatsapp_address(recipient.number),
                        "Body": message,
                    },
                    auth=(sid, token),
                    timeout=textileman_settings.TWILIO_TIMEOUT,
                )
                response.raise_for_status()
                sent += 1
            except requests.exceptions.RequestException as e:
                failed.append(recipient.number)
                logger.warning(
                    "notification.recipient_failed",
                    extra={"recipient": recipient.name, "error": str(e)},
                )

        if recipients and not sent:
            raise NotificationDeliveryFailure(
                "SEND_FAILED",
                failed=len(failed),
            )

        return DeliveryResult(sent_to_count=sent, failed=tuple(failed))
