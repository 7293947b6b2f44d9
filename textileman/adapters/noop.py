"""
Noop Notification Sender — Stub adapter for development and testing.

Every recipient is considered reached; nothing leaves the process.

Usage in settings.py:
    TEXTILEMAN = {
        "NOTIFICATION_SENDER": "textileman.adapters.noop.NoopSender",
    }

WARNING: Do NOT use in production. Messages are only logged.
"""

from __future__ import annotations

import logging
from typing import Sequence

from textileman.protocols.notification import DeliveryResult, Recipient

logger = logging.getLogger(__name__)


class NoopSender:
    """No-operation sender. Implements ``NotificationSender``."""

    def send(self, message: str, recipients: Sequence[Recipient]) -> DeliveryResult:
        logger.info(
            "notification.noop",
            extra={"recipients": len(recipients), "length": len(message)},
        )
        return DeliveryResult(sent_to_count=len(recipients))
