"""
Notification Sender Protocol — Interface for outbound messaging.

Textileman defines this protocol; messaging backends (WhatsApp via Twilio,
or the noop adapter for development) implement it.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Protocol, Sequence, runtime_checkable


@dataclass(frozen=True)
class Recipient:
    """Destination of a notification."""

    name: str
    number: str
    role: str | None = None


@dataclass(frozen=True)
class DeliveryResult:
    """Outcome of one send call."""

    sent_to_count: int
    failed: tuple[str, ...] = field(default_factory=tuple)  # numbers that failed
    message: str | None = None

    @property
    def delivered(self) -> bool:
        return self.sent_to_count > 0


@runtime_checkable
class NotificationSender(Protocol):
    """
    Protocol for notification delivery.

    Implementations send ``message`` to every recipient and report how many
    received it. A sender may raise ``NotificationDeliveryFailure`` when it
    cannot send at all (e.g. missing credentials).
    """

    def send(self, message: str, recipients: Sequence[Recipient]) -> DeliveryResult:
        """
        Send a message.

        Args:
            message: Text body
            recipients: Destinations

        Returns:
            DeliveryResult with the number of successful deliveries
        """
        ...
