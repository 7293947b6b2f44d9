"""
Textileman Protocols.

Defines interfaces for external system integration.
"""

from textileman.protocols.notification import (
    DeliveryResult,
    NotificationSender,
    Recipient,
)

__all__ = [
    "DeliveryResult",
    "NotificationSender",
    "Recipient",
]
