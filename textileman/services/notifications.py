"""
Notification dispatch — gated by the per-category toggles, audited always.

A delivery problem never propagates: the caller's operation has already
succeeded, so failures are logged and recorded as "Not Delivered".
"""

import logging

from textileman.adapters import get_notification_sender
from textileman.models.enums import DeliveryStatus, NotificationCategory
from textileman.models.notification import (
    NotificationMessage,
    NotificationRecipient,
    NotificationSettings,
)
from textileman.protocols.notification import Recipient

logger = logging.getLogger('textileman')


def get_notification_settings() -> NotificationSettings:
    """Current toggles (created with everything off on first access)."""
    return NotificationSettings.load()


def update_notification_settings(**flags) -> NotificationSettings:
    """
    Set toggles by category name.

    Unknown keys are ignored and ``None`` leaves a toggle unchanged.
    """
    settings = NotificationSettings.load()
    changed = []
    for category in NotificationCategory.values:
        value = flags.get(category)
        if value is None:
            continue
        setattr(settings, category, bool(value))
        changed.append(category)

    if changed:
        settings.save()
        logger.info("notification.settings.updated", extra={"categories": changed})
    return settings


def active_recipients() -> list[Recipient]:
    return [
        Recipient(name=r.name, number=r.number, role=r.role)
        for r in NotificationRecipient.objects.filter(is_active=True)
    ]


def notify(category: str, message: str, message_type: str) -> NotificationMessage | None:
    """
    Send ``message`` to every active recipient if ``category`` is enabled.

    Args:
        category: NotificationCategory value gating the send
        message: Text body
        message_type: MessageType value recorded in the audit log

    Returns:
        The audit entry, or None when the category is disabled
    """
    if not NotificationSettings.load().is_enabled(category):
        return None

    recipients = active_recipients()
    sent_to_count = 0
    status = DeliveryStatus.NOT_DELIVERED

    try:
        result = get_notification_sender().send(message, recipients)
        sent_to_count = result.sent_to_count
        if result.delivered:
            status = DeliveryStatus.DELIVERED
    except Exception as e:
        logger.warning(
            "notification.failed",
            extra={"category": category, "error": str(e)},
        )

    entry = NotificationMessage.objects.create(
        message=message,
        type=message_type,
        sent_to_count=sent_to_count,
        status=status,
    )
    logger.info(
        "notification.recorded",
        extra={"category": category, "status": status, "sent_to": sent_to_count},
    )
    return entry
