"""
Notification sender loader.

Usage:
    from textileman.adapters import get_notification_sender

    sender = get_notification_sender()
    result = sender.send("Stock low", recipients)

Settings:
    TEXTILEMAN = {
        "NOTIFICATION_SENDER": "textileman.adapters.twilio.TwilioWhatsAppSender",
    }

Defaults to the noop sender. An empty or unimportable path raises
ImproperlyConfigured.
"""

from __future__ import annotations

import logging
import threading

from django.core.exceptions import ImproperlyConfigured
from django.utils.module_loading import import_string

from textileman.conf import textileman_settings
from textileman.protocols.notification import NotificationSender

logger = logging.getLogger(__name__)


# Cached sender instance
_lock = threading.Lock()
_sender: NotificationSender | None = None


def get_notification_sender() -> NotificationSender:
    """
    Return the configured notification sender.

    Raises:
        ImproperlyConfigured: If NOTIFICATION_SENDER is empty or import fails
    """
    global _sender

    if _sender is None:
        with _lock:
            if _sender is None:  # double-checked
                sender_path = textileman_settings.NOTIFICATION_SENDER

                if not sender_path:
                    raise ImproperlyConfigured(
                        "TEXTILEMAN['NOTIFICATION_SENDER'] must be configured. "
                        "Example: 'textileman.adapters.twilio.TwilioWhatsAppSender'"
                    )

                try:
                    sender_class = import_string(sender_path)
                except ImportError as e:
                    raise ImproperlyConfigured(
                        f"Failed to import notification sender '{sender_path}': {e}"
                    ) from e

                _sender = sender_class()
                logger.debug("Loaded notification sender: %s", sender_path)

    return _sender


def reset_notification_sender() -> None:
    """Reset the cached sender. Useful for testing."""
    global _sender
    _sender = None
