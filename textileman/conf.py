"""
Textileman configuration.

Usage in settings.py:
    TEXTILEMAN = {
        "LOW_STOCK_THRESHOLD": 100,
        "STICKY_STATUSES": ("processing",),
        "NOTIFICATION_SENDER": "textileman.adapters.twilio.TwilioWhatsAppSender",
        "CLIENT_URL": "https://erp.example.com",
        "TWILIO_ACCOUNT_SID": "...",
        "TWILIO_AUTH_TOKEN": "...",
    }
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Any

from django.conf import settings


@dataclass
class TextilemanSettings:
    """Textileman configuration settings."""

    # Total lot quantity under which a lot is "low"
    LOW_STOCK_THRESHOLD: Decimal = Decimal('100')

    # Statuses the automatic recompute leaves alone (except when total hits 0)
    STICKY_STATUSES: tuple[str, ...] = ('processing',)

    # Notification backend (dotted path)
    NOTIFICATION_SENDER: str = 'textileman.adapters.noop.NoopSender'

    # Dashboard base URL used in message links
    CLIENT_URL: str = ''

    # Twilio adapter
    TWILIO_ACCOUNT_SID: str = ''
    TWILIO_AUTH_TOKEN: str = ''
    TWILIO_FROM_NUMBER: str = 'whatsapp:+14155238886'
    TWILIO_TIMEOUT: int = 10

    # API pagination
    DEFAULT_PAGE_SIZE: int = 10
    MAX_PAGE_SIZE: int = 100

    def __post_init__(self):
        # a single status may be given as a bare string
        if isinstance(self.STICKY_STATUSES, str):
            self.STICKY_STATUSES = (self.STICKY_STATUSES,)
        else:
            self.STICKY_STATUSES = tuple(self.STICKY_STATUSES)


def get_textileman_settings() -> TextilemanSettings:
    """Load settings from Django settings."""
    user_settings: dict[str, Any] = getattr(settings, "TEXTILEMAN", {})
    return TextilemanSettings(**{
        k: v for k, v in user_settings.items()
        if k in TextilemanSettings.__dataclass_fields__
    })


class _LazySettings:
    """Lazy proxy that re-reads settings on every attribute access."""

    def __getattr__(self, name):
        return getattr(get_textileman_settings(), name)


textileman_settings = _LazySettings()
