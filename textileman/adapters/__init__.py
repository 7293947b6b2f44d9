"""
Textileman Adapters.

Implementations of protocols for external systems.
"""

from textileman.adapters.sender import (
    get_notification_sender,
    reset_notification_sender,
)

__all__ = [
    "get_notification_sender",
    "reset_notification_sender",
]
