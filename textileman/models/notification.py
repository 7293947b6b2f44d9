"""
Notification models — toggles, recipients and the delivery audit log.
"""

from django.db import models
from django.utils import timezone
from django.utils.translation import gettext_lazy as _

from textileman.models.enums import DeliveryStatus, MessageType, NotificationCategory, RecipientRole


class NotificationSettings(models.Model):
    """
    Singleton holding one on/off toggle per notification category.

    Every toggle starts off. Use ``NotificationSettings.load()``; never
    instantiate directly.
    """

    order_updates = models.BooleanField(default=False, verbose_name=_('Order updates'))
    stock_alerts = models.BooleanField(default=False, verbose_name=_('Stock alerts'))
    low_stock_warnings = models.BooleanField(default=False, verbose_name=_('Low stock warnings'))
    new_customers = models.BooleanField(default=False, verbose_name=_('New customers'))
    return_requests = models.BooleanField(default=False, verbose_name=_('Return requests'))
    product_updates = models.BooleanField(default=False, verbose_name=_('Product updates'))

    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _('Notification settings')
        verbose_name_plural = _('Notification settings')

    @classmethod
    def load(cls) -> 'NotificationSettings':
        obj, _created = cls.objects.get_or_create(pk=1)
        return obj

    def is_enabled(self, category: str) -> bool:
        if category not in NotificationCategory.values:
            return False
        return bool(getattr(self, category))

    def as_dict(self) -> dict[str, bool]:
        return {category: getattr(self, category) for category in NotificationCategory.values}

    def __str__(self) -> str:
        enabled = [c for c, on in self.as_dict().items() if on]
        return f"Notifications: {', '.join(enabled) or 'all off'}"


class NotificationRecipient(models.Model):
    """A phone number that receives WhatsApp notifications."""

    name = models.CharField(max_length=100, verbose_name=_('Name'))
    number = models.CharField(max_length=30, verbose_name=_('Number'))
    role = models.CharField(
        max_length=20,
        choices=RecipientRole.choices,
        default=RecipientRole.MANAGER,
        verbose_name=_('Role'),
    )
    is_active = models.BooleanField(default=True, verbose_name=_('Active'))

    class Meta:
        verbose_name = _('Notification recipient')
        verbose_name_plural = _('Notification recipients')
        ordering = ['name', 'id']

    def __str__(self) -> str:
        return f"{self.name} <{self.number}>"


class NotificationMessage(models.Model):
    """Audit entry for every dispatch attempt on an enabled category."""

    message = models.TextField(verbose_name=_('Message'))
    type = models.CharField(max_length=30, choices=MessageType.choices, verbose_name=_('Type'))
    sent_to_count = models.PositiveIntegerField(default=0, verbose_name=_('Sent to'))
    status = models.CharField(
        max_length=20,
        choices=DeliveryStatus.choices,
        verbose_name=_('Status'),
    )
    created_at = models.DateTimeField(default=timezone.now, db_index=True, verbose_name=_('Created at'))

    class Meta:
        verbose_name = _('Notification message')
        verbose_name_plural = _('Notification messages')
        ordering = ['-created_at', '-id']

    def __str__(self) -> str:
        return f"[{self.status}] {self.type} -> {self.sent_to_count}"
