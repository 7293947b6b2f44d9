"""
Adjustment model — Immutable record of manual stock corrections.
"""

from django.db import models
from django.utils import timezone
from django.utils.translation import gettext_lazy as _

from textileman.models.enums import StockType


class Adjustment(models.Model):
    """
    Immutable record of a manual quantity increase on one variant.

    Rules:
    - NEVER update() or delete()
    - prev_quantity is the exact value read under lock before the change
    - new_quantity is always greater than prev_quantity

    Created only by ``StockLedger.adjust``.
    """

    stock = models.ForeignKey(
        'textileman.StockLot',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='adjustments',
        verbose_name=_('Stock lot'),
    )
    product = models.CharField(max_length=200, db_index=True, verbose_name=_('Product'))
    stock_type = models.CharField(
        max_length=20,
        choices=StockType.choices,
        verbose_name=_('Stock type'),
    )
    color = models.CharField(max_length=50, verbose_name=_('Color'))
    prev_quantity = models.DecimalField(
        max_digits=12,
        decimal_places=3,
        verbose_name=_('Previous quantity'),
    )
    new_quantity = models.DecimalField(
        max_digits=12,
        decimal_places=3,
        verbose_name=_('New quantity'),
    )
    reason = models.CharField(max_length=255, verbose_name=_('Reason'))

    created_at = models.DateTimeField(default=timezone.now, db_index=True, verbose_name=_('Created at'))

    class Meta:
        verbose_name = _('Adjustment')
        verbose_name_plural = _('Adjustments')
        ordering = ['-created_at', '-id']

    @property
    def delta(self):
        return self.new_quantity - self.prev_quantity

    def save(self, *args, **kwargs):
        if self.pk:
            raise ValueError("Adjustments are immutable. Record a new adjustment instead.")
        if not self.reason:
            raise ValueError("Reason is required")
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        """Prevent deletion; adjustments are immutable."""
        raise ValueError("Adjustments are immutable and cannot be deleted.")

    def __str__(self) -> str:
        return f"{self.product}/{self.color}: {self.prev_quantity} -> {self.new_quantity} | {self.reason}"
