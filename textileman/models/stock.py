"""
StockLot model — One physical lot of fabric with color variants.
"""

from decimal import Decimal

from django.db import models
from django.db.models import Q
from django.utils.translation import gettext_lazy as _

from textileman.models.enums import QualityGrade, StockStatus, StockType, Unit
from textileman.status import derive_status, total_quantity


ORDERABLE_STATUSES = [StockStatus.AVAILABLE, StockStatus.LOW]


class StockLotQuerySet(models.QuerySet):
    """Helpers for lot lookups."""

    def for_item(self, product: str, color: str):
        """Lots of a product holding a variant of the given color."""
        return self.filter(product=product, variants__color=color).distinct()

    def orderable(self):
        """Lots whose status allows new order deductions."""
        return self.filter(status__in=ORDERABLE_STATUSES)

    def alerting(self):
        """Lots that are running low or are out."""
        return self.filter(status__in=[StockStatus.LOW, StockStatus.OUT])


class StockLot(models.Model):
    """
    A lot of fabric of a given stock type.

    Quantities live on the lot's Variants (one per color). ``status`` is
    derived from their total after every quantity change, see
    ``textileman.status``.

    ``product`` is the product *name*, denormalized for display and used as a
    natural key when order items reference stock without an explicit lot.
    ``details`` holds the type-specific payload (factory/agent/order number
    for gray stock, processing data for factory stock, design/warehouse for
    design stock).
    """

    stock_type = models.CharField(
        max_length=20,
        choices=StockType.choices,
        verbose_name=_('Stock type'),
    )
    status = models.CharField(
        max_length=20,
        choices=StockStatus.choices,
        default=StockStatus.AVAILABLE,
        db_index=True,
        verbose_name=_('Status'),
    )
    product = models.CharField(
        max_length=200,
        db_index=True,
        verbose_name=_('Product'),
    )
    details = models.JSONField(
        default=dict,
        blank=True,
        verbose_name=_('Stock details'),
    )

    # Additional info
    batch_number = models.CharField(max_length=50, verbose_name=_('Batch number'))
    quality_grade = models.CharField(
        max_length=2,
        choices=QualityGrade.choices,
        verbose_name=_('Quality grade'),
    )
    notes = models.TextField(blank=True, default='', verbose_name=_('Notes'))

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = StockLotQuerySet.as_manager()

    class Meta:
        verbose_name = _('Stock lot')
        verbose_name_plural = _('Stock lots')
        ordering = ['id']
        indexes = [
            models.Index(fields=['product', 'status'], name='tm_lot_product_status_idx'),
            models.Index(fields=['stock_type'], name='tm_lot_stock_type_idx'),
        ]

    @property
    def total_quantity(self) -> Decimal:
        return total_quantity(v.quantity for v in self.variants.all())

    def variant_for(self, color: str):
        """Variant of the given color, or None."""
        return self.variants.filter(color=color).first()

    def refresh_status(self, quantities=None) -> str:
        """
        Re-derive ``status`` from variant quantities (not saved).

        Args:
            quantities: Quantities to use instead of reading variants

        Returns:
            The new status
        """
        if quantities is None:
            quantities = self.variants.values_list('quantity', flat=True)
        self.status = derive_status(quantities, self.status)
        return self.status

    def __str__(self) -> str:
        return f"{self.product} [{self.stock_type}] #{self.pk}"


class Variant(models.Model):
    """Color variant of a lot. Color is unique within the lot."""

    lot = models.ForeignKey(
        StockLot,
        on_delete=models.CASCADE,
        related_name='variants',
        verbose_name=_('Lot'),
    )
    color = models.CharField(max_length=50, verbose_name=_('Color'))
    quantity = models.DecimalField(
        max_digits=12,
        decimal_places=3,
        default=Decimal('0'),
        verbose_name=_('Quantity'),
    )
    unit = models.CharField(
        max_length=10,
        choices=Unit.choices,
        default=Unit.METERS,
        verbose_name=_('Unit'),
    )

    class Meta:
        verbose_name = _('Variant')
        verbose_name_plural = _('Variants')
        ordering = ['id']
        constraints = [
            models.UniqueConstraint(
                fields=['lot', 'color'],
                name='unique_variant_color_per_lot',
            ),
            models.CheckConstraint(
                condition=Q(quantity__gte=0),
                name='variant_quantity_non_negative',
            ),
        ]

    def __str__(self) -> str:
        return f"{self.color}: {self.quantity} {self.unit}"
