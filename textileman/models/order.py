"""
Order model — Customer order with fabric line items.
"""

from decimal import Decimal

from django.db import models
from django.db.models import DecimalField, F, Sum
from django.db.models.functions import Coalesce
from django.utils.translation import gettext_lazy as _

from textileman.models.enums import OrderStatus, Unit


def line_value():
    """quantity x price of an order item, as a database expression."""
    return F('quantity') * F('price_per_meter')


class OrderQuerySet(models.QuerySet):

    def for_customer(self, customer_name: str):
        return self.filter(customer=customer_name)

    def confirmed(self):
        return self.filter(status=OrderStatus.CONFIRMED)

    def items_total(self) -> Decimal:
        """Sum of quantity x price over every item of the orders in this queryset."""
        return OrderItem.objects.filter(order__in=self).aggregate(
            t=Coalesce(Sum(line_value()), Decimal('0'), output_field=DecimalField())
        )['t']


class Order(models.Model):
    """
    A customer order.

    ``customer`` is the customer *name*; orders are linked to customers by
    name, and renames are propagated by the customer service.

    Status semantics:
        pending:   no stock effect, counts against credit
        confirmed: stock deducted for every item
    """

    customer = models.CharField(max_length=200, db_index=True, verbose_name=_('Customer'))
    status = models.CharField(
        max_length=20,
        choices=OrderStatus.choices,
        default=OrderStatus.PENDING,
        db_index=True,
        verbose_name=_('Status'),
    )
    order_date = models.DateField(verbose_name=_('Order date'))
    delivery_date = models.DateField(verbose_name=_('Delivery date'))
    notes = models.TextField(blank=True, default='', verbose_name=_('Notes'))

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = OrderQuerySet.as_manager()

    class Meta:
        verbose_name = _('Order')
        verbose_name_plural = _('Orders')
        ordering = ['-created_at', '-id']

    @property
    def is_confirmed(self) -> bool:
        return self.status == OrderStatus.CONFIRMED

    @property
    def total(self) -> Decimal:
        return sum((item.line_total for item in self.items.all()), Decimal('0'))

    def __str__(self) -> str:
        return f"Order #{self.pk} ({self.customer}, {self.status})"


class OrderItem(models.Model):
    """
    One line of an order.

    ``stock`` optionally pins the lot to deduct from; when null, the lot is
    resolved by product and color. It becomes null if the lot is deleted.
    """

    order = models.ForeignKey(
        Order,
        on_delete=models.CASCADE,
        related_name='items',
        verbose_name=_('Order'),
    )
    product = models.CharField(max_length=200, db_index=True, verbose_name=_('Product'))
    color = models.CharField(max_length=50, verbose_name=_('Color'))
    quantity = models.DecimalField(
        max_digits=12,
        decimal_places=3,
        verbose_name=_('Quantity'),
    )
    unit = models.CharField(
        max_length=10,
        choices=Unit.choices,
        default=Unit.METERS,
        verbose_name=_('Unit'),
    )
    price_per_meter = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        default=Decimal('0'),
        verbose_name=_('Price per meter'),
    )
    stock = models.ForeignKey(
        'textileman.StockLot',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='order_items',
        verbose_name=_('Stock lot'),
    )

    class Meta:
        verbose_name = _('Order item')
        verbose_name_plural = _('Order items')
        ordering = ['id']

    @property
    def line_total(self) -> Decimal:
        return Decimal(self.quantity) * Decimal(self.price_per_meter)

    def __str__(self) -> str:
        return f"{self.product} / {self.color} x {self.quantity}"
