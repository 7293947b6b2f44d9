"""
Customer model.
"""

from decimal import Decimal

from django.db import models
from django.utils.translation import gettext_lazy as _

from textileman.models.enums import CustomerType


class Customer(models.Model):
    """
    A buyer with a credit limit.

    Remaining credit is never stored: it is recomputed from the customer's
    orders on every read (see ``textileman.services.credit``).
    """

    customer_name = models.CharField(max_length=200, unique=True, verbose_name=_('Name'))
    customer_type = models.CharField(
        max_length=20,
        choices=CustomerType.choices,
        verbose_name=_('Customer type'),
    )
    email = models.EmailField(verbose_name=_('Email'))
    phone = models.CharField(max_length=30, verbose_name=_('Phone'))
    city = models.CharField(max_length=100, verbose_name=_('City'))
    address = models.TextField(verbose_name=_('Address'))
    credit_limit = models.DecimalField(
        max_digits=14,
        decimal_places=2,
        default=Decimal('0'),
        verbose_name=_('Credit limit'),
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _('Customer')
        verbose_name_plural = _('Customers')
        ordering = ['-created_at', '-id']

    def __str__(self) -> str:
        return self.customer_name
