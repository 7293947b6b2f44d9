"""
Product model — Catalog entry referenced by name from lots and order items.
"""

from django.db import models
from django.utils.crypto import get_random_string
from django.utils.translation import gettext_lazy as _

from textileman.models.enums import ProductCategory, Unit


SKU_CHARS = 'ABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789'


def generate_sku() -> str:
    return f"SKU-{get_random_string(6, SKU_CHARS)}"


class Product(models.Model):
    """
    A fabric product.

    ``name`` is the natural key lots, order items and adjustments store.
    Renames go through ``ProductService.update`` so those copies follow.
    """

    name = models.CharField(max_length=200, unique=True, verbose_name=_('Name'))
    sku = models.CharField(max_length=20, unique=True, blank=True, verbose_name=_('SKU'))
    category = models.CharField(
        max_length=30,
        choices=ProductCategory.choices,
        verbose_name=_('Category'),
    )
    unit = models.CharField(
        max_length=10,
        choices=Unit.choices,
        default=Unit.METERS,
        verbose_name=_('Unit'),
    )
    description = models.TextField(blank=True, default='', verbose_name=_('Description'))

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _('Product')
        verbose_name_plural = _('Products')
        ordering = ['-created_at', '-id']

    def save(self, *args, **kwargs):
        if not self.sku:
            self.sku = generate_sku()
        super().save(*args, **kwargs)

    def __str__(self) -> str:
        return f"{self.name} ({self.sku})"
