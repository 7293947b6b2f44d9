"""
Product catalog — CRUD, rename propagation and reference checks.

Lots, order items and adjustments store the product *name*. Renaming a
product rewrites those copies in the same transaction.
"""

import logging

from django.db import IntegrityError, transaction

from textileman.exceptions import NotFoundError, ValidationError
from textileman.messages import product_message
from textileman.models.adjustment import Adjustment
from textileman.models.enums import MessageType, NotificationCategory, ProductCategory, Unit
from textileman.models.order import OrderItem
from textileman.models.product import Product
from textileman.models.stock import StockLot
from textileman.services.notifications import notify

logger = logging.getLogger('textileman')

EDITABLE_FIELDS = ('name', 'sku', 'category', 'unit', 'description')


def _check_choices(data) -> None:
    if data.get('category') is not None and data['category'] not in ProductCategory.values:
        raise ValidationError('INVALID_FIELD', message=f"Invalid category: {data['category']}", field='category')
    if data.get('unit') is not None and data['unit'] not in Unit.values:
        raise ValidationError('INVALID_FIELD', message=f"Invalid unit: {data['unit']}", field='unit')


def propagate_product_rename(old_name: str, new_name: str) -> dict[str, int]:
    """
    Rewrite the product name on lots, order items and adjustments.

    Adjustments are immutable records; a queryset update bypasses their
    ``save()`` guard and touches only the denormalized name.

    Returns:
        Rows updated per table
    """
    counts = {
        'stocks': StockLot.objects.filter(product=old_name).update(product=new_name),
        'order_items': OrderItem.objects.filter(product=old_name).update(product=new_name),
        'adjustments': Adjustment.objects.filter(product=old_name).update(product=new_name),
    }
    logger.info(
        "product.renamed",
        extra={"old": old_name, "new": new_name, **counts},
    )
    return counts


def find_orphan_references() -> dict[str, list]:
    """
    Lots and order items whose product name matches no catalog product.

    Returns:
        {'stocks': [(lot_id, product), ...], 'order_items': [(item_id, product), ...]}
    """
    names = Product.objects.values_list('name', flat=True)
    return {
        'stocks': list(
            StockLot.objects.exclude(product__in=names).order_by('pk').values_list('pk', 'product')
        ),
        'order_items': list(
            OrderItem.objects.exclude(product__in=names).order_by('pk').values_list('pk', 'product')
        ),
    }


class ProductService:

    @classmethod
    def create(cls, **data) -> Product:
        """
        Raises:
            ValidationError: MISSING_FIELDS, INVALID_FIELD, DUPLICATE_NAME
        """
        missing = [f for f in ('name', 'category') if not data.get(f)]
        if missing:
            raise ValidationError('MISSING_FIELDS', fields=missing)
        _check_choices(data)

        try:
            with transaction.atomic():
                product = Product.objects.create(**{
                    f: data[f] for f in EDITABLE_FIELDS if data.get(f) is not None
                })
        except IntegrityError:
            raise ValidationError(
                'DUPLICATE_NAME',
                message=f"Product {data['name']} or its SKU already exists",
                fields=['name', 'sku'],
            ) from None

        logger.info("product.created", extra={"product": product.name, "sku": product.sku})
        notify(NotificationCategory.PRODUCT_UPDATES, product_message(product, 'created'), MessageType.PRODUCT_UPDATE)
        return product

    @classmethod
    def update(cls, product, **data) -> Product:
        """Edit a product; a new name is propagated to every stored copy."""
        _check_choices(data)

        try:
            with transaction.atomic():
                product = Product.objects.select_for_update().get(pk=product.pk)
                old_name = product.name
                for field in EDITABLE_FIELDS:
                    if data.get(field) not in (None, ''):
                        setattr(product, field, data[field])
                product.save()
                if product.name != old_name:
                    propagate_product_rename(old_name, product.name)
        except IntegrityError:
            raise ValidationError(
                'DUPLICATE_NAME',
                message=f"Product {data.get('name')} or its SKU already exists",
                fields=['name', 'sku'],
            ) from None

        logger.info("product.updated", extra={"product": product.name})
        notify(NotificationCategory.PRODUCT_UPDATES, product_message(product, 'updated'), MessageType.PRODUCT_UPDATE)
        return product

    @classmethod
    def delete(cls, product) -> None:
        message = product_message(product, 'deleted')
        name = product.name
        product.delete()
        logger.info("product.deleted", extra={"product": name})
        notify(NotificationCategory.PRODUCT_UPDATES, message, MessageType.PRODUCT_UPDATE)

    @classmethod
    def get(cls, pk) -> Product:
        try:
            return Product.objects.get(pk=pk)
        except (Product.DoesNotExist, ValueError, TypeError):
            raise NotFoundError('PRODUCT_NOT_FOUND', product_id=pk) from None

    @classmethod
    def list(cls, category=None):
        qs = Product.objects.order_by('-created_at', '-id')
        if category:
            qs = qs.filter(category=category)
        return qs
