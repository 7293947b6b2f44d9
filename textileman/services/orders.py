"""
Order workflow — credit check, stock deduction and restoration.

    create  pending     credit check only
    create  confirmed   credit check + strict deduction
    update  pending   -> confirmed   strict deduction of the stored items
    update  confirmed -> pending     lenient restoration
    delete  confirmed               lenient restoration

Every operation runs in one transaction. The customer row and each touched
lot are locked, all items are validated before any lot is written, and
notifications go out after the transaction.
"""

import logging
from decimal import Decimal, InvalidOperation

from django.db import transaction

from textileman.exceptions import NotFoundError, ValidationError
from textileman.messages import order_message
from textileman.models.customer import Customer
from textileman.models.enums import MessageType, NotificationCategory, OrderStatus, Unit
from textileman.models.order import Order, OrderItem
from textileman.models.stock import StockLot
from textileman.services.credit import check_credit, order_value
from textileman.services.notifications import notify
from textileman.services.resolution import (
    LenientResolution,
    LineItem,
    LotCache,
    StrictResolution,
)

logger = logging.getLogger('textileman')

EDITABLE_FIELDS = ('customer', 'order_date', 'delivery_date', 'notes')


def _to_decimal(value) -> Decimal:
    if value is None or isinstance(value, bool):
        raise ValidationError('INVALID_ITEM')
    try:
        return Decimal(str(value))
    except (InvalidOperation, TypeError, ValueError):
        raise ValidationError('INVALID_ITEM') from None


def clean_items(items) -> list[dict]:
    """
    Validate raw order items and normalize them to OrderItem field values.

    Each item needs ``product``, ``color`` and a positive numeric
    ``quantity``. ``price_per_meter`` defaults to 0. ``stock`` may be a lot,
    a lot pk or omitted.

    Raises:
        ValidationError: MISSING_FIELDS, INVALID_ITEM or INVALID_QUANTITY
    """
    if not items:
        raise ValidationError('MISSING_FIELDS', fields=['items'])

    cleaned = []
    for raw in items:
        product = raw.get('product')
        color = raw.get('color')
        if not product or not color:
            raise ValidationError('INVALID_ITEM')

        quantity = _to_decimal(raw.get('quantity'))
        if quantity <= 0:
            raise ValidationError('INVALID_QUANTITY', requested=quantity)

        price = _to_decimal(raw.get('price_per_meter', 0) or 0)
        if price < 0:
            raise ValidationError('INVALID_ITEM', message="Price per meter cannot be negative")

        stock = raw.get('stock', raw.get('stock_id'))
        stock_id = stock.pk if isinstance(stock, StockLot) else stock
        if stock_id and not StockLot.objects.filter(pk=stock_id).exists():
            raise ValidationError('INVALID_ITEM', message=f"Unknown stock reference {stock_id}")

        cleaned.append({
            'product': product,
            'color': color,
            'quantity': quantity,
            'unit': raw.get('unit') or Unit.METERS,
            'price_per_meter': price,
            'stock_id': stock_id or None,
        })
    return cleaned


def _items_total(cleaned: list[dict]) -> Decimal:
    return sum((i['quantity'] * i['price_per_meter'] for i in cleaned), Decimal('0'))


def _lock_customer(name: str) -> Customer:
    try:
        return Customer.objects.select_for_update().get(customer_name=name)
    except Customer.DoesNotExist:
        raise NotFoundError('CUSTOMER_NOT_FOUND', customer=name) from None


def deduct(lines: list[LineItem]) -> list[StockLot]:
    """
    Deduct every line from its lot (strict). Validates all lines first.

    Must run inside a transaction.
    """
    cache = LotCache()
    for line in lines:
        lot, variant = StrictResolution.resolve(line, cache)
        cache.change(lot, variant, -line.quantity)
    return cache.flush()


def restore(lines: list[LineItem]) -> list[StockLot]:
    """
    Put every line's quantity back (lenient). Unresolvable lines are skipped.

    Must run inside a transaction.
    """
    cache = LotCache()
    for line in lines:
        resolved = LenientResolution.resolve(line, cache)
        if resolved is None:
            continue
        lot, variant = resolved
        cache.change(lot, variant, line.quantity)
    return cache.flush()


def _lines(order: Order) -> list[LineItem]:
    return [LineItem.from_order_item(item) for item in order.items.all()]


class OrderWorkflow:
    """Order lifecycle."""

    @classmethod
    def create(cls, customer, order_date, delivery_date, items,
               status=None, notes=""):
        """
        Create an order.

        Returns:
            Order

        Raises:
            ValidationError: Missing fields, bad items or unknown status
            NotFoundError('CUSTOMER_NOT_FOUND')
            BusinessRuleViolation: CREDIT_LIMIT_EXCEEDED, STOCK_NOT_FOUND,
                COLOR_NOT_FOUND or INSUFFICIENT_STOCK
        """
        status = status or OrderStatus.PENDING
        if status not in OrderStatus.values:
            raise ValidationError('INVALID_STATUS', status=status)

        missing = [
            name for name, value in (
                ('customer', customer),
                ('order_date', order_date),
                ('delivery_date', delivery_date),
            ) if not value
        ]
        if missing or not items:
            raise ValidationError('MISSING_FIELDS', fields=missing + ([] if items else ['items']))

        cleaned = clean_items(items)
        total = _items_total(cleaned)

        with transaction.atomic():
            customer_obj = _lock_customer(customer)
            check_credit(customer_obj, total)

            if status == OrderStatus.CONFIRMED:
                deduct([LineItem(i['product'], i['color'], i['quantity'], i['stock_id']) for i in cleaned])

            order = Order.objects.create(
                customer=customer,
                status=status,
                order_date=order_date,
                delivery_date=delivery_date,
                notes=notes or '',
            )
            OrderItem.objects.bulk_create([OrderItem(order=order, **i) for i in cleaned])

        logger.info(
            "order.created",
            extra={
                "order_id": order.pk,
                "customer": customer,
                "status": status,
                "total": str(total),
            },
        )
        notify(NotificationCategory.ORDER_UPDATES, order_message(order, 'created'), MessageType.ORDER_UPDATE)
        return order

    @classmethod
    def update(cls, order, **patch):
        """
        Update an order; a status change deducts or restores stock.

        Items given in ``patch`` replace the stored ones only while the order
        is pending before and after the update. The stock movement of a
        status change always uses the stored items.

        Returns:
            Updated Order

        Raises:
            ValidationError('INVALID_STATUS')
            NotFoundError: ORDER_NOT_FOUND or CUSTOMER_NOT_FOUND
            BusinessRuleViolation: on pending -> confirmed, as in create()
        """
        new_status = patch.pop('status', None)
        if new_status is not None and new_status not in OrderStatus.values:
            raise ValidationError('INVALID_STATUS', status=new_status)
        new_items = patch.pop('items', None)

        with transaction.atomic():
            try:
                order = Order.objects.select_for_update().get(pk=order.pk)
            except Order.DoesNotExist:
                raise NotFoundError('ORDER_NOT_FOUND', order_id=order.pk) from None

            current = order.status
            target = new_status or current

            if current == OrderStatus.PENDING and target == OrderStatus.CONFIRMED:
                deduct(_lines(order))
            elif current == OrderStatus.CONFIRMED and target == OrderStatus.PENDING:
                restore(_lines(order))

            customer = patch.get('customer') or order.customer
            cleaned = None
            if new_items is not None:
                if current == OrderStatus.PENDING and target == OrderStatus.PENDING:
                    cleaned = clean_items(new_items)
                else:
                    logger.warning("order.items.locked", extra={"order_id": order.pk, "status": current})

            if cleaned is not None or customer != order.customer:
                customer_obj = _lock_customer(customer)
                new_total = _items_total(cleaned) if cleaned is not None else order.total
                existing = order_value(customer)
                if customer == order.customer:
                    existing -= order.total
                check_credit(customer_obj, new_total, existing_total=existing)

            for field in EDITABLE_FIELDS:
                if field in patch and patch[field] is not None:
                    setattr(order, field, patch[field])
            order.status = target
            order.save()

            if cleaned is not None:
                order.items.all().delete()
                OrderItem.objects.bulk_create([OrderItem(order=order, **i) for i in cleaned])

        logger.info(
            "order.updated",
            extra={"order_id": order.pk, "from_status": current, "to_status": target},
        )
        notify(NotificationCategory.ORDER_UPDATES, order_message(order, 'updated'), MessageType.ORDER_UPDATE)
        return order

    @classmethod
    def delete(cls, order) -> None:
        """
        Delete an order, restoring stock if it was confirmed.

        Raises:
            NotFoundError('ORDER_NOT_FOUND')
        """
        with transaction.atomic():
            try:
                order = Order.objects.select_for_update().get(pk=order.pk)
            except Order.DoesNotExist:
                raise NotFoundError('ORDER_NOT_FOUND', order_id=order.pk) from None

            message = order_message(order, 'deleted')
            lines = _lines(order)
            was_confirmed = order.is_confirmed
            order_id = order.pk
            order.delete()

            if was_confirmed:
                restore(lines)

        logger.info("order.deleted", extra={"order_id": order_id, "restored": was_confirmed})
        notify(NotificationCategory.ORDER_UPDATES, message, MessageType.ORDER_UPDATE)

    @classmethod
    def get(cls, order_id) -> Order:
        try:
            return Order.objects.prefetch_related('items').get(pk=order_id)
        except (Order.DoesNotExist, ValueError, TypeError):
            raise NotFoundError('ORDER_NOT_FOUND', order_id=order_id) from None

    @classmethod
    def list(cls, customer=None):
        """Orders newest first, optionally for one customer."""
        qs = Order.objects.prefetch_related('items').order_by('-created_at', '-id')
        if customer:
            qs = qs.for_customer(customer)
        return qs
