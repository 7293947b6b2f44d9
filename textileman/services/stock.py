"""
Stock ledger — lot lifecycle and manual adjustments.

All methods use transaction.atomic() with appropriate locking.
"""

import datetime
import logging
from decimal import Decimal, InvalidOperation

from django.db import transaction
from django.utils.dateparse import parse_date

from textileman.exceptions import BusinessRuleViolation, NotFoundError, ValidationError
from textileman.messages import stock_message
from textileman.models.adjustment import Adjustment
from textileman.models.enums import (
    Design,
    MessageType,
    NotificationCategory,
    ProcessingStage,
    QualityGrade,
    StockStatus,
    StockType,
    Unit,
    Warehouse,
)
from textileman.models.stock import StockLot, Variant
from textileman.services.notifications import notify
from textileman.status import derive_status

logger = logging.getLogger('textileman')

REQUIRED_DETAILS = {
    StockType.GRAY: ('factory', 'agent', 'order_number'),
    StockType.FACTORY: ('processing_factory', 'processing_stage', 'expected_completion'),
    StockType.DESIGN: ('design', 'warehouse'),
}

DETAIL_CHOICES = {
    'processing_stage': ProcessingStage.values,
    'design': Design.values,
    'warehouse': Warehouse.values,
}

EDITABLE_FIELDS = ('product', 'batch_number', 'quality_grade', 'notes')


def _decimal(value, code='INVALID_QUANTITY') -> Decimal:
    if value is None or isinstance(value, bool):
        raise ValidationError(code)
    try:
        return Decimal(str(value))
    except (InvalidOperation, TypeError, ValueError):
        raise ValidationError(code) from None


def clean_details(stock_type: str, details) -> dict:
    """
    Check the type-specific payload and normalize it.

    Raises:
        ValidationError('INVALID_STOCK_DETAILS')
    """
    if stock_type not in REQUIRED_DETAILS:
        raise ValidationError('INVALID_STOCK_DETAILS', stock_type=stock_type)
    details = dict(details or {})

    missing = [key for key in REQUIRED_DETAILS[stock_type] if not details.get(key)]
    if missing:
        raise ValidationError(
            'INVALID_STOCK_DETAILS',
            message=f"Missing {stock_type} details: {', '.join(missing)}",
            fields=missing,
        )

    for key, allowed in DETAIL_CHOICES.items():
        if key in details and details[key] not in allowed:
            raise ValidationError(
                'INVALID_STOCK_DETAILS',
                message=f"Invalid {key}: {details[key]}",
                field=key,
            )

    if 'expected_completion' in details:
        value = details['expected_completion']
        if isinstance(value, datetime.date):
            parsed = value
        else:
            try:
                parsed = parse_date(str(value))
            except ValueError:
                parsed = None
        if parsed is None:
            raise ValidationError(
                'INVALID_STOCK_DETAILS',
                message="expected_completion must be an ISO date",
                field='expected_completion',
            )
        details['expected_completion'] = parsed.isoformat()

    return details


def clean_variants(variants) -> list[dict]:
    """
    Raises:
        ValidationError: MISSING_FIELDS, INVALID_QUANTITY or DUPLICATE_COLOR
    """
    if not variants:
        raise ValidationError('MISSING_FIELDS', fields=['variants'])

    cleaned = []
    seen = set()
    for raw in variants:
        color = raw.get('color')
        if not color:
            raise ValidationError('MISSING_FIELDS', fields=['color'])
        if color in seen:
            raise ValidationError('DUPLICATE_COLOR', color=color)
        seen.add(color)

        quantity = _decimal(raw.get('quantity'))
        if quantity < 0:
            raise ValidationError('INVALID_QUANTITY', color=color, requested=quantity)

        unit = raw.get('unit') or Unit.METERS
        if unit not in Unit.values:
            raise ValidationError('INVALID_STOCK_DETAILS', message=f"Invalid unit: {unit}", field='unit')

        cleaned.append({'color': color, 'quantity': quantity, 'unit': unit})
    return cleaned


def _check_status(status) -> None:
    if status not in StockStatus.values:
        raise ValidationError('INVALID_STATUS', status=status)


def _check_grade(grade) -> None:
    if grade not in QualityGrade.values:
        raise ValidationError('INVALID_STOCK_DETAILS', message=f"Invalid quality grade: {grade}", field='quality_grade')


class StockLedger:
    """Stock lot operations."""

    @classmethod
    def create(cls, stock_type, variants, product, details, batch_number,
               quality_grade, notes="", status=None) -> StockLot:
        """
        Create a lot with its variants.

        Status is derived from the variant total; an explicit sticky status
        is kept while stock remains.

        Raises:
            ValidationError
        """
        missing = [
            name for name, value in (
                ('stock_type', stock_type),
                ('product', product),
                ('batch_number', batch_number),
                ('quality_grade', quality_grade),
            ) if not value
        ]
        if missing:
            raise ValidationError('MISSING_FIELDS', fields=missing)

        details = clean_details(stock_type, details)
        cleaned = clean_variants(variants)
        _check_grade(quality_grade)
        if status is not None:
            _check_status(status)

        initial = status or StockStatus.AVAILABLE
        derived = derive_status([v['quantity'] for v in cleaned], initial)

        with transaction.atomic():
            lot = StockLot.objects.create(
                stock_type=stock_type,
                status=derived,
                product=product,
                details=details,
                batch_number=batch_number,
                quality_grade=quality_grade,
                notes=notes or '',
            )
            Variant.objects.bulk_create([Variant(lot=lot, **v) for v in cleaned])

        logger.info(
            "stock.created",
            extra={
                "stock_id": lot.pk,
                "stock_type": stock_type,
                "product": product,
                "status": derived,
            },
        )
        notify(NotificationCategory.STOCK_ALERTS, stock_message(lot, 'created'), MessageType.STOCK_ALERT)
        return lot

    @classmethod
    def update(cls, lot, variants=None, status=None, **fields) -> StockLot:
        """
        Edit a lot directly.

        Given ``variants`` replace the current ones. Status is re-derived
        after a variant change unless ``status`` is given, which is then set
        as-is.

        Raises:
            ValidationError: INVALID_STOCK_DETAILS (stock type change or bad
                details), INVALID_STATUS, DUPLICATE_COLOR, INVALID_QUANTITY
            NotFoundError('STOCK_NOT_FOUND')
        """
        if status is not None:
            _check_status(status)
        cleaned = clean_variants(variants) if variants is not None else None

        with transaction.atomic():
            try:
                lot = StockLot.objects.select_for_update().get(pk=lot.pk)
            except StockLot.DoesNotExist:
                raise NotFoundError('STOCK_NOT_FOUND', stock_id=lot.pk) from None

            stock_type = fields.pop('stock_type', None)
            if stock_type and stock_type != lot.stock_type:
                raise ValidationError(
                    'INVALID_STOCK_DETAILS',
                    message="Stock type cannot be changed",
                    field='stock_type',
                )

            if 'details' in fields:
                lot.details = clean_details(lot.stock_type, fields.pop('details'))
            if fields.get('quality_grade'):
                _check_grade(fields['quality_grade'])
            for field in EDITABLE_FIELDS:
                if fields.get(field) is not None:
                    setattr(lot, field, fields[field])

            if cleaned is not None:
                lot.variants.all().delete()
                Variant.objects.bulk_create([Variant(lot=lot, **v) for v in cleaned])

            if status is not None:
                lot.status = status
            elif cleaned is not None:
                lot.refresh_status([v['quantity'] for v in cleaned])
            lot.save()

        logger.info(
            "stock.updated",
            extra={
                "stock_id": lot.pk,
                "status": lot.status,
                "variants_replaced": cleaned is not None,
            },
        )
        notify(NotificationCategory.STOCK_ALERTS, stock_message(lot, 'updated'), MessageType.STOCK_ALERT)
        return lot

    @classmethod
    def delete(cls, lot) -> None:
        """
        Remove a lot. Orders keep their items; their stock reference is cleared.

        Raises:
            NotFoundError('STOCK_NOT_FOUND')
        """
        with transaction.atomic():
            try:
                lot = StockLot.objects.select_for_update().get(pk=lot.pk)
            except StockLot.DoesNotExist:
                raise NotFoundError('STOCK_NOT_FOUND', stock_id=lot.pk) from None
            message = stock_message(lot, 'deleted')
            lot_id = lot.pk
            lot.delete()

        logger.info("stock.deleted", extra={"stock_id": lot_id})
        notify(NotificationCategory.STOCK_ALERTS, message, MessageType.STOCK_ALERT)

    @classmethod
    def adjust(cls, lot, color, new_quantity, reason) -> Adjustment:
        """
        Raise one variant's quantity and record the correction.

        Only increases are accepted. ``prev_quantity`` on the record is the
        quantity read under lock right before the change.

        Returns:
            Adjustment

        Raises:
            ValidationError: REASON_REQUIRED, INVALID_QUANTITY,
                ADJUSTMENT_NOT_INCREASE
            NotFoundError('STOCK_NOT_FOUND')
            BusinessRuleViolation('COLOR_NOT_FOUND')
        """
        if not reason or not str(reason).strip():
            raise ValidationError('REASON_REQUIRED')
        new_quantity = _decimal(new_quantity)
        if new_quantity < 0:
            raise ValidationError('INVALID_QUANTITY', requested=new_quantity)

        with transaction.atomic():
            lot_id = lot.pk if isinstance(lot, StockLot) else lot
            try:
                lot = StockLot.objects.select_for_update().get(pk=lot_id)
            except (StockLot.DoesNotExist, ValueError, TypeError):
                raise NotFoundError('STOCK_NOT_FOUND', stock_id=lot_id) from None

            variant = Variant.objects.select_for_update().filter(lot=lot, color=color).first()
            if variant is None:
                raise BusinessRuleViolation(
                    'COLOR_NOT_FOUND',
                    message=f"Color {color} not found in selected stock",
                    stock_id=lot.pk,
                    color=color,
                )

            prev_quantity = variant.quantity
            if new_quantity <= prev_quantity:
                raise ValidationError(
                    'ADJUSTMENT_NOT_INCREASE',
                    prev_quantity=prev_quantity,
                    new_quantity=new_quantity,
                )

            variant.quantity = new_quantity
            variant.save(update_fields=['quantity'])
            lot.refresh_status()
            lot.save(update_fields=['status', 'updated_at'])

            adjustment = Adjustment.objects.create(
                stock=lot,
                product=lot.product,
                stock_type=lot.stock_type,
                color=color,
                prev_quantity=prev_quantity,
                new_quantity=new_quantity,
                reason=str(reason).strip(),
            )

        logger.info(
            "stock.adjusted",
            extra={
                "stock_id": lot.pk,
                "color": color,
                "prev": str(prev_quantity),
                "new": str(new_quantity),
                "status": lot.status,
            },
        )
        return adjustment

    @classmethod
    def get(cls, stock_id) -> StockLot:
        try:
            return StockLot.objects.prefetch_related('variants').get(pk=stock_id)
        except (StockLot.DoesNotExist, ValueError, TypeError):
            raise NotFoundError('STOCK_NOT_FOUND', stock_id=stock_id) from None

    @classmethod
    def list(cls, stock_type=None):
        qs = StockLot.objects.prefetch_related('variants').order_by('-created_at', '-id')
        if stock_type:
            qs = qs.filter(stock_type=stock_type)
        return qs
