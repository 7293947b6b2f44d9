"""
Stock resolution — which lot and variant an order item draws from.

Two policies share one lookup:

    StrictResolution   used when deducting. Fallback lookup only considers
                       lots that are available or low; every failure raises.
    LenientResolution  used when restoring. No status filter; an item that
                       cannot be resolved is skipped (returns None).

Lookup order: the item's explicit ``stock`` reference, otherwise the first
lot by primary key with the item's product and a variant of its color.

Resolved lots are locked (``select_for_update``) and kept in a ``LotCache``
for the duration of one operation, so several items against the same lot
compound on the same in-memory quantities. Nothing is written until
``LotCache.flush()``.
"""

import logging
from dataclasses import dataclass
from decimal import Decimal

from textileman.exceptions import BusinessRuleViolation
from textileman.models.stock import StockLot, Variant

logger = logging.getLogger('textileman')


@dataclass
class LineItem:
    """The parts of an order item that resolution needs."""

    product: str
    color: str
    quantity: Decimal
    stock_id: int | None = None

    @classmethod
    def from_order_item(cls, item) -> 'LineItem':
        return cls(
            product=item.product,
            color=item.color,
            quantity=Decimal(item.quantity),
            stock_id=item.stock_id,
        )


class LotCache:
    """Locked lots and their variants, keyed by lot pk."""

    def __init__(self):
        self._lots: dict[int, StockLot] = {}
        self._variants: dict[int, dict[str, Variant]] = {}
        self._dirty: set[int] = set()

    def get(self, pk: int) -> StockLot | None:
        if pk not in self._lots:
            lot = StockLot.objects.select_for_update().filter(pk=pk).first()
            if lot is None:
                return None
            self._lots[pk] = lot
            self._variants[pk] = {
                v.color: v for v in Variant.objects.select_for_update().filter(lot=lot).order_by('pk')
            }
        return self._lots[pk]

    def variant(self, lot: StockLot, color: str) -> Variant | None:
        return self._variants[lot.pk].get(color)

    def change(self, lot: StockLot, variant: Variant, delta: Decimal) -> None:
        """Apply ``delta`` in memory; persisted by ``flush``."""
        variant.quantity = Decimal(variant.quantity) + delta
        self._dirty.add(lot.pk)

    def flush(self) -> list[StockLot]:
        """Save changed variants, re-derive and save lot status. Returns saved lots."""
        saved = []
        for pk in sorted(self._dirty):
            lot = self._lots[pk]
            variants = list(self._variants[pk].values())
            for v in variants:
                v.save(update_fields=['quantity'])
            lot.refresh_status([v.quantity for v in variants])
            lot.save(update_fields=['status', 'updated_at'])
            saved.append(lot)
        self._dirty.clear()
        return saved


class StrictResolution:
    """Resolve for deduction. Raises on any problem."""

    status_filter = True

    @classmethod
    def find_lot_pk(cls, item: LineItem) -> int | None:
        if item.stock_id:
            return item.stock_id
        qs = StockLot.objects.for_item(item.product, item.color)
        if cls.status_filter:
            qs = qs.orderable()
        return qs.order_by('pk').values_list('pk', flat=True).first()

    @classmethod
    def resolve(cls, item: LineItem, cache: LotCache):
        """
        Locate lot and variant for ``item`` and check the quantity.

        Returns:
            (lot, variant)

        Raises:
            BusinessRuleViolation: STOCK_NOT_FOUND, COLOR_NOT_FOUND or
                INSUFFICIENT_STOCK
        """
        pk = cls.find_lot_pk(item)
        lot = cache.get(pk) if pk else None
        if lot is None:
            raise BusinessRuleViolation(
                'STOCK_NOT_FOUND',
                message=(
                    f"Stock not found for {item.product or 'product'} - {item.color}. "
                    "Please ensure the stock exists and is available."
                ),
                product=item.product,
                color=item.color,
            )

        variant = cache.variant(lot, item.color)
        if variant is None:
            raise BusinessRuleViolation(
                'COLOR_NOT_FOUND',
                message=f"Color {item.color} not found in selected stock",
                stock_id=lot.pk,
                color=item.color,
            )

        if variant.quantity < item.quantity:
            raise BusinessRuleViolation(
                'INSUFFICIENT_STOCK',
                message=(
                    f"Insufficient stock for {item.color}. "
                    f"Available: {variant.quantity} m, Requested: {item.quantity} m"
                ),
                stock_id=lot.pk,
                color=item.color,
                available=variant.quantity,
                requested=item.quantity,
            )

        return lot, variant


class LenientResolution(StrictResolution):
    """Resolve for restoration. Unresolvable items yield None."""

    status_filter = False

    @classmethod
    def resolve(cls, item: LineItem, cache: LotCache):
        pk = cls.find_lot_pk(item)
        lot = cache.get(pk) if pk else None
        variant = cache.variant(lot, item.color) if lot is not None else None

        if variant is None:
            logger.warning(
                "stock.restore.skipped",
                extra={
                    "product": item.product,
                    "color": item.color,
                    "qty": str(item.quantity),
                    "stock_id": pk,
                },
            )
            return None

        return lot, variant
