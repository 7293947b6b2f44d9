"""
Stock status derivation — isolated, testable, reusable.

A lot's status follows its total quantity:

    total == 0              -> out
    0 < total < threshold   -> low
    total >= threshold      -> available

Statuses set by an operator for work in progress (by default only
``processing``) are sticky: the quantity rule only overrides them when the
lot runs out.

Examples:
    derive_status([50, 30], 'available')     # 'low'
    derive_status([50, 30], 'processing')    # 'processing'
    derive_status([0], 'processing')         # 'out'
"""

from collections.abc import Iterable
from decimal import Decimal

from textileman.conf import textileman_settings
from textileman.models.enums import StockStatus


def total_quantity(quantities: Iterable) -> Decimal:
    """Sum quantities, treating None as zero."""
    return sum((Decimal(q or 0) for q in quantities), Decimal('0'))


def derive_status(quantities: Iterable, current_status: str,
                  threshold=None, sticky: Iterable[str] | None = None) -> str:
    """
    Compute a lot's status from its variant quantities.

    Args:
        quantities: Variant quantities of the lot
        current_status: Status before the mutation
        threshold: Low-stock threshold (None = LOW_STOCK_THRESHOLD)
        sticky: Statuses kept while stock remains (None = STICKY_STATUSES)

    Returns:
        The new status value
    """
    if threshold is None:
        threshold = textileman_settings.LOW_STOCK_THRESHOLD
    if sticky is None:
        sticky = textileman_settings.STICKY_STATUSES

    total = total_quantity(quantities)

    if total == 0:
        return StockStatus.OUT
    if current_status in tuple(sticky):
        return current_status
    if total < Decimal(threshold):
        return StockStatus.LOW
    return StockStatus.AVAILABLE
