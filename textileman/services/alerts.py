"""
Stock alerts — lots running low or out, and the low-stock summary message.

Usage:
    from textileman.services.alerts import stock_alerts, notify_stock_alerts

    alerts = stock_alerts()
    notify_stock_alerts(alerts)   # no-op unless low_stock_warnings is on
"""

import logging

from textileman.conf import textileman_settings
from textileman.messages import stock_alerts_message
from textileman.models.enums import MessageType, NotificationCategory, StockStatus, StockType
from textileman.models.stock import StockLot
from textileman.services.notifications import notify

logger = logging.getLogger('textileman')


def stock_type_label(lot: StockLot) -> str:
    details = lot.details or {}
    if lot.stock_type == StockType.GRAY:
        return f"{details.get('factory', '')} Gray Stock".strip()
    if lot.stock_type == StockType.DESIGN:
        return f"{details.get('design', '')} Design".strip()
    if lot.stock_type == StockType.FACTORY:
        return f"{details.get('processing_factory', '')} Factory Stock".strip()
    return lot.stock_type


def stock_alerts(limit: int | None = None) -> list[dict]:
    """
    Lots whose status is low or out, most recently changed first.

    Severity is "critical" for out-of-stock lots and "warning" otherwise.
    """
    qs = StockLot.objects.alerting().prefetch_related('variants').order_by('-updated_at', '-id')
    if limit:
        qs = qs[:limit]

    alerts = []
    for lot in qs:
        alerts.append({
            'stock_id': lot.pk,
            'product': lot.product,
            'stock_type': lot.stock_type,
            'stock_type_label': stock_type_label(lot),
            'status': lot.status,
            'variants': [
                {'color': v.color, 'quantity': v.quantity, 'unit': v.unit}
                for v in lot.variants.all()
            ],
            'minimum': textileman_settings.LOW_STOCK_THRESHOLD,
            'severity': 'critical' if lot.status == StockStatus.OUT else 'warning',
        })
    return alerts


def notify_stock_alerts(alerts: list[dict] | None = None):
    """
    Send one summary of ``alerts`` (default: all current alerts).

    Returns:
        The NotificationMessage audit entry, or None when nothing was sent
    """
    if alerts is None:
        alerts = stock_alerts()
    if not alerts:
        return None

    critical = sum(1 for a in alerts if a['severity'] == 'critical')
    logger.warning(
        "stock.alerts",
        extra={"lots": len(alerts), "critical": critical},
    )
    return notify(
        NotificationCategory.LOW_STOCK_WARNINGS,
        stock_alerts_message(alerts),
        MessageType.STOCK_ALERT,
    )
