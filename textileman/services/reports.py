"""
Reports — read-only aggregates for the dashboard.

Revenue and outbound quantities count confirmed orders only (pending orders
have not taken stock). Every sum runs in the database.
"""

from decimal import Decimal

from django.db.models import Count, DecimalField, Sum
from django.db.models.functions import Coalesce, ExtractMonth
from django.utils import timezone

from textileman.models.customer import Customer
from textileman.models.enums import MessageType, OrderStatus, StockStatus, StockType
from textileman.models.notification import NotificationMessage
from textileman.models.order import Order, OrderItem, line_value
from textileman.models.product import Product
from textileman.models.stock import StockLot, Variant


ZERO = Decimal('0')


def _sum(expression):
    return Coalesce(Sum(expression), ZERO, output_field=DecimalField())


def _confirmed_items():
    return OrderItem.objects.filter(order__status=OrderStatus.CONFIRMED)


def total_revenue() -> Decimal:
    return Order.objects.confirmed().items_total()


def confirmed_orders_count() -> int:
    return Order.objects.confirmed().count()


def monthly_sales(year: int | None = None) -> list[dict]:
    """
    Revenue and order count per month of ``year`` (default: current year).

    Returns twelve entries, months without sales included.
    """
    year = year or timezone.localdate().year
    rows = (
        _confirmed_items()
        .filter(order__order_date__year=year)
        .annotate(month=ExtractMonth('order__order_date'))
        .values('month')
        .annotate(revenue=_sum(line_value()), orders=Count('order', distinct=True))
        .order_by()
    )
    by_month = {row['month']: row for row in rows}
    return [
        {
            'month': month,
            'revenue': by_month[month]['revenue'] if month in by_month else ZERO,
            'orders': by_month[month]['orders'] if month in by_month else 0,
        }
        for month in range(1, 13)
    ]


def stock_by_type() -> dict[str, Decimal]:
    """Total variant quantity per stock type (every type present)."""
    totals = {stock_type: ZERO for stock_type in StockType.values}
    rows = Variant.objects.values('lot__stock_type').annotate(total=_sum('quantity')).order_by()
    for row in rows:
        totals[row['lot__stock_type']] = row['total']
    return totals


def top_customers(limit: int = 10) -> list[dict]:
    """Customers by confirmed revenue, highest first."""
    ranked = list(
        _confirmed_items()
        .values('order__customer')
        .annotate(revenue=_sum(line_value()))
        .order_by('-revenue', 'order__customer')[:limit]
    )
    cities = dict(
        Customer.objects.filter(
            customer_name__in=[row['order__customer'] for row in ranked]
        ).values_list('customer_name', 'city')
    )
    return [
        {
            'customer': row['order__customer'],
            'city': cities.get(row['order__customer'], ''),
            'revenue': row['revenue'],
        }
        for row in ranked
    ]


def top_products(limit: int = 5) -> list[dict]:
    """Products by confirmed revenue, highest first, with the quantity sold."""
    rows = (
        _confirmed_items()
        .values('product')
        .annotate(quantity=_sum('quantity'), revenue=_sum(line_value()))
        .order_by('-revenue', 'product')[:limit]
    )
    return [
        {'name': row['product'], 'quantity': row['quantity'], 'revenue': row['revenue']}
        for row in rows
    ]


def stock_movement(year: int | None = None) -> list[dict]:
    """
    Inbound and outbound quantity per month of ``year``.

    Inbound is the quantity held by lots created in the month; outbound is
    the quantity of confirmed order items dated in the month.

    Returns:
        Twelve ``{'month', 'inbound', 'outbound', 'net'}`` entries
    """
    year = year or timezone.localdate().year
    inbound = dict(
        Variant.objects.filter(lot__created_at__year=year)
        .annotate(month=ExtractMonth('lot__created_at'))
        .values('month')
        .annotate(total=_sum('quantity'))
        .order_by()
        .values_list('month', 'total')
    )
    outbound = dict(
        _confirmed_items()
        .filter(order__order_date__year=year)
        .annotate(month=ExtractMonth('order__order_date'))
        .values('month')
        .annotate(total=_sum('quantity'))
        .order_by()
        .values_list('month', 'total')
    )

    movement = []
    for month in range(1, 13):
        received = inbound.get(month, ZERO)
        sold = outbound.get(month, ZERO)
        movement.append({'month': month, 'inbound': received, 'outbound': sold, 'net': received - sold})
    return movement


def today_message_stats() -> dict:
    """Notifications logged today, in total and per message type."""
    today = timezone.localdate()
    counts = dict(
        NotificationMessage.objects.filter(created_at__date=today)
        .values('type')
        .annotate(count=Count('id'))
        .order_by()
        .values_list('type', 'count')
    )
    return {
        'date': today.isoformat(),
        'total': sum(counts.values()),
        **{message_type: counts.get(message_type, 0) for message_type in MessageType.values},
    }


def recent_orders_by_product(product: Product, limit: int = 5):
    """Latest orders (by order date) with at least one item of ``product``."""
    return (
        Order.objects.filter(items__product=product.name)
        .distinct()
        .order_by('-order_date', '-id')[:limit]
    )


def dashboard_stats() -> dict:
    return {
        'total_products': Product.objects.count(),
        'active_orders': Order.objects.filter(status=OrderStatus.PENDING).count(),
        'confirmed_orders': confirmed_orders_count(),
        'total_customers': Customer.objects.count(),
        'low_stock_items': StockLot.objects.filter(status=StockStatus.LOW).count(),
        'out_of_stock_items': StockLot.objects.filter(status=StockStatus.OUT).count(),
        'total_revenue': total_revenue(),
        'stock_by_type': stock_by_type(),
    }
