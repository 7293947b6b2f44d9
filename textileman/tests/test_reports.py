"""
Tests for dashboard reports and stock alerts.
"""

from datetime import date, datetime, timedelta
from datetime import timezone as dt_timezone
from decimal import Decimal

import pytest
from django.utils import timezone

from textileman.models import Customer, NotificationMessage, StockLot, StockType
from textileman.models.enums import DeliveryStatus, MessageType
from textileman.services import CustomerService, OrderWorkflow, ProductService
from textileman.services.alerts import notify_stock_alerts, stock_alerts
from textileman.services.reports import (
    dashboard_stats,
    monthly_sales,
    recent_orders_by_product,
    stock_by_type,
    stock_movement,
    today_message_stats,
    top_customers,
    top_products,
)
from textileman.tests.helpers import item


pytestmark = pytest.mark.django_db


@pytest.fixture
def sales(customer, make_lot):
    """Two confirmed orders in 2026 (March, July) and one pending."""
    make_lot([('Red', 1000), ('Blue', 1000)])
    gupta = Customer.objects.create(
        customer_name='Gupta Silks', customer_type='Retail', email='g@example.com',
        phone='1', city='Delhi', address='Chandni Chowk', credit_limit=Decimal('100000'),
    )
    OrderWorkflow.create(
        customer.customer_name, date(2026, 3, 5), date(2026, 3, 20),
        [item('Red', 100, price='20'), item('Blue', 50, price='10')], status='confirmed',
    )
    OrderWorkflow.create(
        gupta.customer_name, date(2026, 7, 1), date(2026, 7, 9),
        [item('Blue', 300, price='15')], status='confirmed',
    )
    OrderWorkflow.create(
        customer.customer_name, date(2026, 7, 2), date(2026, 7, 9),
        [item('Red', 10, price='999')],
    )


class TestSales:

    def test_monthly_sales(self, sales):
        months = monthly_sales(2026)

        assert len(months) == 12
        assert months[2] == {'month': 3, 'revenue': Decimal('2500'), 'orders': 1}
        assert months[6] == {'month': 7, 'revenue': Decimal('4500'), 'orders': 1}
        assert months[0]['revenue'] == Decimal('0')

    def test_other_year_is_empty(self, sales):
        assert all(m['orders'] == 0 for m in monthly_sales(2025))

    def test_top_customers(self, sales):
        ranked = top_customers()

        assert ranked == [
            {'customer': 'Gupta Silks', 'city': 'Delhi', 'revenue': Decimal('4500')},
            {'customer': 'Sharma Textiles', 'city': 'Mumbai', 'revenue': Decimal('2500')},
        ]
        assert len(top_customers(limit=1)) == 1

    def test_dashboard(self, sales):
        ProductService.create(name='Cotton Base', category='Cotton Fabrics')

        stats = dashboard_stats()

        assert stats['total_products'] == 1
        assert stats['active_orders'] == 1
        assert stats['confirmed_orders'] == 2
        assert stats['total_customers'] == 2
        assert stats['total_revenue'] == Decimal('7000')
        assert stats['stock_by_type'][StockType.GRAY] == Decimal('1550')
        assert stats['stock_by_type'][StockType.DESIGN] == Decimal('0')

    def test_stock_by_type_empty(self):
        assert stock_by_type() == {t: Decimal('0') for t in StockType.values}


class TestStockAlerts:

    def test_low_and_out_lots(self, make_lot):
        make_lot([('Red', 500)])
        low = make_lot([('Red', 40)], product='Silk Base')
        out = make_lot([('Red', 0)], product='Linen Base')

        alerts = stock_alerts()

        by_id = {a['stock_id']: a for a in alerts}
        assert set(by_id) == {low.pk, out.pk}
        assert by_id[low.pk]['severity'] == 'warning'
        assert by_id[out.pk]['severity'] == 'critical'
        assert by_id[low.pk]['stock_type_label'] == 'Surat Mills Gray Stock'
        assert by_id[low.pk]['variants'] == [{'color': 'Red', 'quantity': Decimal('40'), 'unit': 'METERS'}]

    def test_limit(self, make_lot):
        make_lot([('Red', 10)])
        make_lot([('Red', 20)])

        assert len(stock_alerts(limit=1)) == 1

    def test_summary_disabled(self, make_lot, recipients):
        make_lot([('Red', 10)])

        assert notify_stock_alerts() is None
        assert not NotificationMessage.objects.exists()

    def test_summary_sent(self, make_lot, notifications_on):
        make_lot([('Red', 10)], product='Silk Base')
        NotificationMessage.objects.all().delete()

        entry = notify_stock_alerts()

        assert entry.sent_to_count == 2
        assert 'Stock Alerts' in entry.message
        assert 'Silk Base' in entry.message
        assert 'WARNING' in entry.message

    def test_nothing_to_report(self, notifications_on):
        assert notify_stock_alerts() is None


class TestProductReports:

    def test_top_products(self, sales, customer, make_lot):
        make_lot([('Gold', 100)], product='Silk Base')
        OrderWorkflow.create(
            customer.customer_name, date(2026, 8, 1), date(2026, 8, 9),
            [item('Gold', 10, product='Silk Base', price='1000')], status='confirmed',
        )

        ranked = top_products()

        assert ranked == [
            {'name': 'Silk Base', 'quantity': Decimal('10'), 'revenue': Decimal('10000')},
            {'name': 'Cotton Base', 'quantity': Decimal('450'), 'revenue': Decimal('7000')},
        ]
        assert top_products(limit=1)[0]['name'] == 'Silk Base'

    def test_recent_orders_by_product(self, customer):
        product = ProductService.create(name='Cotton Base', category='Cotton Fabrics')
        for day in (3, 9, 6):
            OrderWorkflow.create(
                customer.customer_name, date(2026, 5, day), date(2026, 5, 20),
                [item('Red', 1), item('Red', 1, product='Silk Base')],
            )
        OrderWorkflow.create(
            customer.customer_name, date(2026, 5, 12), date(2026, 5, 20), [item('Red', 1, product='Silk Base')],
        )

        orders = list(recent_orders_by_product(product, limit=2))

        assert [o.order_date.day for o in orders] == [9, 6]


class TestStockMovement:

    def test_inbound_outbound_per_month(self, customer, make_lot):
        lot = make_lot([('Red', 1000)])
        StockLot.objects.filter(pk=lot.pk).update(created_at=datetime(2025, 2, 10, 12, tzinfo=dt_timezone.utc))
        for order_date, quantity in ((date(2025, 2, 15), 100), (date(2025, 4, 1), 50)):
            OrderWorkflow.create(
                customer.customer_name, order_date, order_date, [item('Red', quantity)], status='confirmed',
            )
        OrderWorkflow.create(customer.customer_name, date(2025, 4, 2), date(2025, 4, 9), [item('Red', 70)])

        movement = stock_movement(2025)

        assert len(movement) == 12
        assert movement[1] == {
            'month': 2, 'inbound': Decimal('850'), 'outbound': Decimal('100'), 'net': Decimal('750'),
        }
        assert movement[3] == {
            'month': 4, 'inbound': Decimal('0'), 'outbound': Decimal('50'), 'net': Decimal('-50'),
        }
        assert movement[0]['net'] == Decimal('0')

    def test_other_year_is_flat(self, make_lot):
        make_lot([('Red', 1000)])

        assert all(m['inbound'] == 0 and m['outbound'] == 0 for m in stock_movement(1999))


class TestMessageStats:

    def test_counts_today_by_type(self, notifications_on, customer, today, next_week):
        CustomerService.create(
            customer_name='Mehta Fabrics', customer_type='Retail', email='m@example.com',
            phone='+919800000002', city='Surat', address='Ring Road',
        )
        OrderWorkflow.create(customer.customer_name, today, next_week, [item('Red', 1)])
        NotificationMessage.objects.create(
            message='old', type=MessageType.ORDER_UPDATE, status=DeliveryStatus.DELIVERED,
            created_at=timezone.now() - timedelta(days=2),
        )

        stats = today_message_stats()

        assert stats['date'] == timezone.localdate().isoformat()
        assert stats['total'] == 2
        assert stats['order_update'] == 1
        assert stats['customer_update'] == 1
        assert stats['stock_alert'] == 0

    def test_nothing_sent(self, db):
        stats = today_message_stats()

        assert stats['total'] == 0
        assert set(stats) == {'date', 'total', *MessageType.values}
