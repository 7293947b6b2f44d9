"""
Tests for the order workflow: credit, deduction, restoration.
"""

from decimal import Decimal

import pytest

from textileman.exceptions import BusinessRuleViolation, NotFoundError, ValidationError
from textileman.models import Order, OrderItem, StockStatus
from textileman.services import OrderWorkflow, StockLedger
from textileman.tests.helpers import item, variant_qty


pytestmark = pytest.mark.django_db


@pytest.fixture
def place(customer, today, next_week):
    """Create an order for the default customer."""
    def _place(items, status=None, **kwargs):
        return OrderWorkflow.create(
            customer=kwargs.pop('customer', customer.customer_name),
            order_date=today,
            delivery_date=next_week,
            items=items,
            status=status,
            **kwargs,
        )
    return _place


class TestCreateOrder:
    """Tests for OrderWorkflow.create()."""

    def test_pending_has_no_stock_effect(self, place, make_lot):
        lot = make_lot([('Red', 50)])

        order = place([item('Red', 30)])

        assert order.status == 'pending'
        assert variant_qty(lot, 'Red') == Decimal('50')
        assert order.items.count() == 1
        assert order.total == Decimal('300')

    def test_confirmed_deducts_and_recomputes_status(self, place, make_lot):
        """Red 50, order 30 -> Red 20, lot becomes low."""
        lot = make_lot([('Red', 50)])

        place([item('Red', 30)], status='confirmed')

        lot.refresh_from_db()
        assert variant_qty(lot, 'Red') == Decimal('20')
        assert lot.status == StockStatus.LOW

    def test_processing_lot_stays_processing(self, place, make_lot):
        lot = make_lot([('Red', 50)], status='processing')

        place([item('Red', 30, stock=lot.pk)], status='confirmed')

        lot.refresh_from_db()
        assert variant_qty(lot, 'Red') == Decimal('20')
        assert lot.status == 'processing'

    def test_deducting_everything_marks_out(self, place, make_lot):
        lot = make_lot([('Red', 50)])

        place([item('Red', 50)], status='confirmed')

        lot.refresh_from_db()
        assert lot.status == StockStatus.OUT

    def test_items_on_same_lot_compound(self, place, make_lot):
        """Two items against one variant are checked against the running total."""
        lot = make_lot([('Red', 50)])

        with pytest.raises(BusinessRuleViolation) as exc:
            place([item('Red', 30), item('Red', 30)], status='confirmed')

        assert exc.value.code == 'INSUFFICIENT_STOCK'
        assert exc.value.available == Decimal('20')
        assert exc.value.requested == Decimal('30')
        assert variant_qty(lot, 'Red') == Decimal('50')

    def test_items_on_same_lot_deduct_together(self, place, make_lot):
        lot = make_lot([('Red', 100), ('Blue', 100)])

        place([item('Red', 30), item('Red', 20), item('Blue', 10)], status='confirmed')

        assert variant_qty(lot, 'Red') == Decimal('50')
        assert variant_qty(lot, 'Blue') == Decimal('90')

    def test_insufficient_stock_touches_no_lot(self, place, make_lot):
        """A failing later item leaves earlier lots untouched."""
        first = make_lot([('Red', 200)], product='Cotton Base')
        second = make_lot([('Blue', 10)], product='Silk Base')

        with pytest.raises(BusinessRuleViolation) as exc:
            place([
                item('Red', 100, product='Cotton Base'),
                item('Blue', 20, product='Silk Base'),
            ], status='confirmed')

        assert exc.value.code == 'INSUFFICIENT_STOCK'
        assert 'Available: 10' in exc.value.message
        assert variant_qty(first, 'Red') == Decimal('200')
        assert variant_qty(second, 'Blue') == Decimal('10')
        first.refresh_from_db()
        assert first.status == StockStatus.AVAILABLE
        assert Order.objects.count() == 0

    def test_stock_not_found(self, place, make_lot):
        make_lot([('Red', 50)], product='Cotton Base')

        with pytest.raises(BusinessRuleViolation) as exc:
            place([item('Red', 10, product='Linen Base')], status='confirmed')

        assert exc.value.code == 'STOCK_NOT_FOUND'
        assert 'Linen Base - Red' in exc.value.message

    def test_fallback_ignores_out_and_processing_lots(self, place, make_lot):
        make_lot([('Red', 0)])
        make_lot([('Red', 500)], status='processing')

        with pytest.raises(BusinessRuleViolation) as exc:
            place([item('Red', 10)], status='confirmed')

        assert exc.value.code == 'STOCK_NOT_FOUND'

    def test_fallback_picks_first_lot(self, place, make_lot):
        first = make_lot([('Red', 150)])
        second = make_lot([('Red', 150)])

        place([item('Red', 10)], status='confirmed')

        assert variant_qty(first, 'Red') == Decimal('140')
        assert variant_qty(second, 'Red') == Decimal('150')

    def test_color_not_found_in_referenced_lot(self, place, make_lot):
        lot = make_lot([('Red', 50)])

        with pytest.raises(BusinessRuleViolation) as exc:
            place([item('Green', 10, stock=lot.pk)], status='confirmed')

        assert exc.value.code == 'COLOR_NOT_FOUND'

    def test_stock_reference_is_stored(self, place, make_lot):
        lot = make_lot([('Red', 150)])

        order = place([item('Red', 10, stock=lot.pk)], status='confirmed')

        assert order.items.get().stock_id == lot.pk

    def test_missing_fields(self, customer, today):
        with pytest.raises(ValidationError) as exc:
            OrderWorkflow.create(customer.customer_name, today, None, [item('Red', 1)])

        assert exc.value.code == 'MISSING_FIELDS'
        assert exc.value.data['fields'] == ['delivery_date']

    def test_empty_items(self, place):
        with pytest.raises(ValidationError) as exc:
            place([])

        assert exc.value.code == 'MISSING_FIELDS'

    def test_item_without_numeric_quantity(self, place):
        with pytest.raises(ValidationError) as exc:
            place([item('Red', 'lots')])

        assert exc.value.code == 'INVALID_ITEM'

    def test_item_with_non_positive_quantity(self, place):
        with pytest.raises(ValidationError) as exc:
            place([item('Red', -5)])

        assert exc.value.code == 'INVALID_QUANTITY'

    def test_unknown_status(self, place):
        with pytest.raises(ValidationError) as exc:
            place([item('Red', 1)], status='shipped')

        assert exc.value.code == 'INVALID_STATUS'

    def test_unknown_customer(self, place):
        with pytest.raises(NotFoundError) as exc:
            place([item('Red', 1)], customer='Nobody & Sons')

        assert exc.value.code == 'CUSTOMER_NOT_FOUND'


class TestCreditLimit:
    """Credit ceiling enforced at order creation."""

    def test_reaching_limit_exactly_is_allowed(self, place, customer):
        place([item('Red', 1000, price='100')])   # 100 000

        assert Order.objects.count() == 1

    def test_exceeding_limit_fails(self, place, customer):
        place([item('Red', 600, price='100')])    # 60 000

        with pytest.raises(BusinessRuleViolation) as exc:
            place([item('Red', 401, price='100')])  # 40 100

        assert exc.value.code == 'CREDIT_LIMIT_EXCEEDED'
        assert exc.value.available == Decimal('40000')
        assert exc.value.requested == Decimal('40100')
        assert 'Available credit: ₹40,000' in exc.value.message
        assert Order.objects.count() == 1

    def test_credit_checked_before_stock(self, place, make_lot):
        lot = make_lot([('Red', 50)])

        with pytest.raises(BusinessRuleViolation) as exc:
            place([item('Red', 30, price='5000')], status='confirmed')

        assert exc.value.code == 'CREDIT_LIMIT_EXCEEDED'
        assert variant_qty(lot, 'Red') == Decimal('50')


class TestUpdateOrder:
    """Tests for OrderWorkflow.update()."""

    def test_confirming_deducts_stored_items(self, place, make_lot):
        lot = make_lot([('Red', 150)])
        order = place([item('Red', 30)])

        OrderWorkflow.update(order, status='confirmed', items=[item('Red', 999)])

        order.refresh_from_db()
        assert order.status == 'confirmed'
        assert variant_qty(lot, 'Red') == Decimal('120')
        assert order.items.get().quantity == Decimal('30')

    def test_confirming_fails_on_insufficient_stock(self, place, make_lot):
        lot = make_lot([('Red', 20)])
        order = place([item('Red', 30)])

        with pytest.raises(BusinessRuleViolation) as exc:
            OrderWorkflow.update(order, status='confirmed')

        assert exc.value.code == 'INSUFFICIENT_STOCK'
        order.refresh_from_db()
        assert order.status == 'pending'
        assert variant_qty(lot, 'Red') == Decimal('20')

    def test_unconfirming_restores(self, place, make_lot):
        lot = make_lot([('Red', 150)])
        order = place([item('Red', 100)], status='confirmed')
        lot.refresh_from_db()
        assert lot.status == StockStatus.LOW

        OrderWorkflow.update(order, status='pending')

        lot.refresh_from_db()
        assert variant_qty(lot, 'Red') == Decimal('150')
        assert lot.status == StockStatus.AVAILABLE

    def test_unconfirming_restores_into_out_lot(self, place, make_lot):
        """Restoration finds the lot even though it is out of stock."""
        lot = make_lot([('Red', 50)])
        order = place([item('Red', 50)], status='confirmed')

        OrderWorkflow.update(order, status='pending')

        lot.refresh_from_db()
        assert variant_qty(lot, 'Red') == Decimal('50')
        assert lot.status == StockStatus.LOW

    def test_unconfirming_after_lot_deleted(self, place, make_lot):
        """Confirmed -> pending succeeds when the lot is gone; nothing is restored."""
        lot = make_lot([('Red', 50)])
        order = place([item('Red', 30, stock=lot.pk)], status='confirmed')
        StockLedger.delete(lot)

        order = OrderWorkflow.update(order, status='pending')

        assert order.status == 'pending'
        assert OrderItem.objects.get(order=order).stock is None

    def test_quantity_conservation(self, place, make_lot):
        """confirm -> pending -> confirm -> delete returns the lot to its start."""
        lot = make_lot([('Red', 80), ('Blue', 40)])
        items = [item('Red', 30), item('Blue', 15), item('Red', 5)]

        order = place(items, status='confirmed')
        OrderWorkflow.update(order, status='pending')
        OrderWorkflow.update(order, status='confirmed')
        assert variant_qty(lot, 'Red') == Decimal('45')
        OrderWorkflow.delete(order)

        lot.refresh_from_db()
        assert variant_qty(lot, 'Red') == Decimal('80')
        assert variant_qty(lot, 'Blue') == Decimal('40')
        assert lot.status == StockStatus.AVAILABLE

    def test_same_status_moves_nothing(self, place, make_lot):
        lot = make_lot([('Red', 150)])
        order = place([item('Red', 30)], status='confirmed')

        OrderWorkflow.update(order, status='confirmed', notes='rush')

        order.refresh_from_db()
        assert order.notes == 'rush'
        assert variant_qty(lot, 'Red') == Decimal('120')

    def test_unknown_status(self, place):
        order = place([item('Red', 1)])

        with pytest.raises(ValidationError) as exc:
            OrderWorkflow.update(order, status='cancelled')

        assert exc.value.code == 'INVALID_STATUS'

    def test_items_replaced_while_pending(self, place):
        order = place([item('Red', 1)])

        OrderWorkflow.update(order, items=[item('Blue', 5), item('Green', 2)])

        assert sorted(order.items.values_list('color', flat=True)) == ['Blue', 'Green']

    def test_items_locked_once_confirmed(self, place, make_lot):
        make_lot([('Red', 150)])
        order = place([item('Red', 10)], status='confirmed')

        OrderWorkflow.update(order, items=[item('Red', 90)])

        assert order.items.get().quantity == Decimal('10')

    def test_replacing_items_rechecks_credit(self, place):
        order = place([item('Red', 500, price='100')])   # 50 000

        OrderWorkflow.update(order, items=[item('Red', 1000, price='100')])  # own value replaced

        with pytest.raises(BusinessRuleViolation) as exc:
            OrderWorkflow.update(order, items=[item('Red', 1001, price='100')])

        assert exc.value.code == 'CREDIT_LIMIT_EXCEEDED'

    def test_missing_order(self, place):
        order = place([item('Red', 1)])
        Order.objects.filter(pk=order.pk).delete()

        with pytest.raises(NotFoundError) as exc:
            OrderWorkflow.update(order, status='confirmed')

        assert exc.value.code == 'ORDER_NOT_FOUND'


class TestDeleteOrder:
    """Tests for OrderWorkflow.delete()."""

    def test_deleting_confirmed_restores(self, place, make_lot):
        lot = make_lot([('Red', 150)])
        order = place([item('Red', 60)], status='confirmed')

        OrderWorkflow.delete(order)

        assert variant_qty(lot, 'Red') == Decimal('150')
        assert not Order.objects.exists()
        assert not OrderItem.objects.exists()

    def test_deleting_pending_moves_nothing(self, place, make_lot):
        lot = make_lot([('Red', 150)])
        order = place([item('Red', 60)])

        OrderWorkflow.delete(order)

        assert variant_qty(lot, 'Red') == Decimal('150')

    def test_deleting_missing_order(self, place):
        order = place([item('Red', 1)])
        OrderWorkflow.delete(order)

        with pytest.raises(NotFoundError):
            OrderWorkflow.delete(order)


class TestQueries:

    def test_get(self, place):
        order = place([item('Red', 1)])

        assert OrderWorkflow.get(order.pk) == order

    def test_get_missing(self):
        with pytest.raises(NotFoundError) as exc:
            OrderWorkflow.get(9999)

        assert exc.value.code == 'ORDER_NOT_FOUND'

    def test_list_newest_first_and_by_customer(self, place, customer):
        first = place([item('Red', 1)])
        second = place([item('Red', 2)])

        assert list(OrderWorkflow.list()) == [second, first]
        assert list(OrderWorkflow.list(customer='Someone Else')) == []
        assert OrderWorkflow.list(customer=customer.customer_name).count() == 2
