"""
Tests for return requests.
"""

from decimal import Decimal
from unittest import mock

import pytest

from textileman.exceptions import BusinessRuleViolation, NotFoundError, ValidationError
from textileman.models import ReturnRequest, StockLot
from textileman.services import OrderWorkflow, ReturnWorkflow
from textileman.services.credit import remaining_credit
from textileman.tests.helpers import item, variant_qty


pytestmark = pytest.mark.django_db


@pytest.fixture
def order(customer, make_lot, today, next_week):
    make_lot([('Red', 150)])
    return OrderWorkflow.create(
        customer.customer_name, today, next_week, [item('Red', 40)], status='confirmed',
    )


@pytest.fixture
def open_return(order):
    return ReturnWorkflow.create(order, 'Cotton Base', 'Red', 5, 'Torn selvedge')


class TestCreateReturn:

    def test_customer_copied_from_order(self, open_return, order):
        assert open_return.customer == order.customer
        assert open_return.order == order
        assert open_return.quantity == Decimal('5')
        assert not open_return.is_resolved

    def test_sequential_ids(self, order):
        first = ReturnWorkflow.create(order, 'Cotton Base', 'Red', 1, 'a')
        second = ReturnWorkflow.create(order.pk, 'Cotton Base', 'Red', 1, 'b')

        assert first.return_id == 'RET-001'
        assert second.return_id == 'RET-002'

    def test_next_id_follows_highest(self, order):
        ReturnRequest.objects.create(
            return_id='RET-041', order=order, customer=order.customer,
            product='Cotton Base', color='Red', quantity=1, reason='legacy',
        )

        assert ReturnRequest.next_return_id() == 'RET-042'

    def test_next_id_is_numeric_past_999(self, order):
        first = ReturnWorkflow.create(order, 'Cotton Base', 'Red', 1, 'a')
        ReturnRequest.objects.filter(pk=first.pk).update(return_id='RET-999')

        assert ReturnWorkflow.create(order, 'Cotton Base', 'Red', 1, 'b').return_id == 'RET-1000'
        assert ReturnRequest.next_return_id() == 'RET-1001'

    def test_taken_id_is_retried(self, order):
        ReturnWorkflow.create(order, 'Cotton Base', 'Red', 1, 'a')

        with mock.patch.object(ReturnRequest, 'next_return_id', side_effect=['RET-001', 'RET-002']):
            ret = ReturnWorkflow.create(order, 'Cotton Base', 'Red', 1, 'b')

        assert ret.return_id == 'RET-002'
        assert ReturnRequest.objects.count() == 2

    def test_missing_fields(self, order):
        with pytest.raises(ValidationError) as exc:
            ReturnWorkflow.create(order, 'Cotton Base', '', 5, '')

        assert exc.value.code == 'MISSING_FIELDS'
        assert exc.value.data['fields'] == ['color', 'reason']

    @pytest.mark.parametrize('quantity', [0, -2, 'a lot'])
    def test_bad_quantity(self, order, quantity):
        with pytest.raises(ValidationError) as exc:
            ReturnWorkflow.create(order, 'Cotton Base', 'Red', quantity, 'Torn')

        assert exc.value.code == 'INVALID_QUANTITY'

    def test_unknown_order(self, customer):
        with pytest.raises(NotFoundError) as exc:
            ReturnWorkflow.create(9999, 'Cotton Base', 'Red', 5, 'Torn')

        assert exc.value.code == 'ORDER_NOT_FOUND'


class TestResolveReturn:

    def test_approve_leaves_stock_and_credit(self, open_return, customer):
        lot = StockLot.objects.get()
        credit_before = remaining_credit(customer)

        ret = ReturnWorkflow.approve(open_return)

        assert ret.is_approved
        assert not ret.is_rejected
        assert remaining_credit(customer) == credit_before
        assert variant_qty(lot, 'Red') == Decimal('110')

    def test_approve_twice_is_idempotent(self, open_return):
        ReturnWorkflow.approve(open_return)

        ret = ReturnWorkflow.approve(open_return)

        assert ret.is_approved

    def test_reject_after_approve(self, open_return):
        ReturnWorkflow.approve(open_return)

        with pytest.raises(BusinessRuleViolation) as exc:
            ReturnWorkflow.reject(open_return)

        assert exc.value.code == 'RETURN_ALREADY_RESOLVED'
        open_return.refresh_from_db()
        assert open_return.is_approved
        assert not open_return.is_rejected

    def test_update_with_flag_rejects(self, open_return):
        ret = ReturnWorkflow.update(open_return, is_rejected=True, reason='Wrong shade')

        assert ret.is_rejected
        assert ret.reason == 'Wrong shade'

    def test_update_fields_only(self, open_return):
        ret = ReturnWorkflow.update(open_return, quantity='7.5')

        assert ret.quantity == Decimal('7.5')
        assert not ret.is_resolved


class TestDeleteAndQueries:

    def test_delete(self, open_return):
        ReturnWorkflow.delete(open_return)

        assert not ReturnRequest.objects.exists()

    def test_survives_order_deletion(self, open_return, order):
        OrderWorkflow.delete(order)

        open_return.refresh_from_db()
        assert open_return.order is None
        assert open_return.customer == 'Sharma Textiles'

    def test_get_missing(self):
        with pytest.raises(NotFoundError) as exc:
            ReturnWorkflow.get(12345)

        assert exc.value.code == 'RETURN_NOT_FOUND'

    def test_list_by_customer(self, open_return):
        assert list(ReturnWorkflow.list(customer='Sharma Textiles')) == [open_return]
        assert not ReturnWorkflow.list(customer='Gupta Silks').exists()
