"""
Customer credit — always computed from orders, never cached.

    remaining_credit = credit_limit - sum(order totals)

Every order counts, pending or confirmed.
"""

import logging
from decimal import Decimal

from textileman.exceptions import BusinessRuleViolation
from textileman.models.order import Order

logger = logging.getLogger('textileman')


def order_value(customer_name: str) -> Decimal:
    """Total value of every order placed under ``customer_name``."""
    return Order.objects.for_customer(customer_name).items_total()


def remaining_credit(customer) -> Decimal:
    return customer.credit_limit - order_value(customer.customer_name)


def credit_summary(customer) -> dict:
    total = order_value(customer.customer_name)
    remaining = customer.credit_limit - total
    return {
        'total_order_value': total,
        'remaining_credit': remaining,
        'credit_exceeded': remaining < 0,
    }


def check_credit(customer, new_total: Decimal, existing_total: Decimal | None = None) -> None:
    """
    Reject an order of ``new_total`` that would take the customer over the limit.

    Reaching the limit exactly is allowed.

    Args:
        customer: Customer (locked by the caller when racing orders matter)
        new_total: Value of the order being placed
        existing_total: Value already committed (None = computed)

    Raises:
        BusinessRuleViolation('CREDIT_LIMIT_EXCEEDED')
    """
    if existing_total is None:
        existing_total = order_value(customer.customer_name)

    if existing_total + new_total > customer.credit_limit:
        available = customer.credit_limit - existing_total
        logger.warning(
            "credit.rejected",
            extra={
                "customer": customer.customer_name,
                "available": str(available),
                "requested": str(new_total),
            },
        )
        raise BusinessRuleViolation(
            'CREDIT_LIMIT_EXCEEDED',
            message=(
                f"Order would exceed credit limit. "
                f"Available credit: ₹{available:,}, Order total: ₹{new_total:,}"
            ),
            available=available,
            requested=new_total,
        )
