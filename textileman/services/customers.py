"""
Customer service — CRUD with name propagation.

Orders and returns refer to customers by name, so a rename is carried over
to them in the same transaction.
"""

import logging
from decimal import Decimal, InvalidOperation

from django.db import IntegrityError, transaction

from textileman.exceptions import NotFoundError, ValidationError
from textileman.messages import new_customer_message
from textileman.models.customer import Customer
from textileman.models.enums import CustomerType, MessageType, NotificationCategory
from textileman.models.order import Order
from textileman.models.returns import ReturnRequest
from textileman.services.notifications import notify

logger = logging.getLogger('textileman')

REQUIRED_FIELDS = ('customer_name', 'customer_type', 'email', 'phone', 'city', 'address')
EDITABLE_FIELDS = REQUIRED_FIELDS + ('credit_limit',)


def _credit_limit(value) -> Decimal:
    try:
        limit = Decimal(str(value))
    except (InvalidOperation, TypeError, ValueError):
        raise ValidationError('INVALID_FIELD', message="Credit limit must be a number", field='credit_limit') from None
    if limit < 0:
        raise ValidationError('INVALID_FIELD', message="Credit limit cannot be negative", field='credit_limit')
    return limit


def _check_type(value) -> None:
    if value not in CustomerType.values:
        raise ValidationError('INVALID_FIELD', message=f"Invalid customer type: {value}", field='customer_type')


def propagate_customer_rename(old_name: str, new_name: str) -> dict[str, int]:
    """Rewrite the customer name on orders and returns. Returns counts."""
    counts = {
        'orders': Order.objects.filter(customer=old_name).update(customer=new_name),
        'returns': ReturnRequest.objects.filter(customer=old_name).update(customer=new_name),
    }
    logger.info(
        "customer.renamed",
        extra={"old": old_name, "new": new_name, **counts},
    )
    return counts


class CustomerService:

    @classmethod
    def create(cls, **data) -> Customer:
        """
        Raises:
            ValidationError: MISSING_FIELDS, INVALID_FIELD, DUPLICATE_NAME
        """
        missing = [f for f in REQUIRED_FIELDS if not data.get(f)]
        if missing:
            raise ValidationError('MISSING_FIELDS', fields=missing)
        _check_type(data['customer_type'])
        credit_limit = _credit_limit(data.get('credit_limit', 0) or 0)

        try:
            with transaction.atomic():
                customer = Customer.objects.create(
                    **{f: data[f] for f in REQUIRED_FIELDS},
                    credit_limit=credit_limit,
                )
        except IntegrityError:
            raise ValidationError(
                'DUPLICATE_NAME',
                message=f"Customer {data['customer_name']} already exists",
                fields=['customer_name'],
            ) from None

        logger.info("customer.created", extra={"customer": customer.customer_name})
        notify(NotificationCategory.NEW_CUSTOMERS, new_customer_message(customer), MessageType.CUSTOMER_UPDATE)
        return customer

    @classmethod
    def update(cls, customer, **data) -> Customer:
        """Edit a customer; a new name is propagated to orders and returns."""
        if data.get('customer_type') is not None:
            _check_type(data['customer_type'])
        if data.get('credit_limit') is not None:
            data['credit_limit'] = _credit_limit(data['credit_limit'])

        try:
            with transaction.atomic():
                customer = Customer.objects.select_for_update().get(pk=customer.pk)
                old_name = customer.customer_name
                for field in EDITABLE_FIELDS:
                    if data.get(field) not in (None, ''):
                        setattr(customer, field, data[field])
                customer.save()
                if customer.customer_name != old_name:
                    propagate_customer_rename(old_name, customer.customer_name)
        except IntegrityError:
            raise ValidationError(
                'DUPLICATE_NAME',
                message=f"Customer {data.get('customer_name')} already exists",
                fields=['customer_name'],
            ) from None

        logger.info("customer.updated", extra={"customer": customer.customer_name})
        return customer

    @classmethod
    def delete(cls, customer) -> None:
        name = customer.customer_name
        customer.delete()
        logger.info("customer.deleted", extra={"customer": name})

    @classmethod
    def get(cls, pk) -> Customer:
        try:
            return Customer.objects.get(pk=pk)
        except (Customer.DoesNotExist, ValueError, TypeError):
            raise NotFoundError('CUSTOMER_NOT_FOUND', customer_id=pk) from None

    @classmethod
    def list(cls):
        return Customer.objects.order_by('-created_at', '-id')
