"""
Return requests.

Approving or rejecting a return only records the decision: stock and
customer credit are left as they are.
"""

import logging
from decimal import Decimal, InvalidOperation

from django.db import IntegrityError, transaction

from textileman.exceptions import BusinessRuleViolation, NotFoundError, ValidationError
from textileman.messages import return_message
from textileman.models.enums import MessageType, NotificationCategory
from textileman.models.order import Order
from textileman.models.returns import ReturnRequest
from textileman.services.notifications import notify

logger = logging.getLogger('textileman')

EDITABLE_FIELDS = ('product', 'color', 'quantity', 'reason')

RETURN_ID_ATTEMPTS = 3


def _quantity(value) -> Decimal:
    try:
        quantity = Decimal(str(value))
    except (InvalidOperation, TypeError, ValueError):
        raise ValidationError('INVALID_QUANTITY') from None
    if quantity <= 0:
        raise ValidationError('INVALID_QUANTITY', requested=quantity)
    return quantity


def _notify(ret, action):
    notify(NotificationCategory.RETURN_REQUESTS, return_message(ret, action), MessageType.RETURN_REQUEST)


class ReturnWorkflow:
    """Return request lifecycle."""

    @classmethod
    def create(cls, order, product, color, quantity, reason) -> ReturnRequest:
        """
        Open a return against ``order`` (an Order or its pk).

        The customer is copied from the order.

        Raises:
            ValidationError: MISSING_FIELDS, INVALID_QUANTITY
            NotFoundError('ORDER_NOT_FOUND')
        """
        missing = [
            name for name, value in (
                ('order', order),
                ('product', product),
                ('color', color),
                ('reason', reason),
            ) if not value
        ]
        if missing or quantity in (None, ''):
            raise ValidationError('MISSING_FIELDS', fields=missing or ['quantity'])
        quantity = _quantity(quantity)

        order_id = order.pk if isinstance(order, Order) else order
        try:
            order = Order.objects.get(pk=order_id)
        except (Order.DoesNotExist, ValueError, TypeError):
            raise NotFoundError('ORDER_NOT_FOUND', order_id=order_id) from None

        for attempt in range(RETURN_ID_ATTEMPTS):
            try:
                with transaction.atomic():
                    ret = ReturnRequest.objects.create(
                        return_id=ReturnRequest.next_return_id(),
                        order=order,
                        customer=order.customer,
                        product=product,
                        color=color,
                        quantity=quantity,
                        reason=reason,
                    )
                break
            except IntegrityError:
                # a concurrent create took the same id
                if attempt == RETURN_ID_ATTEMPTS - 1:
                    raise
                logger.warning("return.id_taken", extra={"order_id": order.pk, "attempt": attempt + 1})

        logger.info(
            "return.created",
            extra={"return_id": ret.return_id, "order_id": order.pk, "qty": str(quantity)},
        )
        _notify(ret, 'created')
        return ret

    @classmethod
    def _resolve(cls, ret, approve: bool) -> ReturnRequest:
        with transaction.atomic():
            ret = ReturnRequest.objects.select_for_update().get(pk=ret.pk)
            if (approve and ret.is_approved) or (not approve and ret.is_rejected):
                return ret
            if ret.is_resolved:
                raise BusinessRuleViolation(
                    'RETURN_ALREADY_RESOLVED',
                    return_id=ret.return_id,
                    approved=ret.is_approved,
                    rejected=ret.is_rejected,
                )
            if approve:
                ret.is_approved = True
            else:
                ret.is_rejected = True
            ret.save(update_fields=['is_approved', 'is_rejected', 'updated_at'])

        logger.info(
            "return.resolved",
            extra={"return_id": ret.return_id, "approved": ret.is_approved},
        )
        _notify(ret, 'approved' if approve else 'rejected')
        return ret

    @classmethod
    def approve(cls, ret) -> ReturnRequest:
        """
        Raises:
            BusinessRuleViolation('RETURN_ALREADY_RESOLVED'): if rejected
        """
        return cls._resolve(ret, approve=True)

    @classmethod
    def reject(cls, ret) -> ReturnRequest:
        """
        Raises:
            BusinessRuleViolation('RETURN_ALREADY_RESOLVED'): if approved
        """
        return cls._resolve(ret, approve=False)

    @classmethod
    def update(cls, ret, **patch) -> ReturnRequest:
        """
        Edit a return. ``is_approved=True`` / ``is_rejected=True`` in the
        patch approve or reject it.
        """
        approve = patch.pop('is_approved', None)
        reject = patch.pop('is_rejected', None)
        if 'quantity' in patch and patch['quantity'] is not None:
            patch['quantity'] = _quantity(patch['quantity'])

        changed = [f for f in EDITABLE_FIELDS if patch.get(f) is not None]
        if changed:
            with transaction.atomic():
                ret = ReturnRequest.objects.select_for_update().get(pk=ret.pk)
                for field in changed:
                    setattr(ret, field, patch[field])
                ret.save()
            logger.info("return.updated", extra={"return_id": ret.return_id, "fields": changed})

        if approve:
            return cls.approve(ret)
        if reject:
            return cls.reject(ret)
        if changed:
            _notify(ret, 'updated')
        return ret

    @classmethod
    def delete(cls, ret) -> None:
        message = return_message(ret, 'deleted')
        return_id = ret.return_id
        ret.delete()
        logger.info("return.deleted", extra={"return_id": return_id})
        notify(NotificationCategory.RETURN_REQUESTS, message, MessageType.RETURN_REQUEST)

    @classmethod
    def get(cls, pk) -> ReturnRequest:
        try:
            return ReturnRequest.objects.get(pk=pk)
        except (ReturnRequest.DoesNotExist, ValueError, TypeError):
            raise NotFoundError('RETURN_NOT_FOUND', return_id=pk) from None

    @classmethod
    def list(cls, customer=None):
        qs = ReturnRequest.objects.order_by('-created_at', '-id')
        if customer:
            qs = qs.filter(customer=customer)
        return qs
