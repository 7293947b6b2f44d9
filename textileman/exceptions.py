"""
Exceptions for Textileman.

Every error carries a structured code for programmatic handling plus a
human-readable message. The class decides the HTTP status the API layer
answers with.
"""

from decimal import Decimal
from typing import Any


class BaseError(Exception):
    """
    Error with a code, a message and free-form context data.

    Usage:
        raise BusinessRuleViolation('INSUFFICIENT_STOCK', available=20, requested=30)

    When no message is given, the class default for the code is used.
    """

    _default_messages: dict[str, str] = {}

    def __init__(self, code: str, message: str | None = None, **data):
        self.code = code
        self.message = message or self._default_messages.get(code, code)
        self.data = data
        super().__init__(self.message)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.code!r}, {self.message!r})"

    def as_dict(self) -> dict[str, Any]:
        """Serialize to dict (useful for APIs)."""
        return {
            'code': self.code,
            'message': self.message,
            'data': {
                k: str(v) if isinstance(v, Decimal) else v
                for k, v in self.data.items()
            }
        }


class TextilemanError(BaseError):
    """Root of the Textileman error taxonomy."""

    http_status = 500


class ValidationError(TextilemanError):
    """Missing or malformed input."""

    http_status = 400

    _default_messages = {
        'MISSING_FIELDS': 'Missing required fields',
        'INVALID_QUANTITY': 'Quantity must be a non-negative number',
        'INVALID_ITEM': 'Each order item must include product, color and numeric quantity',
        'INVALID_STATUS': 'Invalid status for this operation',
        'INVALID_STOCK_DETAILS': 'Invalid stock details',
        'DUPLICATE_COLOR': 'Color appears more than once in the lot',
        'ADJUSTMENT_NOT_INCREASE': 'New quantity must be greater than previous quantity',
        'REASON_REQUIRED': 'Reason is required',
        'INVALID_FIELD': 'Invalid field value',
        'DUPLICATE_NAME': 'Name is already in use',
    }


class NotFoundError(TextilemanError):
    """A referenced entity does not exist."""

    http_status = 404

    _default_messages = {
        'ORDER_NOT_FOUND': 'Order not found',
        'CUSTOMER_NOT_FOUND': 'Customer not found',
        'STOCK_NOT_FOUND': 'Stock not found',
        'RETURN_NOT_FOUND': 'Return not found',
        'PRODUCT_NOT_FOUND': 'Product not found',
    }


class BusinessRuleViolation(TextilemanError):
    """
    The request is well formed but a business rule rejects it.

    Usage:
        try:
            OrderWorkflow.create(...)
        except BusinessRuleViolation as e:
            if e.code == 'INSUFFICIENT_STOCK':
                print(f"Only {e.available} m left")
    """

    http_status = 400

    _default_messages = {
        'CREDIT_LIMIT_EXCEEDED': 'Order would exceed credit limit',
        'INSUFFICIENT_STOCK': 'Insufficient stock',
        'COLOR_NOT_FOUND': 'Color not found in selected stock',
        'STOCK_NOT_FOUND': 'Stock not found for order item',
        'RETURN_ALREADY_RESOLVED': 'Return has already been resolved',
    }

    @property
    def available(self) -> Decimal:
        """Shortcut for data['available']."""
        return self.data.get('available', Decimal('0'))

    @property
    def requested(self) -> Decimal:
        """Shortcut for data['requested']."""
        return self.data.get('requested', Decimal('0'))


class NotificationDeliveryFailure(TextilemanError):
    """Raised by senders. The dispatcher downgrades it to an audit entry."""

    _default_messages = {
        'SEND_FAILED': 'Notification could not be delivered',
        'NOT_CONFIGURED': 'Notification sender is not configured',
    }
