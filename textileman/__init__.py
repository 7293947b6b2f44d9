"""
Django Textileman — Textile trading back office.

Orders reserve fabric from stock lots and draw on customer credit.

Usage:
    from textileman import OrderWorkflow, BusinessRuleViolation

    order = OrderWorkflow.create('Sharma Textiles', today, next_week, items, status='confirmed')
    OrderWorkflow.update(order, status='pending')   # puts the fabric back
"""


def __getattr__(name):
    """Lazy import to avoid circular imports during app loading."""
    if name == 'OrderWorkflow':
        from textileman.services.orders import OrderWorkflow
        return OrderWorkflow
    elif name == 'StockLedger':
        from textileman.services.stock import StockLedger
        return StockLedger
    elif name == 'ReturnWorkflow':
        from textileman.services.returns import ReturnWorkflow
        return ReturnWorkflow
    elif name == 'CustomerService':
        from textileman.services.customers import CustomerService
        return CustomerService
    elif name == 'ProductService':
        from textileman.services.catalog import ProductService
        return ProductService
    elif name == 'derive_status':
        from textileman.status import derive_status
        return derive_status
    elif name in ('TextilemanError', 'ValidationError', 'NotFoundError',
                  'BusinessRuleViolation', 'NotificationDeliveryFailure'):
        from textileman import exceptions
        return getattr(exceptions, name)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = [
    'OrderWorkflow',
    'StockLedger',
    'ReturnWorkflow',
    'CustomerService',
    'ProductService',
    'derive_status',
    'TextilemanError',
    'ValidationError',
    'NotFoundError',
    'BusinessRuleViolation',
    'NotificationDeliveryFailure',
]

__version__ = '0.1.0'
