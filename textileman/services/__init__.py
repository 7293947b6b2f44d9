"""
Textileman services — modular organization of business operations.

    from textileman.services import OrderWorkflow, StockLedger, ReturnWorkflow
"""

from textileman.services.catalog import ProductService
from textileman.services.customers import CustomerService
from textileman.services.orders import OrderWorkflow
from textileman.services.returns import ReturnWorkflow
from textileman.services.stock import StockLedger

__all__ = [
    'OrderWorkflow',
    'StockLedger',
    'ReturnWorkflow',
    'CustomerService',
    'ProductService',
]
