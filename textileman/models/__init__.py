"""
Textileman Models.

Core models for textile trading:
- StockLot / Variant: Fabric lots and their per-color quantities
- Order / OrderItem: Customer orders, deducting stock when confirmed
- Customer: Buyers with a credit limit
- Adjustment: Immutable ledger of manual stock increases
- ReturnRequest: Return requests against orders
- Product: Catalog
- NotificationSettings / NotificationRecipient / NotificationMessage
"""

from textileman.models.adjustment import Adjustment
from textileman.models.customer import Customer
from textileman.models.enums import (
    CustomerType,
    DeliveryStatus,
    MessageType,
    NotificationCategory,
    OrderStatus,
    ProductCategory,
    QualityGrade,
    StockStatus,
    StockType,
    Unit,
)
from textileman.models.notification import (
    NotificationMessage,
    NotificationRecipient,
    NotificationSettings,
)
from textileman.models.order import Order, OrderItem
from textileman.models.product import Product
from textileman.models.returns import ReturnRequest
from textileman.models.stock import StockLot, Variant

__all__ = [
    'StockType',
    'StockStatus',
    'OrderStatus',
    'CustomerType',
    'ProductCategory',
    'QualityGrade',
    'Unit',
    'NotificationCategory',
    'MessageType',
    'DeliveryStatus',
    'StockLot',
    'Variant',
    'Order',
    'OrderItem',
    'Customer',
    'Adjustment',
    'ReturnRequest',
    'Product',
    'NotificationSettings',
    'NotificationRecipient',
    'NotificationMessage',
]
