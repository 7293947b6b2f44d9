"""
Enums for Textileman models.
"""

from django.db import models
from django.utils.translation import gettext_lazy as _


class StockType(models.TextChoices):
    """
    Kind of stock lot. Fixed when the lot is created.

    GRAY:    Unprocessed fabric bought from a factory through an agent.
    FACTORY: Fabric sitting at a processing factory (dyeing, printing...).
    DESIGN:  Finished, designed fabric stored in a warehouse.
    """
    GRAY = 'Gray Stock', _('Gray Stock')
    FACTORY = 'Factory Stock', _('Factory Stock')
    DESIGN = 'Design Stock', _('Design Stock')


class StockStatus(models.TextChoices):
    """Lot status. available/low/out are derived from quantity."""
    AVAILABLE = 'available', _('Available')
    LOW = 'low', _('Low')
    OUT = 'out', _('Out of stock')
    PROCESSING = 'processing', _('Processing')          # Operator-set
    QUALITY_CHECK = 'quality_check', _('Quality check')  # Operator-set


class Unit(models.TextChoices):
    METERS = 'METERS', _('Meters')
    SETS = 'SETS', _('Sets')


class QualityGrade(models.TextChoices):
    A_PLUS = 'A+', 'A+'
    A = 'A', 'A'
    B_PLUS = 'B+', 'B+'
    B = 'B', 'B'


class ProcessingStage(models.TextChoices):
    DYEING = 'Dyeing', _('Dyeing')
    PRINTING = 'Printing', _('Printing')
    FINISHING = 'Finishing', _('Finishing')
    QUALITY_CHECK = 'Quality Check', _('Quality Check')


class Design(models.TextChoices):
    FLORAL = 'Floral Print', _('Floral Print')
    ABSTRACT = 'Abstract Print', _('Abstract Print')
    GEOMETRIC = 'Geometric Design', _('Geometric Design')
    SOLID = 'Solid Colors', _('Solid Colors')


class Warehouse(models.TextChoices):
    MUMBAI = 'Main Warehouse - Mumbai', _('Main Warehouse - Mumbai')
    DELHI = 'Secondary Warehouse - Delhi', _('Secondary Warehouse - Delhi')
    BANGALORE = 'Regional Warehouse - Bangalore', _('Regional Warehouse - Bangalore')


class OrderStatus(models.TextChoices):
    """
    Order lifecycle status.

    PENDING:   No stock effect (still counts against customer credit).
    CONFIRMED: Stock has been deducted for every item.
    """
    PENDING = 'pending', _('Pending')
    CONFIRMED = 'confirmed', _('Confirmed')


class CustomerType(models.TextChoices):
    WHOLESALE = 'Wholesale', _('Wholesale')
    RETAIL = 'Retail', _('Retail')


class ProductCategory(models.TextChoices):
    COTTON = 'Cotton Fabrics', _('Cotton Fabrics')
    SILK = 'Silk Fabrics', _('Silk Fabrics')
    POLYESTER = 'Polyester Fabrics', _('Polyester Fabrics')
    BLENDED = 'Blended Fabrics', _('Blended Fabrics')
    DESIGNER_PRINTS = 'Designer Prints', _('Designer Prints')
    SOLID_COLORS = 'Solid Colors', _('Solid Colors')
    TEXTURED = 'Textured Fabrics', _('Textured Fabrics')
    SEASONAL = 'Seasonal Collection', _('Seasonal Collection')


class NotificationCategory(models.TextChoices):
    """Event categories, each gated by a NotificationSettings toggle."""
    ORDER_UPDATES = 'order_updates', _('Order updates')
    STOCK_ALERTS = 'stock_alerts', _('Stock alerts')
    LOW_STOCK_WARNINGS = 'low_stock_warnings', _('Low stock warnings')
    NEW_CUSTOMERS = 'new_customers', _('New customers')
    RETURN_REQUESTS = 'return_requests', _('Return requests')
    PRODUCT_UPDATES = 'product_updates', _('Product updates')


class MessageType(models.TextChoices):
    ORDER_UPDATE = 'order_update', _('Order update')
    STOCK_ALERT = 'stock_alert', _('Stock alert')
    RETURN_REQUEST = 'return_request', _('Return request')
    PRODUCT_UPDATE = 'product_update', _('Product update')
    CUSTOMER_UPDATE = 'customer_update', _('Customer update')


class DeliveryStatus(models.TextChoices):
    DELIVERED = 'Delivered', _('Delivered')
    NOT_DELIVERED = 'Not Delivered', _('Not Delivered')


class RecipientRole(models.TextChoices):
    OWNER = 'owner', _('Owner')
    MANAGER = 'manager', _('Manager')
    SALES = 'sales', _('Sales')
    INVENTORY_HEAD = 'inventory head', _('Inventory head')
