"""
Small builders shared by the test modules.
"""

from decimal import Decimal


def item(color, quantity, product='Cotton Base', price='10', **extra):
    """Order item dict."""
    return {'product': product, 'color': color, 'quantity': quantity, 'price_per_meter': price, **extra}


def variant_qty(lot, color) -> Decimal:
    """Current quantity of a lot's variant, read from the database."""
    return lot.variants.get(color=color).quantity
