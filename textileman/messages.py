"""
WhatsApp message texts.

Pure functions: each takes the affected object and returns the text to send.
Links point at ``CLIENT_URL`` when it is configured.
"""

from django.utils import timezone

from textileman.conf import textileman_settings


def _link(path: str, label: str = "View details") -> str:
    base = textileman_settings.CLIENT_URL
    if not base:
        return ""
    return f"\n\n{label}: {base.rstrip('/')}/{path}"


def _items(order) -> str:
    return ", ".join(f"{item.product} ({item.quantity})" for item in order.items.all())


def _variants(lot) -> str:
    return ", ".join(f"{v.color} ({v.quantity} {v.unit})" for v in lot.variants.all())


# Orders

def order_message(order, action: str) -> str:
    """action: 'created', 'updated' or 'deleted'."""
    headline = {
        "created": "🆕 New Order Created!",
        "updated": "✏️ Order Updated!",
        "deleted": "🗑 Order Deleted!",
    }[action]
    text = (
        f"{headline}\n\n"
        f"🆔 Order ID: *{order.pk}*\n"
        f"👤 Customer: {order.customer}\n"
        f"📋 Status: {order.status}\n"
        f"📅 Order Date: {order.order_date}\n"
        f"🚚 Delivery Date: {order.delivery_date}\n"
        f"📦 Items: {_items(order)}"
    )
    if action != "deleted":
        text += _link(f"orders/{order.pk}")
    return text


# Stock

def stock_message(lot, action: str) -> str:
    headline = {
        "created": "📦 New Stock Added!",
        "updated": "✏️ Stock Updated!",
        "deleted": "🗑 Stock Deleted!",
    }[action]
    text = (
        f"{headline}\n\n"
        f"🏷 Stock Type: {lot.stock_type}\n"
        f"🧵 Product: {lot.product}\n"
        f"📋 Status: {lot.status}\n"
        f"🎨 Variants: {_variants(lot)}"
    )
    if action != "deleted":
        text += _link(f"stock/{lot.pk}")
    return text


def stock_alerts_message(alerts: list[dict]) -> str:
    """Summary of low/out lots, as returned by ``services.alerts.stock_alerts``."""
    lines = []
    for alert in alerts:
        variants = ", ".join(
            f"{v['color']}: {v['quantity']} {v['unit']}" for v in alert["variants"]
        )
        lines.append(
            f"📦 *{alert['product']}* ({alert['stock_type_label']})\n"
            f"   {variants}\n"
            f"   Status: {alert['severity'].upper()}"
        )
    stamp = timezone.localtime().strftime("%Y-%m-%d %H:%M")
    return "🚨 *Stock Alerts* 🚨\n\n" + "\n\n".join(lines) + f"\n\n📅 Last Updated: {stamp}"


# Customers

def new_customer_message(customer) -> str:
    return (
        "🆕 New Customer Added!\n\n"
        f"👤 Name: {customer.customer_name}\n"
        f"🏷 Type: {customer.customer_type}\n"
        f"📧 Email: {customer.email}\n"
        f"📞 Phone: {customer.phone}\n"
        f"🏙 City: {customer.city}\n"
        f"💳 Credit Limit: {customer.credit_limit}\n"
        f"📍 Address: {customer.address}"
        + _link(f"customers/{customer.pk}")
    )


# Returns

def return_message(ret, action: str) -> str:
    headline = {
        "created": "📦 New Return Request!",
        "approved": "✅ Return Approved!",
        "rejected": "❌ Return Rejected!",
        "updated": "✏️ Return Updated!",
        "deleted": "🗑 Return Deleted!",
    }[action]
    text = (
        f"{headline}\n\n"
        f"🆔 Return ID: *{ret.return_id}*\n"
        f"👤 Customer: {ret.customer}\n"
        f"🛍 Product: {ret.product}\n"
        f"🎨 Color: {ret.color}\n"
        f"📏 Qty (m): {ret.quantity}\n"
        f"💬 Reason: {ret.reason}"
    )
    if action != "deleted":
        text += _link("returns/")
    return text


# Products

def product_message(product, action: str) -> str:
    headline = {
        "created": "🆕 New product added!",
        "updated": "✏️ Product Updated!",
        "deleted": "🗑️ Product Deleted!",
    }[action]
    text = (
        f"{headline}\n\n"
        f"📦 Product: *{product.name}*\n"
        f"🆔 SKU: {product.sku}\n"
        f"📂 Category: {product.category}"
    )
    if action != "deleted":
        text += _link(f"products/{product.pk}")
    return text
