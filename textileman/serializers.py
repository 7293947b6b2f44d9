"""
API serializers.

Output serializers render models. Input serializers only coerce types;
business validation (with its error codes) belongs to the services.
"""

from rest_framework import serializers

from textileman.models import (
    Adjustment,
    Customer,
    NotificationMessage,
    Order,
    OrderItem,
    Product,
    ReturnRequest,
    StockLot,
    Variant,
)
from textileman.models.enums import NotificationCategory
from textileman.services.credit import credit_summary


# ---------- Stock ----------

class VariantSerializer(serializers.ModelSerializer):
    class Meta:
        model = Variant
        fields = ["id", "color", "quantity", "unit"]


class StockLotSerializer(serializers.ModelSerializer):
    variants = VariantSerializer(many=True, read_only=True)
    total_quantity = serializers.DecimalField(max_digits=14, decimal_places=3, read_only=True)

    class Meta:
        model = StockLot
        fields = [
            "id",
            "stock_type",
            "status",
            "product",
            "details",
            "batch_number",
            "quality_grade",
            "notes",
            "variants",
            "total_quantity",
            "created_at",
            "updated_at",
        ]


class StockInputSerializer(serializers.Serializer):
    stock_type = serializers.CharField(required=False)
    status = serializers.CharField(required=False, allow_null=True)
    product = serializers.CharField(required=False)
    details = serializers.DictField(required=False)
    batch_number = serializers.CharField(required=False)
    quality_grade = serializers.CharField(required=False)
    notes = serializers.CharField(required=False, allow_blank=True)
    variants = serializers.ListField(child=serializers.DictField(), required=False)


class AdjustmentSerializer(serializers.ModelSerializer):
    class Meta:
        model = Adjustment
        fields = [
            "id",
            "stock",
            "product",
            "stock_type",
            "color",
            "prev_quantity",
            "new_quantity",
            "reason",
            "created_at",
        ]


class AdjustmentInputSerializer(serializers.Serializer):
    stock = serializers.IntegerField()
    color = serializers.CharField()
    new_quantity = serializers.DecimalField(max_digits=12, decimal_places=3)
    reason = serializers.CharField(required=False, allow_blank=True, default="")


# ---------- Orders ----------

class OrderItemSerializer(serializers.ModelSerializer):
    line_total = serializers.DecimalField(max_digits=18, decimal_places=2, read_only=True)

    class Meta:
        model = OrderItem
        fields = ["id", "product", "color", "quantity", "unit", "price_per_meter", "stock", "line_total"]


class OrderSerializer(serializers.ModelSerializer):
    items = OrderItemSerializer(many=True, read_only=True)
    total = serializers.DecimalField(max_digits=18, decimal_places=2, read_only=True)

    class Meta:
        model = Order
        fields = [
            "id",
            "customer",
            "status",
            "order_date",
            "delivery_date",
            "notes",
            "items",
            "total",
            "created_at",
            "updated_at",
        ]

    def to_representation(self, instance):
        data = super().to_representation(instance)
        customers = self.context.get("customers")
        if customers is not None:
            customer = customers.get(instance.customer)
            data["customer_info"] = CustomerInfoSerializer(customer).data if customer else None
        return data


class OrderInputSerializer(serializers.Serializer):
    customer = serializers.CharField(required=False)
    status = serializers.CharField(required=False, allow_null=True)
    order_date = serializers.DateField(required=False)
    delivery_date = serializers.DateField(required=False)
    notes = serializers.CharField(required=False, allow_blank=True)
    items = serializers.ListField(child=serializers.DictField(), required=False)


# ---------- Customers ----------

class CustomerInfoSerializer(serializers.ModelSerializer):
    class Meta:
        model = Customer
        fields = ["id", "customer_name", "customer_type", "email", "phone", "city"]


class CustomerSerializer(serializers.ModelSerializer):
    """Customer with credit figures computed on read."""

    class Meta:
        model = Customer
        fields = [
            "id",
            "customer_name",
            "customer_type",
            "email",
            "phone",
            "city",
            "address",
            "credit_limit",
            "created_at",
            "updated_at",
        ]

    def to_representation(self, instance):
        data = super().to_representation(instance)
        summary = credit_summary(instance)
        data["total_order_value"] = str(summary["total_order_value"])
        data["remaining_credit"] = str(summary["remaining_credit"])
        data["credit_exceeded"] = summary["credit_exceeded"]
        return data


class CustomerInputSerializer(serializers.Serializer):
    customer_name = serializers.CharField(required=False)
    customer_type = serializers.CharField(required=False)
    email = serializers.EmailField(required=False)
    phone = serializers.CharField(required=False)
    city = serializers.CharField(required=False)
    address = serializers.CharField(required=False)
    credit_limit = serializers.DecimalField(max_digits=14, decimal_places=2, required=False)


# ---------- Returns ----------

class ReturnRequestSerializer(serializers.ModelSerializer):
    class Meta:
        model = ReturnRequest
        fields = [
            "id",
            "return_id",
            "order",
            "customer",
            "product",
            "color",
            "quantity",
            "reason",
            "is_approved",
            "is_rejected",
            "created_at",
            "updated_at",
        ]


class ReturnInputSerializer(serializers.Serializer):
    order = serializers.IntegerField(required=False)
    product = serializers.CharField(required=False)
    color = serializers.CharField(required=False)
    quantity = serializers.DecimalField(max_digits=12, decimal_places=3, required=False)
    reason = serializers.CharField(required=False, allow_blank=True)
    is_approved = serializers.BooleanField(required=False)
    is_rejected = serializers.BooleanField(required=False)


# ---------- Products ----------

class ProductSerializer(serializers.ModelSerializer):
    class Meta:
        model = Product
        fields = ["id", "name", "sku", "category", "unit", "description", "created_at", "updated_at"]


class ProductInputSerializer(serializers.Serializer):
    name = serializers.CharField(required=False)
    sku = serializers.CharField(required=False, allow_blank=True)
    category = serializers.CharField(required=False)
    unit = serializers.CharField(required=False)
    description = serializers.CharField(required=False, allow_blank=True)


# ---------- Notifications ----------

class NotificationSettingsSerializer(serializers.Serializer):
    """One nullable boolean per category; null leaves the toggle as it is."""

    def get_fields(self):
        return {
            category: serializers.BooleanField(required=False, allow_null=True)
            for category in NotificationCategory.values
        }

    def to_representation(self, instance):
        return instance.as_dict()


class NotificationMessageSerializer(serializers.ModelSerializer):
    class Meta:
        model = NotificationMessage
        fields = ["id", "message", "type", "sent_to_count", "status", "created_at"]
