"""
HTTP API (Django REST Framework).

Views parse the request, call a service and render the result. Business
errors raised by services are rendered by ``exception_handler``:

    {"success": false, "message": "...", "code": "...", "data": {...}}

Enable it in the host project:

    REST_FRAMEWORK = {"EXCEPTION_HANDLER": "textileman.api.exception_handler"}
"""

import logging
import math

from django.core.paginator import EmptyPage, Page, PageNotAnInteger
from rest_framework import exceptions as drf_exceptions
from rest_framework import generics, permissions, status
from rest_framework.pagination import PageNumberPagination
from rest_framework.response import Response
from rest_framework.views import APIView, set_rollback
from rest_framework.views import exception_handler as drf_exception_handler

from textileman.conf import textileman_settings
from textileman.exceptions import TextilemanError
from textileman.models import Adjustment, Customer, NotificationMessage
from textileman.serializers import (
    AdjustmentInputSerializer,
    AdjustmentSerializer,
    CustomerInputSerializer,
    CustomerSerializer,
    NotificationMessageSerializer,
    NotificationSettingsSerializer,
    OrderInputSerializer,
    OrderSerializer,
    ProductInputSerializer,
    ProductSerializer,
    ReturnInputSerializer,
    ReturnRequestSerializer,
    StockInputSerializer,
    StockLotSerializer,
)
from textileman.services import (
    CustomerService,
    OrderWorkflow,
    ProductService,
    ReturnWorkflow,
    StockLedger,
)
from textileman.services import reports
from textileman.services.alerts import stock_alerts
from textileman.services.notifications import (
    get_notification_settings,
    update_notification_settings,
)

logger = logging.getLogger(__name__)


# ---------- Errors ----------

def exception_handler(exc, context):
    """Render every error as ``{"success": false, ...}``."""
    if isinstance(exc, TextilemanError):
        set_rollback()
        logger.warning(
            "api.rejected",
            extra={"code": exc.code, "view": type(context.get("view")).__name__},
        )
        return Response({"success": False, **exc.as_dict()}, status=exc.http_status)

    response = drf_exception_handler(exc, context)
    if response is not None:
        if isinstance(exc, drf_exceptions.ValidationError):
            response.data = {
                "success": False,
                "message": "Invalid request",
                "code": "INVALID_REQUEST",
                "errors": response.data,
            }
        else:
            response.data = {
                "success": False,
                "message": str(getattr(exc, "detail", exc)),
                "code": getattr(exc, "default_code", "error").upper(),
            }
        return response

    set_rollback()
    logger.exception("api.unhandled", extra={"view": type(context.get("view")).__name__})
    return Response(
        {"success": False, "message": "Server Error", "code": "SERVER_ERROR"},
        status=status.HTTP_500_INTERNAL_SERVER_ERROR,
    )


# ---------- Pagination ----------

class TextilemanPagination(PageNumberPagination):
    """
    ``?page=&limit=`` pagination.

    The list goes under the view's ``results_key`` next to a ``pagination``
    block. A page past the last one renders an empty list.
    """

    page_size_query_param = "limit"

    def get_page_size(self, request):
        self.page_size = textileman_settings.DEFAULT_PAGE_SIZE
        self.max_page_size = textileman_settings.MAX_PAGE_SIZE
        return super().get_page_size(request)

    def paginate_queryset(self, queryset, request, view=None):
        self.results_key = getattr(view, "results_key", "results")
        self.request = request
        paginator = self.django_paginator_class(queryset, self.get_page_size(request))
        page_number = self.get_page_number(request, paginator)
        try:
            self.page = paginator.page(page_number)
        except EmptyPage:
            number = int(page_number)
            if number < 1:
                raise drf_exceptions.NotFound("Invalid page.") from None
            self.page = Page([], number, paginator)
        except PageNotAnInteger:
            raise drf_exceptions.NotFound("Invalid page.") from None
        return list(self.page)

    def get_paginated_response(self, data):
        total_items = self.page.paginator.count
        per_page = self.page.paginator.per_page
        total_pages = math.ceil(total_items / per_page)
        return Response({
            "success": True,
            self.results_key: data,
            "pagination": {
                "current_page": self.page.number,
                "total_pages": total_pages,
                "total_items": total_items,
                "items_per_page": per_page,
                "has_next_page": self.page.number < total_pages,
                "has_prev_page": self.page.number > 1,
            },
        })


class BaseListView(generics.ListAPIView):
    permission_classes = [permissions.IsAuthenticated]
    pagination_class = TextilemanPagination
    results_key = "results"


def _input(serializer_class, request, partial=False) -> dict:
    ser = serializer_class(data=request.data, partial=partial)
    ser.is_valid(raise_exception=True)
    return dict(ser.validated_data)


# ---------- Orders ----------

class OrderListCreateView(BaseListView):
    """
    GET  order/?page=&limit=&customer=
    POST order/
    """

    serializer_class = OrderSerializer
    results_key = "orders"

    def get_queryset(self):
        return OrderWorkflow.list(customer=self.request.query_params.get("customer"))

    def list(self, request, *args, **kwargs):
        page = self.paginate_queryset(self.get_queryset())
        names = {order.customer for order in page}
        customers = {c.customer_name: c for c in Customer.objects.filter(customer_name__in=names)}
        ser = OrderSerializer(page, many=True, context={"request": request, "customers": customers})
        return self.get_paginated_response(ser.data)

    def post(self, request):
        data = _input(OrderInputSerializer, request)
        order = OrderWorkflow.create(
            customer=data.get("customer"),
            order_date=data.get("order_date"),
            delivery_date=data.get("delivery_date"),
            items=data.get("items"),
            status=data.get("status"),
            notes=data.get("notes", ""),
        )
        return Response(
            {"success": True, "message": "Order Created Successfully!", "order": OrderSerializer(order).data},
            status=status.HTTP_201_CREATED,
        )


class OrderDetailView(APIView):
    """
    GET/PUT/PATCH/DELETE order/<id>

    PUT and PATCH both take a partial patch; a ``status`` change moves stock.
    """

    permission_classes = [permissions.IsAuthenticated]

    def get(self, request, pk):
        return Response({"success": True, "order": OrderSerializer(OrderWorkflow.get(pk)).data})

    def put(self, request, pk):
        order = OrderWorkflow.get(pk)
        order = OrderWorkflow.update(order, **_input(OrderInputSerializer, request, partial=True))
        return Response({"success": True, "order": OrderSerializer(order).data})

    patch = put

    def delete(self, request, pk):
        OrderWorkflow.delete(OrderWorkflow.get(pk))
        return Response({"success": True, "message": "Order deleted"})


# ---------- Stock ----------

class StockListCreateView(BaseListView):
    """
    GET  stock/?stock_type=
    POST stock/
    """

    serializer_class = StockLotSerializer
    results_key = "stocks"

    def get_queryset(self):
        return StockLedger.list(stock_type=self.request.query_params.get("stock_type"))

    def post(self, request):
        data = _input(StockInputSerializer, request)
        lot = StockLedger.create(
            stock_type=data.get("stock_type"),
            variants=data.get("variants"),
            product=data.get("product"),
            details=data.get("details"),
            batch_number=data.get("batch_number"),
            quality_grade=data.get("quality_grade"),
            notes=data.get("notes", ""),
            status=data.get("status"),
        )
        return Response({"success": True, "stock": StockLotSerializer(lot).data}, status=status.HTTP_201_CREATED)


class StockDetailView(APIView):
    """GET/PUT/PATCH/DELETE stock/<id>: direct edits."""

    permission_classes = [permissions.IsAuthenticated]

    def get(self, request, pk):
        return Response({"success": True, "stock": StockLotSerializer(StockLedger.get(pk)).data})

    def put(self, request, pk):
        lot = StockLedger.update(StockLedger.get(pk), **_input(StockInputSerializer, request, partial=True))
        return Response({"success": True, "stock": StockLotSerializer(StockLedger.get(lot.pk)).data})

    patch = put

    def delete(self, request, pk):
        StockLedger.delete(StockLedger.get(pk))
        return Response({"success": True, "message": "Stock deleted"})


class StockAlertsView(APIView):
    """GET stock/alerts"""

    permission_classes = [permissions.IsAuthenticated]

    def get(self, request):
        alerts = stock_alerts()
        for alert in alerts:
            alert["minimum"] = str(alert["minimum"])
            for variant in alert["variants"]:
                variant["quantity"] = str(variant["quantity"])
        return Response({"success": True, "alerts": alerts})


class AdjustmentListCreateView(BaseListView):
    """
    GET  adjustment/?stock=
    POST adjustment/
    """

    serializer_class = AdjustmentSerializer
    results_key = "adjustments"

    def get_queryset(self):
        qs = Adjustment.objects.order_by("-created_at", "-id")
        stock = self.request.query_params.get("stock")
        if stock:
            qs = qs.filter(stock_id=stock)
        return qs

    def post(self, request):
        data = _input(AdjustmentInputSerializer, request)
        adjustment = StockLedger.adjust(
            StockLedger.get(data["stock"]),
            data["color"],
            data["new_quantity"],
            data["reason"],
        )
        return Response(
            {"success": True, "adjustment": AdjustmentSerializer(adjustment).data},
            status=status.HTTP_201_CREATED,
        )


# ---------- Customers ----------

class CustomerListCreateView(BaseListView):
    """
    GET  customer/
    POST customer/
    """

    serializer_class = CustomerSerializer
    results_key = "customers"

    def get_queryset(self):
        return CustomerService.list()

    def post(self, request):
        customer = CustomerService.create(**_input(CustomerInputSerializer, request))
        return Response(
            {"success": True, "customer": CustomerSerializer(customer).data},
            status=status.HTTP_201_CREATED,
        )


class CustomerDetailView(APIView):
    """GET/PUT/PATCH/DELETE customer/<id>"""

    permission_classes = [permissions.IsAuthenticated]

    def get(self, request, pk):
        return Response({"success": True, "customer": CustomerSerializer(CustomerService.get(pk)).data})

    def put(self, request, pk):
        customer = CustomerService.update(
            CustomerService.get(pk), **_input(CustomerInputSerializer, request, partial=True)
        )
        return Response({"success": True, "customer": CustomerSerializer(customer).data})

    patch = put

    def delete(self, request, pk):
        CustomerService.delete(CustomerService.get(pk))
        return Response({"success": True, "message": "Customer deleted"})


# ---------- Returns ----------

class ReturnListCreateView(BaseListView):
    """
    GET  returns/?customer=
    POST returns/
    """

    serializer_class = ReturnRequestSerializer
    results_key = "returns"

    def get_queryset(self):
        return ReturnWorkflow.list(customer=self.request.query_params.get("customer"))

    def post(self, request):
        data = _input(ReturnInputSerializer, request)
        ret = ReturnWorkflow.create(
            order=data.get("order"),
            product=data.get("product"),
            color=data.get("color"),
            quantity=data.get("quantity"),
            reason=data.get("reason"),
        )
        return Response(
            {"success": True, "return": ReturnRequestSerializer(ret).data},
            status=status.HTTP_201_CREATED,
        )


class ReturnDetailView(APIView):
    """GET/PUT/PATCH/DELETE returns/<id>; ``is_approved``/``is_rejected`` resolve it."""

    permission_classes = [permissions.IsAuthenticated]

    def get(self, request, pk):
        return Response({"success": True, "return": ReturnRequestSerializer(ReturnWorkflow.get(pk)).data})

    def put(self, request, pk):
        ret = ReturnWorkflow.update(ReturnWorkflow.get(pk), **_input(ReturnInputSerializer, request, partial=True))
        return Response({"success": True, "return": ReturnRequestSerializer(ret).data})

    patch = put

    def delete(self, request, pk):
        ReturnWorkflow.delete(ReturnWorkflow.get(pk))
        return Response({"success": True, "message": "Return deleted"})


# ---------- Products ----------

class ProductListCreateView(BaseListView):
    """
    GET  products/?category=
    POST products/
    """

    serializer_class = ProductSerializer
    results_key = "products"

    def get_queryset(self):
        return ProductService.list(category=self.request.query_params.get("category"))

    def post(self, request):
        product = ProductService.create(**_input(ProductInputSerializer, request))
        return Response(
            {"success": True, "product": ProductSerializer(product).data},
            status=status.HTTP_201_CREATED,
        )


class ProductDetailView(APIView):
    """GET/PUT/PATCH/DELETE products/<id>; a rename follows into stock and orders."""

    permission_classes = [permissions.IsAuthenticated]

    def get(self, request, pk):
        return Response({"success": True, "product": ProductSerializer(ProductService.get(pk)).data})

    def put(self, request, pk):
        product = ProductService.update(
            ProductService.get(pk), **_input(ProductInputSerializer, request, partial=True)
        )
        return Response({"success": True, "product": ProductSerializer(product).data})

    patch = put

    def delete(self, request, pk):
        ProductService.delete(ProductService.get(pk))
        return Response({"success": True, "message": "Product deleted"})


# ---------- Notifications ----------

class NotificationSettingsView(APIView):
    """GET/PUT notifications/settings"""

    permission_classes = [permissions.IsAuthenticated]

    def get(self, request):
        return Response({"success": True, "settings": get_notification_settings().as_dict()})

    def put(self, request):
        flags = _input(NotificationSettingsSerializer, request, partial=True)
        settings = update_notification_settings(**flags)
        return Response({"success": True, "settings": settings.as_dict()})


class NotificationMessageListView(BaseListView):
    """GET notifications/messages"""

    serializer_class = NotificationMessageSerializer
    results_key = "messages"

    def get_queryset(self):
        return NotificationMessage.objects.order_by("-created_at", "-id")


# ---------- Reports ----------

def _int_param(request, name):
    value = request.query_params.get(name)
    try:
        return int(value) if value else None
    except ValueError:
        raise drf_exceptions.ValidationError({name: "Must be an integer"}) from None


def _money(rows, *fields):
    return [{**row, **{f: str(row[f]) for f in fields}} for row in rows]


class DashboardView(APIView):
    """GET reports/dashboard?year="""

    permission_classes = [permissions.IsAuthenticated]

    def get(self, request):
        year = _int_param(request, "year")

        stats = reports.dashboard_stats()
        stats["total_revenue"] = str(stats["total_revenue"])
        stats["stock_by_type"] = {k: str(v) for k, v in stats["stock_by_type"].items()}
        return Response({
            "success": True,
            "data": stats,
            "monthly_sales": _money(reports.monthly_sales(year), "revenue"),
            "top_customers": _money(reports.top_customers(), "revenue"),
        })


class TopProductsView(APIView):
    """GET reports/top-products?limit="""

    permission_classes = [permissions.IsAuthenticated]

    def get(self, request):
        limit = _int_param(request, "limit") or 5
        rows = reports.top_products(limit=limit)
        return Response({"success": True, "products": _money(rows, "quantity", "revenue")})


class StockMovementView(APIView):
    """GET reports/stock-movement?year="""

    permission_classes = [permissions.IsAuthenticated]

    def get(self, request):
        rows = reports.stock_movement(_int_param(request, "year"))
        return Response({"success": True, "movement": _money(rows, "inbound", "outbound", "net")})


class MessageStatsView(APIView):
    """GET notifications/messages/today"""

    permission_classes = [permissions.IsAuthenticated]

    def get(self, request):
        stats = reports.today_message_stats()
        return Response({"success": True, "date": stats.pop("date"), "stats": stats})


class ProductRecentOrdersView(APIView):
    """GET products/<id>/recent-orders?limit="""

    permission_classes = [permissions.IsAuthenticated]

    def get(self, request, pk):
        product = ProductService.get(pk)
        limit = _int_param(request, "limit") or 5
        orders = reports.recent_orders_by_product(product, limit=limit)
        return Response({"success": True, "orders": OrderSerializer(orders, many=True).data})
