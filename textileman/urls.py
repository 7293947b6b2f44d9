from django.urls import path

from textileman.api import (
    AdjustmentListCreateView,
    CustomerDetailView,
    CustomerListCreateView,
    DashboardView,
    MessageStatsView,
    NotificationMessageListView,
    NotificationSettingsView,
    OrderDetailView,
    OrderListCreateView,
    ProductDetailView,
    ProductListCreateView,
    ProductRecentOrdersView,
    ReturnDetailView,
    ReturnListCreateView,
    StockAlertsView,
    StockDetailView,
    StockListCreateView,
    StockMovementView,
    TopProductsView,
)

app_name = "textileman"

urlpatterns = [
    path("order/", OrderListCreateView.as_view(), name="order-list"),
    path("order/<int:pk>", OrderDetailView.as_view(), name="order-detail"),
    path("stock/", StockListCreateView.as_view(), name="stock-list"),
    path("stock/alerts", StockAlertsView.as_view(), name="stock-alerts"),
    path("stock/<int:pk>", StockDetailView.as_view(), name="stock-detail"),
    path("adjustment/", AdjustmentListCreateView.as_view(), name="adjustment-list"),
    path("customer/", CustomerListCreateView.as_view(), name="customer-list"),
    path("customer/<int:pk>", CustomerDetailView.as_view(), name="customer-detail"),
    path("returns/", ReturnListCreateView.as_view(), name="return-list"),
    path("returns/<int:pk>", ReturnDetailView.as_view(), name="return-detail"),
    path("products/", ProductListCreateView.as_view(), name="product-list"),
    path("products/<int:pk>", ProductDetailView.as_view(), name="product-detail"),
    path("products/<int:pk>/recent-orders", ProductRecentOrdersView.as_view(), name="product-recent-orders"),
    path("notifications/settings", NotificationSettingsView.as_view(), name="notification-settings"),
    path("notifications/messages", NotificationMessageListView.as_view(), name="notification-messages"),
    path("notifications/messages/today", MessageStatsView.as_view(), name="notification-message-stats"),
    path("reports/dashboard", DashboardView.as_view(), name="dashboard"),
    path("reports/top-products", TopProductsView.as_view(), name="top-products"),
    path("reports/stock-movement", StockMovementView.as_view(), name="stock-movement"),
]
