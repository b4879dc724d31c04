"""
URL routing for order API endpoints.

All endpoints require an authenticated user.
"""

from django.urls import path

from apps.web.orders import views

app_name = "orders"

urlpatterns = [
    path("orders", views.orders, name="order_list"),
    path("orders/<int:order_id>", views.order_detail, name="order_detail"),
    path("orders/<int:order_id>/status", views.order_status, name="order_status"),
    path("orders/<int:order_id>/cancel", views.order_cancel, name="order_cancel"),
]
