from django.urls import path
from .views import customer_order_create, customer_order_products

urlpatterns = [
    path('customer-orders/', customer_order_create, name='customer-order-create'),
    path('customer-orders/products/', customer_order_products, name='customer-order-products'),
]
