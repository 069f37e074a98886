from django.contrib import admin
from .models import Order, OrderDetail, CustomerOrder


class OrderDetailInline(admin.TabularInline):
    model = OrderDetail
    extra = 0


@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    list_display = ['order_id', 'customer', 'order_date', 'status', 'total_amount']
    list_filter = ['status', 'order_date']
    search_fields = ['order_id', 'customer__customer_name']
    inlines = [OrderDetailInline]


@admin.register(CustomerOrder)
class CustomerOrderAdmin(admin.ModelAdmin):
    list_display = ['customer_name', 'customer_email', 'shipping_required', 'order', 'created_at']
    list_filter = ['shipping_required', 'created_at']
    search_fields = ['customer_name', 'customer_email']
