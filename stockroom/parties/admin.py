from django.contrib import admin
from .models import Customer, Supplier


@admin.register(Customer)
class CustomerAdmin(admin.ModelAdmin):
    list_display = ['customer_name', 'contact', 'type', 'status', 'total_spent', 'last_order', 'created_at']
    list_filter = ['type', 'status', 'created_at']
    search_fields = ['customer_name', 'contact']
    ordering = ['customer_name']


@admin.register(Supplier)
class SupplierAdmin(admin.ModelAdmin):
    list_display = ['supplier_name', 'contact', 'status', 'created_at']
    list_filter = ['status', 'created_at']
    search_fields = ['supplier_name', 'contact', 'address']
    ordering = ['supplier_name']
