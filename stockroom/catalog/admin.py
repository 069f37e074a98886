from django.contrib import admin
from .models import Product


@admin.register(Product)
class ProductAdmin(admin.ModelAdmin):
    list_display = ['sku', 'product_name', 'category', 'price', 'stock', 'status', 'updated_at']
    list_filter = ['status', 'category']
    search_fields = ['sku', 'product_name', 'category']
    ordering = ['product_name']
