from django.contrib import admin
from .models import Shipment


@admin.register(Shipment)
class ShipmentAdmin(admin.ModelAdmin):
    list_display = ['tracking_number', 'order', 'courier_service', 'status', 'estimated_delivery_date']
    list_filter = ['status', 'courier_service']
    search_fields = ['tracking_number', 'shipping_address']
