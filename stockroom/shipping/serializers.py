from rest_framework import serializers
from .models import Shipment


class ShipmentSerializer(serializers.ModelSerializer):
    class Meta:
        model = Shipment
        fields = [
            'shipping_id', 'order', 'courier_service', 'shipping_address', 'tracking_number',
            'estimated_delivery_date', 'status', 'created_at', 'updated_at'
        ]
