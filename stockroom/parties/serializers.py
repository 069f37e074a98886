from rest_framework import serializers
from .models import Customer, Supplier


class CustomerSerializer(serializers.ModelSerializer):
    class Meta:
        model = Customer
        fields = [
            'customer_id', 'customer_name', 'contact', 'type', 'status',
            'total_spent', 'last_order', 'created_at', 'updated_at'
        ]


class SupplierSerializer(serializers.ModelSerializer):
    class Meta:
        model = Supplier
        fields = ['supplier_id', 'supplier_name', 'contact', 'address', 'status', 'created_at', 'updated_at']
