from rest_framework import serializers
from .models import Order, OrderDetail, CustomerOrder


class OrderSerializer(serializers.ModelSerializer):
    customer_name = serializers.CharField(source='customer.customer_name', read_only=True, default=None)

    class Meta:
        model = Order
        fields = [
            'order_id', 'customer', 'customer_name', 'admin', 'order_date',
            'status', 'total_amount', 'created_at', 'updated_at'
        ]


class OrderDetailSerializer(serializers.ModelSerializer):
    product_name = serializers.CharField(source='product.product_name', read_only=True, default=None)

    class Meta:
        model = OrderDetail
        fields = ['id', 'order', 'product', 'product_name', 'quantity', 'price_at_purchase', 'created_at']


class CustomerOrderSerializer(serializers.ModelSerializer):
    class Meta:
        model = CustomerOrder
        fields = ['id', 'order', 'customer_name', 'customer_email', 'customer_address', 'shipping_required', 'created_at']


class PlaceOrderSerializer(serializers.Serializer):
    """Storefront order form"""
    customer_name = serializers.CharField(min_length=2, error_messages={'min_length': 'Name must be at least 2 characters'})
    customer_email = serializers.EmailField(error_messages={'invalid': 'Invalid email address'})
    customer_address = serializers.CharField(min_length=5, error_messages={'min_length': 'Address must be at least 5 characters'})
    shipping_required = serializers.BooleanField(default=True)
    product_sku = serializers.CharField()
    quantity = serializers.IntegerField(min_value=1, default=1, error_messages={'min_value': 'Quantity must be at least 1'})
