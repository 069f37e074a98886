from rest_framework import serializers
from .models import Product


class ProductSerializer(serializers.ModelSerializer):
    class Meta:
        model = Product
        fields = ['sku', 'product_name', 'category', 'price', 'stock', 'status', 'created_at', 'updated_at']
