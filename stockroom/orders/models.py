import uuid
from django.db import models
from django.utils import timezone
from decimal import Decimal
from stockroom.core.models import User
from stockroom.catalog.models import Product
from stockroom.parties.models import Customer


class Order(models.Model):
    """Customer orders"""
    STATUS_CHOICES = [
        ('pending', 'Pending'),
        ('processing', 'Processing'),
        ('shipped', 'Shipped'),
        ('delivered', 'Delivered'),
        ('cancelled', 'Cancelled'),
    ]

    order_id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    customer = models.ForeignKey(Customer, on_delete=models.SET_NULL, null=True, blank=True, related_name='orders')
    admin = models.ForeignKey(User, on_delete=models.SET_NULL, null=True, blank=True, related_name='orders')
    order_date = models.DateTimeField(default=timezone.now)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='pending')
    total_amount = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0.00'))
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"Order-{str(self.order_id)[:8]}"

    class Meta:
        db_table = 'orders'
        ordering = ['-order_date']


class OrderDetail(models.Model):
    """Line items of an order"""
    order = models.ForeignKey(Order, on_delete=models.CASCADE, related_name='details', null=True, blank=True)
    product = models.ForeignKey(Product, on_delete=models.SET_NULL, related_name='order_details', null=True, blank=True, db_column='product_sku')
    quantity = models.IntegerField(null=True, blank=True)
    price_at_purchase = models.DecimalField(max_digits=10, decimal_places=2, null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    def get_line_total(self):
        return (self.price_at_purchase or Decimal('0.00')) * (self.quantity or 0)

    class Meta:
        db_table = 'order_details'


class CustomerOrder(models.Model):
    """Storefront order contact details"""
    order = models.ForeignKey(Order, on_delete=models.CASCADE, related_name='customer_orders', null=True, blank=True)
    customer_name = models.CharField(max_length=200)
    customer_email = models.EmailField()
    customer_address = models.TextField()
    shipping_required = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return f"{self.customer_name} - {self.order}"

    class Meta:
        db_table = 'customer_orders'
        ordering = ['-created_at']
