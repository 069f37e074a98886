from django.db import models
from decimal import Decimal


class Product(models.Model):
    """Products held in inventory, keyed by SKU"""
    STATUS_CHOICES = [
        ('active', 'Active'),
        ('discontinued', 'Discontinued'),
        ('out_of_stock', 'Out of Stock'),
        ('low_stock', 'Low Stock'),
    ]

    sku = models.CharField(max_length=100, primary_key=True)
    product_name = models.CharField(max_length=255)
    category = models.CharField(max_length=100)
    price = models.DecimalField(max_digits=10, decimal_places=2, default=Decimal('0.00'))
    stock = models.IntegerField(default=0)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='active')
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"{self.product_name} ({self.sku})"

    @property
    def is_orderable(self):
        return self.status == 'active' and self.stock > 0

    class Meta:
        db_table = 'products'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['category'], name='idx_product_category'),
            models.Index(fields=['status'], name='idx_product_status'),
        ]
