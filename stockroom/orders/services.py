"""
Storefront order placement
"""
import logging

from django.db import transaction
from django.db.models import F
from django.utils import timezone

from stockroom.catalog.models import Product
from stockroom.core.cache_utils import invalidate_dashboard_cache
from stockroom.core.utils import create_activity_log
from .models import Order, OrderDetail, CustomerOrder

logger = logging.getLogger(__name__)


class OrderPlacementError(Exception):
    pass


def orderable_products():
    """Products a customer can pick: active and in stock"""
    return Product.objects.filter(status='active', stock__gt=0).order_by('product_name')


def clamp_quantity(product, quantity):
    """Quantity limited to the available stock"""
    return max(1, min(int(quantity), product.stock))


@transaction.atomic
def place_order(context, customer_name, customer_email, customer_address,
                shipping_required, product_sku, quantity):
    """
    Create an Order, its OrderDetail and the CustomerOrder contact record.

    The product row is locked while its stock is decremented; quantity is
    clamped to what is on hand.
    """
    product = Product.objects.select_for_update().filter(sku=product_sku).first()
    if product is None:
        raise OrderPlacementError("Product not found")
    if not product.is_orderable:
        raise OrderPlacementError(f"Product {product.sku} is not available")

    quantity = clamp_quantity(product, quantity)
    total_amount = product.price * quantity

    order = Order.objects.create(
        admin_id=context.user_id if context else None,
        status='pending',
        total_amount=total_amount,
        order_date=timezone.now(),
    )
    OrderDetail.objects.create(
        order=order,
        product=product,
        quantity=quantity,
        price_at_purchase=product.price,
    )
    customer_order = CustomerOrder.objects.create(
        order=order,
        customer_name=customer_name,
        customer_email=customer_email,
        customer_address=customer_address,
        shipping_required=shipping_required,
    )
    Product.objects.filter(sku=product.sku).update(stock=F('stock') - quantity)

    create_activity_log(
        context=context,
        action_type='order_place',
        table_name='orders',
        record_id=order.order_id,
        details={
            'product_sku': product.sku,
            'quantity': quantity,
            'total_amount': str(total_amount),
            'shipping_required': shipping_required,
        },
    )
    transaction.on_commit(invalidate_dashboard_cache)
    logger.info(f"Order {order.order_id} placed for {product.sku} x{quantity}")
    return order, customer_order
