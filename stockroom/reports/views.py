import logging
from decimal import Decimal

from django.db.models import DecimalField, F, Sum
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from stockroom.catalog.models import Product
from stockroom.core.cache_utils import DASHBOARD_STATS_CACHE_TTL, DASHBOARD_STATS_PREFIX, cached_query
from stockroom.orders.models import Order
from stockroom.parties.models import Customer

logger = logging.getLogger('stockroom.reports')

LOW_STOCK_THRESHOLD = 10


@cached_query(cache_ttl=DASHBOARD_STATS_CACHE_TTL, key_prefix=DASHBOARD_STATS_PREFIX)
def get_dashboard_stats():
    total_sales = Order.objects.exclude(status='cancelled').aggregate(
        total=Sum('total_amount', output_field=DecimalField())
    )['total'] or Decimal('0.00')

    inventory_value = Product.objects.aggregate(
        total=Sum(F('price') * F('stock'), output_field=DecimalField())
    )['total'] or Decimal('0.00')

    return {
        'total_products': Product.objects.count(),
        'total_sales': str(total_sales),
        'active_customers': Customer.objects.filter(status='active').count(),
        'low_stock_items': Product.objects.filter(stock__lte=LOW_STOCK_THRESHOLD).count(),
        'pending_orders': Order.objects.filter(status='pending').count(),
        'inventory_value': str(inventory_value),
    }


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def dashboard_stats(request):
    """Headline numbers of the dashboard"""
    return Response(get_dashboard_stats())
