import logging

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated

from stockroom.catalog.serializers import ProductSerializer
from stockroom.core import toasts
from stockroom.core.context import SessionContext
from .serializers import OrderSerializer, CustomerOrderSerializer, PlaceOrderSerializer
from .services import OrderPlacementError, orderable_products, place_order

logger = logging.getLogger(__name__)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def customer_order_products(request):
    """Products available for the order form"""
    serializer = ProductSerializer(orderable_products(), many=True)
    return Response(serializer.data)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def customer_order_create(request):
    """Place an order from the storefront form"""
    serializer = PlaceOrderSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    try:
        order, customer_order = place_order(SessionContext.from_request(request), **serializer.validated_data)
    except OrderPlacementError as e:
        logger.warning(f"Error placing order: {e}")
        toast = toasts.error("Failed to place order. Please try again.")
        return Response({'detail': str(e), 'toast': toast.as_dict()}, status=status.HTTP_400_BAD_REQUEST)
    toast = toasts.success("Order placed successfully", "You will receive an email confirmation shortly.")
    return Response({
        'order': OrderSerializer(order).data,
        'customer_order': CustomerOrderSerializer(customer_order).data,
        'toast': toast.as_dict(),
    }, status=status.HTTP_201_CREATED)
