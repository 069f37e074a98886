"""
Test suite for storefront order placement
Tests: Orderable products, Place order service, Customer order API
"""
from decimal import Decimal

from django.test import TestCase
from rest_framework import status

from stockroom.catalog.models import Product
from stockroom.core.context import SessionContext
from stockroom.core.models import ActivityLog
from stockroom.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from .models import Order, OrderDetail, CustomerOrder
from .services import OrderPlacementError, clamp_quantity, orderable_products, place_order


class PlaceOrderTests(TestCase):
    """Test the place_order service"""

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.context = SessionContext(user=self.user, ip_address='127.0.0.1')
        self.product = TestDataFactory.create_product(sku='WH-001', price=Decimal('129.99'), stock=5)

    def place(self, **overrides):
        data = {
            'customer_name': 'Emma Johnson',
            'customer_email': 'emma.j@example.com',
            'customer_address': '88 Mill Street',
            'shipping_required': True,
            'product_sku': 'WH-001',
            'quantity': 2,
        }
        data.update(overrides)
        return place_order(self.context, **data)

    def test_creates_order_detail_and_contact(self):
        order, customer_order = self.place()
        self.assertEqual(order.status, 'pending')
        self.assertEqual(order.total_amount, Decimal('259.98'))
        self.assertEqual(order.admin, self.user)
        detail = OrderDetail.objects.get(order=order)
        self.assertEqual(detail.quantity, 2)
        self.assertEqual(detail.get_line_total(), Decimal('259.98'))
        self.assertEqual(customer_order.customer_email, 'emma.j@example.com')
        self.assertTrue(ActivityLog.objects.filter(action_type='order_place', record_id=str(order.order_id)).exists())

    def test_decrements_stock(self):
        self.place(quantity=3)
        self.assertEqual(Product.objects.get(sku='WH-001').stock, 2)

    def test_quantity_clamped_to_stock(self):
        order, _ = self.place(quantity=50)
        self.assertEqual(OrderDetail.objects.get(order=order).quantity, 5)
        self.assertEqual(Product.objects.get(sku='WH-001').stock, 0)

    def test_unavailable_product(self):
        TestDataFactory.create_product(sku='OLD-1', status='discontinued')
        with self.assertRaises(OrderPlacementError):
            self.place(product_sku='OLD-1')
        self.assertEqual(Order.objects.count(), 0)

    def test_unknown_product(self):
        with self.assertRaises(OrderPlacementError):
            self.place(product_sku='NOPE')

    def test_orderable_products(self):
        TestDataFactory.create_product(sku='EMPTY', stock=0)
        self.assertEqual([p.sku for p in orderable_products()], ['WH-001'])

    def test_clamp_quantity(self):
        self.assertEqual(clamp_quantity(self.product, 0), 1)
        self.assertEqual(clamp_quantity(self.product, 9), 5)


class CustomerOrderAPITests(TestCase):
    """Test customer order endpoints"""

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)
        TestDataFactory.create_product(sku='AC-305', price=Decimal('49.99'), stock=23)

    def test_products(self):
        response = self.client.get('/api/v1/customer-orders/products/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data[0]['sku'], 'AC-305')

    def test_place_order(self):
        response = self.client.post('/api/v1/customer-orders/', {
            'customer_name': 'Sarah Williams',
            'customer_email': 'sarah.w@example.com',
            'customer_address': '12 Industrial Way',
            'product_sku': 'AC-305',
            'quantity': 1,
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['toast']['title'], 'Order placed successfully')
        self.assertEqual(CustomerOrder.objects.count(), 1)

    def test_validation_errors(self):
        response = self.client.post('/api/v1/customer-orders/', {
            'customer_name': 'S',
            'customer_email': 'bad',
            'customer_address': 'x',
            'product_sku': 'AC-305',
            'quantity': 0,
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        for field in ('customer_name', 'customer_email', 'customer_address', 'quantity'):
            self.assertIn(field, response.data)

    def test_unavailable_product(self):
        response = self.client.post('/api/v1/customer-orders/', {
            'customer_name': 'Sarah Williams',
            'customer_email': 'sarah.w@example.com',
            'customer_address': '12 Industrial Way',
            'product_sku': 'MISSING',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['toast']['variant'], 'destructive')
