"""
Test suite for Reports module
Tests: Dashboard stats and caching
"""
from decimal import Decimal

from django.core.cache import cache
from django.test import TestCase
from rest_framework import status
from stockroom.core.cache_signals import suspend_cache_signals
from stockroom.core.cache_utils import invalidate_dashboard_cache
from stockroom.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from stockroom.screens.registry import sessions


class DashboardStatsTests(TestCase):
    """Test dashboard stats endpoint"""

    def setUp(self):
        cache.clear()
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)
        TestDataFactory.create_product(stock=3)
        TestDataFactory.create_product(stock=50)
        TestDataFactory.create_customer(status='active')
        TestDataFactory.create_customer(status='inactive')
        TestDataFactory.create_order(total_amount=Decimal('100.00'))
        TestDataFactory.create_order(total_amount=Decimal('40.00'), status='cancelled')

    def tearDown(self):
        cache.clear()
        sessions.clear()

    def test_stats(self):
        response = self.client.get('/api/v1/dashboard/stats/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['total_products'], 2)
        self.assertEqual(Decimal(response.data['total_sales']), Decimal('100.00'))
        self.assertEqual(response.data['active_customers'], 1)
        self.assertEqual(response.data['low_stock_items'], 1)

    def test_stats_are_cached_until_invalidated(self):
        self.client.get('/api/v1/dashboard/stats/')
        TestDataFactory.create_product()
        response = self.client.get('/api/v1/dashboard/stats/')
        self.assertEqual(response.data['total_products'], 2)
        invalidate_dashboard_cache()
        response = self.client.get('/api/v1/dashboard/stats/')
        self.assertEqual(response.data['total_products'], 3)

    def test_screen_writes_refresh_stats(self):
        self.client.get('/api/v1/dashboard/stats/')
        response = self.client.post('/api/v1/screens/inventory/')
        url = f"/api/v1/screens/inventory/{response.data['session_id']}/rows/"
        with self.captureOnCommitCallbacks(execute=True):
            response = self.client.post(url, {
                'sku': 'NB-9', 'product_name': 'Notebook', 'category': 'Stationery', 'price': '3.50', 'stock': '100',
            }, format='json')
        self.assertEqual(response.data['toasts'][0]['title'], 'Product added')
        response = self.client.get('/api/v1/dashboard/stats/')
        self.assertEqual(response.data['total_products'], 3)

    def test_bulk_writes_can_suspend_invalidation(self):
        self.client.get('/api/v1/dashboard/stats/')
        with self.captureOnCommitCallbacks(execute=True) as callbacks:
            with suspend_cache_signals():
                TestDataFactory.create_product()
        self.assertEqual(callbacks, [])
        response = self.client.get('/api/v1/dashboard/stats/')
        self.assertEqual(response.data['total_products'], 2)
