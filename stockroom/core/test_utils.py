"""
Test utilities and factories for creating test data
"""
from django.contrib.auth import get_user_model
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken
from stockroom.catalog.models import Product
from stockroom.parties.models import Customer, Supplier
from stockroom.orders.models import Order
from stockroom.shipping.models import Shipment
from stockroom.notifications.models import Notification
from decimal import Decimal
import random
import string

User = get_user_model()


class TestDataFactory:
    """Factory class for creating test data"""

    @staticmethod
    def random_string(length=10):
        """Generate a random string"""
        return ''.join(random.choices(string.ascii_letters + string.digits, k=length))

    @staticmethod
    def create_user(username=None, email=None, password='testpass123', is_staff=False, is_superuser=False):
        """Create a test user"""
        if not username:
            username = f'testuser_{TestDataFactory.random_string(6)}'
        if not email:
            email = f'{username}@test.com'
        return User.objects.create_user(
            username=username,
            email=email,
            password=password,
            is_staff=is_staff,
            is_superuser=is_superuser
        )

    @staticmethod
    def create_product(product_name=None, sku=None, category='Electronics', price=None, stock=25, status='active'):
        """Create a test product"""
        if not product_name:
            product_name = f'Product_{TestDataFactory.random_string(6)}'
        if not sku:
            sku = f'SKU-{TestDataFactory.random_string(8).upper()}'
        return Product.objects.create(
            sku=sku,
            product_name=product_name,
            category=category,
            price=price if price is not None else Decimal('19.99'),
            stock=stock,
            status=status
        )

    @staticmethod
    def create_customer(customer_name=None, contact=None, type='retail', status='active', total_spent=None):
        """Create a test customer"""
        if not customer_name:
            customer_name = f'Customer_{TestDataFactory.random_string(6)}'
        if not contact:
            contact = f'{customer_name.lower()}@test.com'
        return Customer.objects.create(
            customer_name=customer_name,
            contact=contact,
            type=type,
            status=status,
            total_spent=total_spent if total_spent is not None else Decimal('0.00')
        )

    @staticmethod
    def create_supplier(supplier_name=None, contact=None, address='1 Supply Road'):
        """Create a test supplier"""
        if not supplier_name:
            supplier_name = f'Supplier_{TestDataFactory.random_string(6)}'
        return Supplier.objects.create(
            supplier_name=supplier_name,
            contact=contact or f'{supplier_name.lower()}@test.com',
            address=address
        )

    @staticmethod
    def create_order(customer=None, status='pending', total_amount=None, admin=None):
        """Create a test order"""
        return Order.objects.create(
            customer=customer,
            admin=admin,
            status=status,
            total_amount=total_amount if total_amount is not None else Decimal('100.00')
        )

    @staticmethod
    def create_shipment(order=None, courier_service='UPS', shipping_address='1 Main Street', status='processing'):
        """Create a test shipment"""
        return Shipment.objects.create(
            order=order,
            courier_service=courier_service,
            shipping_address=shipping_address,
            tracking_number=f'TRK{TestDataFactory.random_string(8).upper()}',
            status=status
        )

    @staticmethod
    def create_notification(user, title='Low stock', message='A product is running low', type='warning', read=False):
        """Create a test notification"""
        return Notification.objects.create(user=user, title=title, message=message, type=type, read=read)


class AuthenticatedAPIClient(APIClient):
    """APIClient with authentication helper"""

    def authenticate_user(self, user):
        """Authenticate the client with a user"""
        refresh = RefreshToken.for_user(user)
        self.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
        return self

    def logout(self):
        """Remove authentication"""
        self.credentials()
