"""
Management command to load demo products, customers, suppliers, orders and
shipments into the database
"""
from datetime import date, datetime
from decimal import Decimal

from django.core.management.base import BaseCommand
from django.db import transaction
from django.utils import timezone

from stockroom.catalog.models import Product
from stockroom.core.cache_signals import suspend_cache_signals
from stockroom.core.cache_utils import invalidate_dashboard_cache
from stockroom.orders.models import Order
from stockroom.parties.models import Customer, Supplier
from stockroom.shipping.models import Shipment

PRODUCTS = [
    ('WH-001', 'Wireless Headphones', 'Electronics', '129.99', 45, 'active'),
    ('AP-101', 'Organic Cotton T-Shirt', 'Apparel', '24.99', 78, 'active'),
    ('HG-202', 'Stainless Water Bottle', 'Home Goods', '19.99', 12, 'low_stock'),
    ('WH-042', 'Wireless Charging Pad', 'Electronics', '34.99', 0, 'out_of_stock'),
    ('AC-305', 'Leather Wallet', 'Accessories', '49.99', 23, 'active'),
]

CUSTOMERS = [
    ('John Smith', 'john.smith@example.com', 'retail', '1249.99', '2023-09-15', 'active'),
    ('Emma Johnson', 'emma.j@example.com', 'wholesale', '5680.50', '2023-10-02', 'active'),
    ('Michael Chen', 'm.chen@example.com', 'retail', '750.25', '2023-08-28', 'inactive'),
    ('Sarah Williams', 'sarah.w@example.com', 'wholesale', '3200.75', '2023-10-10', 'active'),
    ('James Brown', 'j.brown@example.com', 'retail', '425.50', '2023-06-15', 'inactive'),
]

SUPPLIERS = [
    ('Acme Components', 'sales@acme.example.com', '12 Industrial Way, Springfield', 'active'),
    ('Northwind Textiles', 'orders@northwind.example.com', '88 Mill Street, Leeds', 'active'),
    ('Globex Housewares', 'contact@globex.example.com', '400 Harbor Blvd, Oakland', 'pending_review'),
]


class Command(BaseCommand):
    help = "Loads demo inventory, customers, suppliers, orders and shipments"

    def add_arguments(self, parser):
        parser.add_argument(
            '--clear',
            action='store_true',
            help='Delete existing demo tables before loading',
        )

    def handle(self, *args, **options):
        # One invalidation for the whole load
        with transaction.atomic(), suspend_cache_signals():
            self.load(options)
            transaction.on_commit(invalidate_dashboard_cache)

    def load(self, options):
        self.stdout.write(self.style.SUCCESS("=" * 80))
        self.stdout.write(self.style.SUCCESS("LOADING DEMO DATA"))
        self.stdout.write(self.style.SUCCESS("=" * 80))

        if options['clear']:
            self.stdout.write(self.style.WARNING("Clearing existing data..."))
            Shipment.objects.all().delete()
            Order.objects.all().delete()
            Supplier.objects.all().delete()
            Customer.objects.all().delete()
            Product.objects.all().delete()

        products_created = 0
        for sku, name, category, price, stock, status in PRODUCTS:
            _, created = Product.objects.get_or_create(
                sku=sku,
                defaults={
                    'product_name': name,
                    'category': category,
                    'price': Decimal(price),
                    'stock': stock,
                    'status': status,
                },
            )
            products_created += int(created)

        customers = []
        for name, contact, type_, spent, last_order, status in CUSTOMERS:
            customer, _ = Customer.objects.get_or_create(
                customer_name=name,
                defaults={
                    'contact': contact,
                    'type': type_,
                    'total_spent': Decimal(spent),
                    'last_order': timezone.make_aware(datetime.strptime(last_order, '%Y-%m-%d')),
                    'status': status,
                },
            )
            customers.append(customer)

        for name, contact, address, status in SUPPLIERS:
            Supplier.objects.get_or_create(
                supplier_name=name,
                defaults={'contact': contact, 'address': address, 'status': status},
            )

        orders_created = 0
        if not Order.objects.exists():
            for customer, status in zip(customers, ['delivered', 'shipped', 'processing', 'pending', 'cancelled']):
                order = Order.objects.create(
                    customer=customer,
                    status=status,
                    total_amount=(customer.total_spent or Decimal('0.00')) / 5,
                )
                orders_created += 1
                if status in ('delivered', 'shipped'):
                    Shipment.objects.create(
                        order=order,
                        courier_service='UPS',
                        shipping_address=f'{customer.customer_name}, 1 Main Street',
                        tracking_number=f'1Z{str(order.order_id)[:10].upper()}',
                        estimated_delivery_date=date.today(),
                        status=status,
                    )

        self.stdout.write(self.style.SUCCESS(f"Products created: {products_created}"))
        self.stdout.write(self.style.SUCCESS(f"Customers: {Customer.objects.count()}"))
        self.stdout.write(self.style.SUCCESS(f"Suppliers: {Supplier.objects.count()}"))
        self.stdout.write(self.style.SUCCESS(f"Orders created: {orders_created}"))
        self.stdout.write(self.style.SUCCESS("Demo data loaded."))
