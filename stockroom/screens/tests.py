"""
Comprehensive test suite for admin screens
Tests: controller flows, stale results, filters, form cleaning, ORM collaborator, session registry, API
"""
import asyncio
from decimal import Decimal

from asgiref.sync import sync_to_async
from django.test import SimpleTestCase, TestCase
from rest_framework import status

from stockroom.catalog.models import Product
from stockroom.core.context import SessionContext
from stockroom.core.models import ActivityLog
from stockroom.core.test_utils import AuthenticatedAPIClient, TestDataFactory
from stockroom.orders.models import Order
from stockroom.querylog.entries import QueryOperation
from stockroom.querylog.store import QueryLogStore
from .collaborator import DataCollaborator, OrmCollaborator
from .controller import ScreenController, ScreenState
from .exceptions import CollaboratorError, FilterRejected, FormValidationError
from .filters import is_select_statement
from .registry import ScreenSessionRegistry, sessions
from .schema import CUSTOMERS, INVENTORY, ORDERS, SHIPPING, SUPPLIERS

PRODUCT_ROWS = [
    {'sku': 'WH-001', 'product_name': 'Wireless Headphones', 'category': 'Electronics',
     'price': '129.99', 'stock': 45, 'status': 'active'},
    {'sku': 'HG-202', 'product_name': 'Stainless Water Bottle', 'category': 'Home Goods',
     'price': '19.99', 'stock': 12, 'status': 'low_stock'},
    {'sku': 'AC-305', 'product_name': 'Leather Wallet', 'category': 'Accessories',
     'price': '49.99', 'stock': 23, 'status': 'active'},
]

PRODUCT_FORM = {
    'sku': 'AP-101', 'product_name': 'Organic Cotton T-Shirt', 'category': 'Apparel',
    'price': '24.99', 'stock': '78', 'status': 'active',
}


class FakeCollaborator(DataCollaborator):
    """In-memory collaborator recording calls and the query log at call time"""

    def __init__(self, rows=None, fail=(), log=None):
        self.rows = [dict(row) for row in rows or []]
        self.fail = set(fail)
        self.log = log
        self.calls = []
        self.log_at_call = []
        self.gate = None

    async def _enter(self, name, *args):
        self.calls.append((name,) + args)
        if self.log is not None:
            self.log_at_call.append([entry.source for entry in self.log.all()])
        if self.gate is not None:
            await self.gate.wait()
        if name in self.fail:
            raise CollaboratorError(f'{name} rejected by the database')

    async def select(self, schema, named_filter=None, params=None):
        await self._enter('select', named_filter, params)
        if named_filter is not None:
            return [dict(row) for row in self.rows[:1]]
        return [dict(row) for row in self.rows]

    async def insert(self, schema, values):
        await self._enter('insert', values)
        return [{schema.pk: values.get(schema.pk, 'generated-id'), **values}]

    async def update(self, schema, pk, values):
        await self._enter('update', pk, values)
        for row in self.rows:
            if str(row[schema.pk]) == str(pk):
                return {**row, **values}
        raise CollaboratorError('not found')

    async def delete(self, schema, pk):
        await self._enter('delete', pk)
        return pk


class ControllerTestMixin:

    def make_controller(self, schema=INVENTORY, rows=PRODUCT_ROWS, fail=()):
        log = QueryLogStore()
        fake = FakeCollaborator(rows, fail=fail, log=log)
        controller = ScreenController(schema, fake, context=SessionContext(), query_log=log)
        return controller, fake

    def sources(self, controller):
        return [entry.source for entry in controller.query_log.all()]


class ScreenControllerLoadTests(ControllerTestMixin, TestCase):
    """Test mount and refresh"""

    async def test_mount_logs_fetch_before_select(self):
        controller, fake = self.make_controller()
        self.assertTrue(await controller.mount())
        self.assertEqual(fake.log_at_call[0], ['Fetch Products'])
        self.assertEqual(controller.state, ScreenState.LOADED)
        self.assertEqual(len(controller.rows), 3)

    async def test_fetch_log_includes_join(self):
        controller, _ = self.make_controller(schema=ORDERS, rows=[])
        await controller.mount()
        self.assertEqual(
            controller.query_log.all()[0].description,
            'SELECT orders.*, customers.customer_name FROM orders '
            'LEFT JOIN customers ON orders.customer_id = customers.customer_id',
        )

    async def test_mount_failure_sets_load_error(self):
        controller, _ = self.make_controller(fail={'select'})
        self.assertFalse(await controller.mount())
        self.assertEqual(controller.state, ScreenState.LOAD_ERROR)
        self.assertEqual(controller.error_message, 'select rejected by the database')
        toast = controller.toasts.drain()[0]
        self.assertTrue(toast.is_destructive)
        self.assertEqual(toast.title, 'Error loading data')

    async def test_measured_durations_are_non_negative(self):
        controller, _ = self.make_controller()
        await controller.mount()
        await controller.add(PRODUCT_FORM)
        for entry in controller.query_log.all():
            self.assertIsNotNone(entry.duration_ms)
            self.assertGreaterEqual(entry.duration_ms, 0)

    async def test_unmount_drops_in_flight_fetch(self):
        controller, fake = self.make_controller()
        fake.gate = asyncio.Event()
        task = asyncio.ensure_future(controller.mount())
        await asyncio.sleep(0)
        await asyncio.sleep(0)
        controller.unmount()
        fake.gate.set()
        self.assertFalse(await task)
        self.assertEqual(controller.rows, [])
        self.assertFalse(controller.mounted)

    async def test_newer_fetch_supersedes_older(self):
        controller, fake = self.make_controller()
        controller.mounted = True
        fake.gate = asyncio.Event()
        older = asyncio.ensure_future(controller.refresh())
        await asyncio.sleep(0)
        newer = asyncio.ensure_future(controller.apply_filter(name='low_stock'))
        await asyncio.sleep(0)
        fake.gate.set()
        self.assertFalse(await older)
        self.assertTrue(await newer)
        self.assertEqual(len(controller.rows), 1)
        self.assertEqual(controller.active_filter, 'low_stock')


class ScreenControllerAddTests(ControllerTestMixin, TestCase):
    """Test the add flow"""

    async def test_add_logs_before_insert_and_prepends_row(self):
        controller, fake = self.make_controller()
        await controller.mount()
        controller.open_add()
        self.assertTrue(await controller.add(PRODUCT_FORM))
        self.assertEqual(fake.log_at_call[-1][0], 'Add Product')
        self.assertEqual(len(controller.rows), 4)
        self.assertEqual(controller.rows[0]['sku'], 'AP-101')
        self.assertIsNone(controller.modal)
        self.assertEqual(controller.form, {})
        self.assertEqual(controller.state, ScreenState.LOADED)
        self.assertEqual(controller.toasts.drain()[-1].title, 'Product added')

    async def test_add_coerces_numbers(self):
        controller, fake = self.make_controller()
        await controller.mount()
        await controller.add(PRODUCT_FORM)
        _, values = fake.calls[-1]
        self.assertEqual(values['price'], Decimal('24.99'))
        self.assertEqual(values['stock'], 78)
        self.assertIn("VALUES ('AP-101', 'Organic Cotton T-Shirt', 'Apparel', 24.99, 78, 'active')",
                      controller.query_log.all()[0].description)

    async def test_add_writes_activity_log(self):
        controller, _ = self.make_controller()
        await controller.mount()
        await controller.add(PRODUCT_FORM)
        log = await ActivityLog.objects.filter(table_name='products', action_type='create').afirst()
        self.assertIsNotNone(log)
        self.assertEqual(log.record_id, 'AP-101')

    async def test_add_failure_keeps_rows_and_log(self):
        controller, _ = self.make_controller(fail={'insert'})
        await controller.mount()
        controller.open_add()
        self.assertFalse(await controller.add(PRODUCT_FORM))
        self.assertEqual(len(controller.rows), 3)
        self.assertEqual(controller.modal, 'add')
        self.assertEqual(self.sources(controller), ['Add Product', 'Fetch Products'])
        toast = controller.toasts.drain()[-1]
        self.assertTrue(toast.is_destructive)
        self.assertEqual(toast.title, 'Error adding record')
        self.assertEqual(controller.state, ScreenState.LOADED)

    async def test_add_missing_required_field_makes_no_call(self):
        controller, fake = self.make_controller()
        await controller.mount()
        form = {**PRODUCT_FORM, 'product_name': '   '}
        self.assertFalse(await controller.add(form))
        self.assertEqual([call[0] for call in fake.calls], ['select'])
        self.assertEqual(self.sources(controller), ['Fetch Products'])
        self.assertTrue(controller.toasts.drain()[-1].is_destructive)

    async def test_add_non_numeric_price_makes_no_call(self):
        controller, fake = self.make_controller()
        await controller.mount()
        self.assertFalse(await controller.add({**PRODUCT_FORM, 'price': 'cheap'}))
        self.assertEqual(len(fake.calls), 1)

    async def test_add_result_dropped_after_unmount(self):
        controller, fake = self.make_controller()
        await controller.mount()
        fake.gate = asyncio.Event()
        task = asyncio.ensure_future(controller.add(PRODUCT_FORM))
        await asyncio.sleep(0)
        await asyncio.sleep(0)
        controller.unmount()
        fake.gate.set()
        self.assertFalse(await task)
        self.assertEqual(len(controller.rows), 3)


class ScreenControllerEditTests(ControllerTestMixin, TestCase):
    """Test the edit flow"""

    async def test_edit_replaces_row_in_place(self):
        controller, fake = self.make_controller()
        await controller.mount()
        self.assertTrue(controller.open_edit('HG-202'))
        self.assertEqual(controller.form['stock'], 12)
        self.assertTrue(await controller.edit('HG-202', {'stock': '30', 'sku': 'IGNORED'}))
        self.assertEqual(fake.calls[-1], ('update', 'HG-202', {'stock': 30}))
        self.assertEqual(controller.rows[1]['stock'], 30)
        self.assertEqual(len(controller.rows), 3)
        self.assertEqual(controller.query_log.all()[0].description,
                         "UPDATE products SET stock = 30 WHERE sku = 'HG-202'")
        self.assertEqual(controller.query_log.all()[0].source, 'Edit Product')
        self.assertIsNone(controller.modal)

    async def test_edit_uses_form_of_open_modal(self):
        controller, fake = self.make_controller()
        await controller.mount()
        controller.open_edit('WH-001')
        controller.form['price'] = '99.00'
        self.assertTrue(await controller.edit())
        self.assertEqual(fake.calls[-1][1], 'WH-001')
        self.assertEqual(fake.calls[-1][2]['price'], Decimal('99.00'))

    async def test_edit_cannot_blank_required_field(self):
        controller, fake = self.make_controller()
        await controller.mount()
        self.assertFalse(await controller.edit('WH-001', {'product_name': ''}))
        self.assertEqual(len(fake.calls), 1)

    async def test_edit_failure_keeps_row(self):
        controller, _ = self.make_controller(fail={'update'})
        await controller.mount()
        self.assertFalse(await controller.edit('WH-001', {'stock': 1}))
        self.assertEqual(controller.rows[0]['stock'], 45)
        self.assertEqual(controller.toasts.drain()[-1].title, 'Error updating record')


class ScreenControllerDeleteTests(ControllerTestMixin, TestCase):
    """Test the delete flow"""

    async def test_confirmed_delete_removes_exactly_that_row(self):
        controller, fake = self.make_controller()
        await controller.mount()
        self.assertTrue(await controller.delete('HG-202', confirmed=True))
        self.assertEqual([row['sku'] for row in controller.rows], ['WH-001', 'AC-305'])
        self.assertEqual(fake.log_at_call[-1][0], 'Delete Product')
        self.assertEqual(self.sources(controller).count('Delete Product'), 1)

    async def test_unconfirmed_delete_does_nothing(self):
        controller, fake = self.make_controller()
        await controller.mount()
        self.assertFalse(await controller.delete('HG-202'))
        self.assertEqual(controller.confirm_delete_pk, 'HG-202')
        self.assertEqual(len(controller.rows), 3)
        self.assertEqual(len(fake.calls), 1)
        self.assertEqual(self.sources(controller), ['Fetch Products'])

    async def test_request_and_cancel_delete(self):
        controller, _ = self.make_controller()
        await controller.mount()
        self.assertTrue(controller.request_delete('WH-001'))
        controller.cancel_delete()
        self.assertIsNone(controller.confirm_delete_pk)
        self.assertFalse(controller.request_delete('NOPE'))

    async def test_delete_failure_keeps_row(self):
        controller, _ = self.make_controller(fail={'delete'})
        await controller.mount()
        self.assertFalse(await controller.delete('WH-001', confirmed=True))
        self.assertEqual(len(controller.rows), 3)
        self.assertEqual(controller.toasts.drain()[-1].title, 'Error deleting record')

    async def test_delete_with_uuid_key_matches_string(self):
        rows = [{'supplier_id': 'a1', 'supplier_name': 'Acme'}, {'supplier_id': 'b2', 'supplier_name': 'Globex'}]
        controller, _ = self.make_controller(schema=SUPPLIERS, rows=rows)
        await controller.mount()
        await controller.delete('b2', confirmed=True)
        self.assertEqual(controller.rows, [rows[0]])


class ScreenControllerFilterTests(ControllerTestMixin, TestCase):
    """Test named filters and the free-text filter box"""

    async def test_non_select_text_is_logged_and_rejected(self):
        controller, fake = self.make_controller()
        await controller.mount()
        self.assertFalse(await controller.apply_filter(text='DROP TABLE products'))
        self.assertEqual(controller.query_log.all()[0].source, 'Custom Filter')
        self.assertEqual(controller.query_log.all()[0].description, 'DROP TABLE products')
        self.assertEqual(len(fake.calls), 1)
        toast = controller.toasts.drain()[-1]
        self.assertEqual(toast.title, 'Invalid filter')
        self.assertTrue(toast.is_destructive)
        self.assertEqual(len(controller.rows), 3)

    async def test_select_text_is_never_executed(self):
        controller, fake = self.make_controller()
        await controller.mount()
        self.assertTrue(await controller.apply_filter(text='  SELECT * FROM products WHERE stock < 5'))
        self.assertEqual(fake.calls[-1], ('select', None, None))
        self.assertEqual(self.sources(controller), ['Fetch Products', 'Custom Filter', 'Fetch Products'])
        self.assertIn('not executed', controller.toasts.drain()[-1].description)

    async def test_named_filter_is_logged_as_custom_filter(self):
        controller, fake = self.make_controller()
        await controller.mount()
        self.assertTrue(await controller.apply_filter(name='low_stock', params={'max_stock': 15}))
        entry = controller.query_log.all()[0]
        self.assertEqual(entry.source, 'Custom Filter')
        self.assertEqual(entry.description, 'SELECT * FROM products WHERE stock <= 15 -- filter: low_stock')
        self.assertEqual(fake.calls[-1][2], {'max_stock': Decimal('15')})
        self.assertEqual(len(controller.rows), 1)

    async def test_unknown_filter_is_rejected(self):
        controller, fake = self.make_controller()
        await controller.mount()
        self.assertFalse(await controller.apply_filter(name='everything'))
        self.assertEqual(len(fake.calls), 1)
        self.assertEqual(controller.toasts.drain()[-1].title, 'Invalid filter')

    async def test_filters_unavailable_on_shipping(self):
        controller, fake = self.make_controller(schema=SHIPPING, rows=[])
        await controller.mount()
        self.assertFalse(await controller.apply_filter(text='select 1'))
        self.assertEqual(len(fake.calls), 1)

    async def test_filter_failure(self):
        controller, _ = self.make_controller()
        await controller.mount()
        controller.collaborator.fail.add('select')
        self.assertFalse(await controller.apply_filter(name='status', params={'status': 'active'}))
        self.assertEqual(controller.toasts.drain()[-1].title, 'Error applying filter')
        self.assertEqual(controller.state, ScreenState.LOADED)
        self.assertEqual(len(controller.rows), 3)


class ScreenControllerModalTests(ControllerTestMixin, TestCase):

    async def test_modal_state(self):
        controller, _ = self.make_controller()
        await controller.mount()
        controller.open_add()
        self.assertEqual(controller.modal, 'add')
        self.assertFalse(controller.open_edit('missing'))
        self.assertTrue(controller.open_edit('AC-305'))
        self.assertEqual(controller.editing_pk, 'AC-305')
        controller.close_modal()
        self.assertIsNone(controller.modal)
        self.assertIsNone(controller.editing_pk)

    async def test_snapshot(self):
        controller, _ = self.make_controller()
        await controller.mount()
        snapshot = controller.snapshot()
        self.assertEqual(snapshot['state'], 'loaded')
        self.assertEqual(snapshot['count'], 3)
        self.assertEqual(snapshot['query_log']['title'], 'SQL Queries (1)')
        self.assertEqual(snapshot['screen']['key'], 'inventory')


class FilterTests(SimpleTestCase):
    """Test the named filter definitions"""

    def test_select_guard(self):
        self.assertTrue(is_select_statement('SELECT * FROM products'))
        self.assertTrue(is_select_statement('  select 1'))
        self.assertFalse(is_select_statement('DELETE FROM products'))
        self.assertFalse(is_select_statement(''))
        self.assertFalse(is_select_statement(None))

    def test_low_stock_default(self):
        named = INVENTORY.get_filter('low_stock')
        self.assertEqual(named.clean({}), {'max_stock': Decimal('10')})

    def test_unknown_parameter_rejected(self):
        named = INVENTORY.get_filter('low_stock')
        with self.assertRaises(FilterRejected):
            named.clean({'max_stock': 5, 'sql': '1=1'})

    def test_missing_required_parameter_rejected(self):
        with self.assertRaises(FilterRejected):
            CUSTOMERS.get_filter('type').clean({})

    def test_invalid_choice_rejected(self):
        with self.assertRaises(FilterRejected):
            INVENTORY.get_filter('status').clean({'status': "active' OR 1=1"})

    def test_invalid_number_rejected(self):
        with self.assertRaises(FilterRejected):
            ORDERS.get_filter('min_total').clean({'min_total': 'lots'})

    def test_conditions(self):
        named = ORDERS.get_filter('customer')
        conditions = named.conditions(named.clean({'customer': 'smith'}))
        self.assertEqual(conditions[0].render(), "customers.customer_name ILIKE '%smith%'")

    def test_joined_column_keeps_its_table(self):
        named = ORDERS.get_filter('customer')
        operation = QueryOperation.select(
            ORDERS.table, join=ORDERS.join, conditions=named.conditions(named.clean({'customer': 'emm'})),
        )
        self.assertIn("WHERE customers.customer_name ILIKE '%emm%'", operation.render())

    def test_base_column_qualified_with_base_table(self):
        named = ORDERS.get_filter('min_total')
        operation = QueryOperation.select(
            ORDERS.table, join=ORDERS.join, conditions=named.conditions(named.clean({'min_total': '50'})),
        )
        self.assertIn("WHERE orders.total_amount >= 50", operation.render())

    def test_shipping_and_suppliers_have_no_filters(self):
        self.assertFalse(SHIPPING.filterable)
        self.assertFalse(SUPPLIERS.filterable)
        self.assertTrue(INVENTORY.filterable)


class FormCleaningTests(SimpleTestCase):
    """Test presence check and number coercion"""

    def test_missing_fields_reported(self):
        with self.assertRaises(FormValidationError) as ctx:
            INVENTORY.clean_form({'sku': 'X-1'})
        self.assertIn('product_name', ctx.exception.errors)
        self.assertIn('price', ctx.exception.errors)

    def test_blank_optional_field_dropped(self):
        values = INVENTORY.clean_form({**PRODUCT_FORM, 'status': ''})
        self.assertNotIn('status', values)

    def test_integer_field_rejects_fraction(self):
        with self.assertRaises(FormValidationError) as ctx:
            INVENTORY.clean_form({**PRODUCT_FORM, 'stock': '2.5'})
        self.assertEqual(list(ctx.exception.errors), ['stock'])

    def test_fields_outside_form_ignored(self):
        values = CUSTOMERS.clean_form({'customer_name': 'Ann', 'contact': 'ann@x.com', 'total_spent': '9'})
        self.assertEqual(values, {'customer_name': 'Ann', 'contact': 'ann@x.com'})

    def test_partial_allows_omitted_required(self):
        self.assertEqual(INVENTORY.clean_form({'stock': 4}, INVENTORY.editable_fields, partial=True), {'stock': 4})


class OrmCollaboratorTests(TestCase):
    """Test the Django ORM collaborator"""

    def setUp(self):
        self.collaborator = OrmCollaborator()
        self.product = TestDataFactory.create_product(product_name='Desk Lamp', sku='DL-1', stock=4)
        TestDataFactory.create_product(product_name='Office Chair', sku='OC-1', stock=40)

    async def test_select_returns_serialized_rows(self):
        rows = await self.collaborator.select(INVENTORY)
        self.assertEqual({row['sku'] for row in rows}, {'DL-1', 'OC-1'})

    async def test_select_with_named_filter(self):
        named = INVENTORY.get_filter('low_stock')
        rows = await self.collaborator.select(INVENTORY, named, named.clean({}))
        self.assertEqual([row['sku'] for row in rows], ['DL-1'])

    async def test_insert_returns_saved_row(self):
        rows = await self.collaborator.insert(INVENTORY, {
            'sku': 'NB-9', 'product_name': 'Notebook', 'category': 'Stationery',
            'price': Decimal('3.50'), 'stock': 100,
        })
        self.assertEqual(rows[0]['sku'], 'NB-9')
        self.assertTrue(await Product.objects.filter(sku='NB-9').aexists())

    async def test_insert_duplicate_key_fails(self):
        with self.assertRaises(CollaboratorError):
            await self.collaborator.insert(INVENTORY, {
                'sku': 'DL-1', 'product_name': 'Copy', 'category': 'X', 'price': Decimal('1'), 'stock': 1,
            })

    async def test_update_and_delete(self):
        row = await self.collaborator.update(INVENTORY, 'DL-1', {'stock': 9})
        self.assertEqual(row['stock'], 9)
        await self.collaborator.delete(INVENTORY, 'DL-1')
        self.assertFalse(await Product.objects.filter(sku='DL-1').aexists())

    async def test_missing_row_fails(self):
        with self.assertRaises(CollaboratorError):
            await self.collaborator.update(INVENTORY, 'NOPE', {'stock': 1})
        with self.assertRaises(CollaboratorError):
            await self.collaborator.delete(SUPPLIERS, 'not-a-uuid')

    async def test_order_rows_carry_customer_name(self):
        customer = await sync_to_async(TestDataFactory.create_customer)(customer_name='Emma Johnson')
        await sync_to_async(TestDataFactory.create_order)(customer=customer)
        rows = await self.collaborator.select(ORDERS)
        self.assertEqual(rows[0]['customer_name'], 'Emma Johnson')


class StubController:
    schema = INVENTORY

    def __init__(self):
        self.unmounted = False

    def unmount(self):
        self.unmounted = True


class ScreenSessionRegistryTests(SimpleTestCase):
    """Test session ownership and eviction"""

    def test_owner_only(self):
        registry = ScreenSessionRegistry(limit=5)
        controller = StubController()
        session_id = registry.open(controller, owner_id=1)
        self.assertIs(registry.get(session_id, 1), controller)
        self.assertIsNone(registry.get(session_id, 2))
        self.assertIsNone(registry.close(session_id, 2))
        self.assertIs(registry.close(session_id, 1), controller)
        self.assertTrue(controller.unmounted)

    def test_oldest_session_evicted(self):
        registry = ScreenSessionRegistry(limit=2)
        first, second, third = StubController(), StubController(), StubController()
        first_id = registry.open(first, 1)
        registry.open(second, 1)
        registry.open(third, 1)
        self.assertEqual(len(registry), 2)
        self.assertIsNone(registry.get(first_id, 1))
        self.assertTrue(first.unmounted)
        self.assertFalse(second.unmounted)


class ScreenAPITests(TestCase):
    """Test screen endpoints"""

    def setUp(self):
        sessions.clear()
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)
        TestDataFactory.create_product(product_name='Desk Lamp', sku='DL-1', stock=4)
        TestDataFactory.create_product(product_name='Office Chair', sku='OC-1', stock=40)

    def tearDown(self):
        sessions.clear()

    def mount(self, screen='inventory'):
        response = self.client.post(f'/api/v1/screens/{screen}/')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        return f"/api/v1/screens/{screen}/{response.data['session_id']}/"

    def test_requires_authentication(self):
        client = AuthenticatedAPIClient()
        response = client.get('/api/v1/screens/')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_screen_list(self):
        response = self.client.get('/api/v1/screens/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([s['key'] for s in response.data],
                         ['inventory', 'customers', 'orders', 'shipping', 'suppliers'])

    def test_mount_loads_rows(self):
        response = self.client.post('/api/v1/screens/inventory/')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['state'], 'loaded')
        self.assertEqual(response.data['count'], 2)
        self.assertEqual(response.data['query_log']['count'], 1)

    def test_unknown_screen(self):
        response = self.client.post('/api/v1/screens/payroll/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_add_row(self):
        url = self.mount()
        response = self.client.post(f'{url}rows/', {
            'sku': 'NB-9', 'product_name': 'Notebook', 'category': 'Stationery', 'price': '3.50', 'stock': '100',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['rows'][0]['sku'], 'NB-9')
        self.assertEqual(response.data['toasts'][0]['title'], 'Product added')
        self.assertTrue(Product.objects.filter(sku='NB-9').exists())
        log = ActivityLog.objects.get(table_name='products', record_id='NB-9')
        self.assertEqual(log.user, self.user)

    def test_added_order_is_attributed_to_user(self):
        customer = TestDataFactory.create_customer(customer_name='Emma Johnson')
        url = self.mount('orders')
        response = self.client.post(f'{url}rows/', {
            'customer': str(customer.pk), 'status': 'pending', 'total_amount': '75.00',
        }, format='json')
        self.assertEqual(response.data['toasts'][0]['title'], 'Order added')
        self.assertEqual(response.data['rows'][0]['admin'], self.user.pk)
        self.assertEqual(Order.objects.get().admin, self.user)

    def test_add_row_failure_is_a_toast(self):
        url = self.mount()
        response = self.client.post(f'{url}rows/', {
            'sku': 'DL-1', 'product_name': 'Lamp', 'category': 'Home', 'price': '3.50', 'stock': '1',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['toasts'][0]['variant'], 'destructive')
        self.assertEqual(response.data['count'], 2)

    def test_edit_row(self):
        url = self.mount()
        response = self.client.patch(f'{url}rows/DL-1/', {'stock': '7'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(Product.objects.get(sku='DL-1').stock, 7)

    def test_delete_requires_confirmation(self):
        url = self.mount()
        response = self.client.delete(f'{url}rows/DL-1/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['confirm_delete_pk'], 'DL-1')
        self.assertTrue(Product.objects.filter(sku='DL-1').exists())

        response = self.client.delete(f'{url}rows/DL-1/?confirm=true')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertFalse(Product.objects.filter(sku='DL-1').exists())
        self.assertEqual(response.data['count'], 1)

    def test_named_filter(self):
        url = self.mount()
        response = self.client.post(f'{url}filter/', {'name': 'low_stock'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([row['sku'] for row in response.data['rows']], ['DL-1'])
        self.assertEqual(response.data['active_filter'], 'low_stock')

    def test_free_text_filter_rejected(self):
        url = self.mount()
        response = self.client.post(f'{url}filter/', {'text': 'DROP TABLE products'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['toasts'][0]['title'], 'Invalid filter')
        self.assertTrue(Product.objects.exists())

    def test_filter_request_needs_name_or_text(self):
        url = self.mount()
        response = self.client.post(f'{url}filter/', {}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_modal(self):
        url = self.mount()
        response = self.client.post(f'{url}modal/', {'action': 'open_edit', 'pk': 'OC-1'}, format='json')
        self.assertEqual(response.data['modal'], 'edit')
        self.assertEqual(response.data['form']['product_name'], 'Office Chair')
        response = self.client.post(f'{url}modal/', {'action': 'open_edit', 'pk': 'ZZ'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_query_log_panel(self):
        url = self.mount()
        response = self.client.post(f'{url}query-log/toggle/')
        self.assertTrue(response.data['expanded'])
        entry_id = response.data['entries'][0]['id']

        response = self.client.get(f'{url}query-log/', {'format': 'html'})
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIn('SQL Queries (1)', response.content.decode())

        response = self.client.post(f'{url}query-log/{entry_id}/copy/')
        self.assertEqual(response.data['text'], 'SELECT * FROM products')
        self.assertEqual(response.data['toasts'][0]['title'], 'Copied to clipboard')

        response = self.client.delete(f'{url}query-log/')
        self.assertEqual(response.data['count'], 0)

    def test_query_log_unknown_session(self):
        response = self.client.get('/api/v1/screens/inventory/missing/query-log/', {'format': 'html'})
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.content.decode(), '<p>Screen session not found</p>')
        response = self.client.get('/api/v1/screens/inventory/missing/query-log/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data['error'], 'Screen session not found')

    def test_sessions_are_private(self):
        url = self.mount()
        other = AuthenticatedAPIClient().authenticate_user(TestDataFactory.create_user())
        self.assertEqual(other.get(url).status_code, status.HTTP_404_NOT_FOUND)

    def test_unmount(self):
        url = self.mount()
        self.assertEqual(self.client.delete(url).status_code, status.HTTP_204_NO_CONTENT)
        self.assertEqual(self.client.get(url).status_code, status.HTTP_404_NOT_FOUND)
