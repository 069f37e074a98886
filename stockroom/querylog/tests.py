"""
Test suite for the query log
Tests: entry rendering, store ordering and counts, viewer panel and copy
"""
from decimal import Decimal

from django.test import SimpleTestCase

from stockroom.core.toasts import ToastQueue
from .entries import Condition, Join, QueryLogEntry, QueryOperation, sql_literal
from .store import QueryLogStore
from .viewer import COPY_TOAST_DURATION_MS, EMPTY_STATE, QueryLogViewer


class QueryOperationRenderTests(SimpleTestCase):
    """Test the SQL-like text shown for each kind of operation"""

    def test_select_all(self):
        self.assertEqual(QueryOperation.select('products').render(), 'SELECT * FROM products')

    def test_select_with_join(self):
        operation = QueryOperation.select(
            'orders', join=Join('customers', 'customer_id', 'customer_id', ('customer_name',))
        )
        self.assertEqual(
            operation.render(),
            'SELECT orders.*, customers.customer_name FROM orders '
            'LEFT JOIN customers ON orders.customer_id = customers.customer_id',
        )

    def test_select_with_named_filter(self):
        operation = QueryOperation.select(
            'products', conditions=[Condition('stock', '<=', 10)], filter_name='low_stock'
        )
        self.assertEqual(operation.render(), 'SELECT * FROM products WHERE stock <= 10 -- filter: low_stock')

    def test_insert(self):
        operation = QueryOperation.insert('products', {'sku': 'WH-001', 'price': Decimal('129.99'), 'stock': 45})
        self.assertEqual(
            operation.render(),
            "INSERT INTO products (sku, price, stock) VALUES ('WH-001', 129.99, 45)",
        )

    def test_update(self):
        operation = QueryOperation.update('products', 'sku', 'WH-001', {'stock': 3})
        self.assertEqual(operation.render(), "UPDATE products SET stock = 3 WHERE sku = 'WH-001'")

    def test_delete(self):
        operation = QueryOperation.delete('suppliers', 'supplier_id', 'abc')
        self.assertEqual(operation.render(), "DELETE FROM suppliers WHERE supplier_id = 'abc'")

    def test_raw_text_is_shown_verbatim(self):
        self.assertEqual(QueryOperation.raw('  select 1 ').render(), '  select 1 ')

    def test_literal_quotes_are_doubled(self):
        self.assertEqual(sql_literal("O'Brien"), "'O''Brien'")
        self.assertEqual(sql_literal(None), 'NULL')
        self.assertEqual(sql_literal(True), 'TRUE')

    def test_entry_description_renders_operation(self):
        entry = QueryLogEntry.create(QueryOperation.select('shipping'), 'Fetch Shipments')
        self.assertEqual(entry.description, 'SELECT * FROM shipping')
        self.assertEqual(entry.as_dict()['kind'], 'select')


class QueryLogStoreTests(SimpleTestCase):
    """Test store ordering, counts and notifications"""

    def setUp(self):
        self.store = QueryLogStore()

    def test_entries_are_newest_first(self):
        first = self.store.append('SELECT * FROM products', 'Fetch Products')
        second = self.store.append('SELECT * FROM customers', 'Fetch Customers')
        third = self.store.append('SELECT * FROM orders', 'Fetch Orders')
        self.assertEqual([e.id for e in self.store.all()], [third.id, second.id, first.id])

    def test_count_is_appends_since_clear(self):
        for i in range(3):
            self.store.append(f'query {i}', 'test')
        self.store.clear()
        self.assertEqual(len(self.store.all()), 0)
        self.store.append('after clear', 'test')
        self.store.append('after clear again', 'test')
        self.assertEqual(len(self.store.all()), 2)
        self.assertEqual(len(self.store), 2)

    def test_append_accepts_empty_strings(self):
        entry = self.store.append('', '')
        self.assertEqual(entry.description, '')
        self.assertEqual(entry.source, '')
        self.assertIsNotNone(entry.id)
        self.assertIsNotNone(entry.timestamp)

    def test_append_generates_unique_ids(self):
        ids = {self.store.append('q', 's').id for _ in range(20)}
        self.assertEqual(len(ids), 20)

    def test_all_is_a_snapshot(self):
        self.store.append('q1', 's')
        snapshot = self.store.all()
        self.store.append('q2', 's')
        self.assertEqual(len(snapshot), 1)

    def test_record_duration_replaces_slot(self):
        older = self.store.append('q1', 's')
        entry = self.store.append('q2', 's')
        updated = self.store.record_duration(entry, 12.5)
        self.assertEqual(updated.duration_ms, 12.5)
        self.assertEqual(updated.id, entry.id)
        self.assertEqual(updated.timestamp, entry.timestamp)
        self.assertIsNone(entry.duration_ms)
        self.assertEqual(self.store.all(), (updated, older))

    def test_record_duration_ignores_unknown_entries(self):
        stray = QueryLogEntry.create('q', 's')
        self.assertIsNone(self.store.record_duration(stray, 1.0))

    def test_subscribers_are_notified_until_unsubscribed(self):
        calls = []
        unsubscribe = self.store.subscribe(lambda store: calls.append(len(store)))
        self.store.append('q1', 's')
        self.store.clear()
        unsubscribe()
        self.store.append('q2', 's')
        self.assertEqual(calls, [1, 0])

    def test_failing_subscriber_does_not_break_append(self):
        def broken(store):
            raise RuntimeError('boom')

        self.store.subscribe(broken)
        with self.assertLogs('stockroom.querylog.store', level='ERROR'):
            entry = self.store.append('q', 's')
        self.assertEqual(self.store.all(), (entry,))


class FailingClipboard:
    def write_text(self, text):
        raise OSError('clipboard unavailable')


class QueryLogViewerTests(SimpleTestCase):
    """Test the collapsible SQL Queries panel"""

    def setUp(self):
        self.store = QueryLogStore()
        self.toasts = ToastQueue()
        self.viewer = QueryLogViewer(self.store, toast_queue=self.toasts)

    def test_title_without_entries(self):
        self.assertEqual(self.viewer.title, 'SQL Queries')

    def test_title_counts_entries(self):
        for i in range(3):
            self.store.append(f'SELECT {i}', 'test')
        self.assertEqual(self.viewer.title, 'SQL Queries (3)')

    def test_collapsed_render_shows_header_only(self):
        self.store.append('SELECT * FROM products', 'Fetch Products')
        html = self.viewer.render()
        self.assertIn('SQL Queries (1)', html)
        self.assertNotIn('SELECT * FROM products', html)
        self.assertNotIn(EMPTY_STATE, html)

    def test_expanded_empty_store_shows_empty_state(self):
        self.viewer.toggle()
        self.assertIn(EMPTY_STATE, self.viewer.render())
        self.assertEqual(self.viewer.as_dict()['empty_message'], EMPTY_STATE)

    def test_expanded_render_shows_one_row_per_entry(self):
        for table in ('products', 'customers', 'orders'):
            self.store.append(f'SELECT * FROM {table}', f'Fetch {table}')
        self.viewer.toggle()
        html = self.viewer.render()
        self.assertEqual(html.count('class="query-log__entry"'), 3)
        self.assertNotIn(EMPTY_STATE, html)

    def test_duration_shown_when_present(self):
        entry = self.store.append('SELECT 1', 'test')
        self.store.record_duration(entry, 41.6)
        self.viewer.toggle()
        self.assertIn('42ms', self.viewer.render())

    def test_render_refreshes_after_store_change(self):
        self.viewer.toggle()
        self.assertIn(EMPTY_STATE, self.viewer.render())
        self.store.append('SELECT * FROM suppliers', 'Fetch Suppliers')
        self.assertIn('SELECT * FROM suppliers', self.viewer.render())

    def test_toggle_does_not_touch_store(self):
        self.store.append('SELECT 1', 'test')
        before = self.store.all()
        self.assertTrue(self.viewer.toggle())
        self.assertFalse(self.viewer.toggle())
        self.assertEqual(self.store.all(), before)

    def test_entries_only_listed_when_expanded(self):
        self.store.append('SELECT 1', 'test')
        self.assertEqual(self.viewer.as_dict()['entries'], [])
        self.viewer.toggle()
        self.assertEqual(len(self.viewer.as_dict()['entries']), 1)

    def test_copy_writes_only_that_description(self):
        self.store.append('SELECT * FROM products', 'Fetch Products')
        target = self.store.append('DELETE FROM products WHERE sku = 1', 'Delete Product')
        text = self.viewer.copy(target.id)
        self.assertEqual(text, 'DELETE FROM products WHERE sku = 1')
        self.assertEqual(self.viewer.clipboard.text, 'DELETE FROM products WHERE sku = 1')
        toast = self.toasts.drain()[0]
        self.assertEqual(toast.title, 'Copied to clipboard')
        self.assertEqual(toast.duration, COPY_TOAST_DURATION_MS)
        self.assertFalse(toast.is_destructive)

    def test_copy_unknown_entry(self):
        self.assertIsNone(self.viewer.copy('missing'))
        self.assertEqual(len(self.toasts), 0)

    def test_clipboard_failure_is_reported(self):
        viewer = QueryLogViewer(self.store, clipboard=FailingClipboard(), toast_queue=self.toasts)
        entry = self.store.append('SELECT 1', 'test')
        with self.assertLogs('stockroom.querylog.viewer', level='WARNING'):
            self.assertIsNone(viewer.copy(entry.id))
        self.assertTrue(self.toasts.drain()[0].is_destructive)

    def test_single_query_string_becomes_one_entry(self):
        viewer = QueryLogViewer(query='SELECT * FROM suppliers')
        self.assertEqual(viewer.title, 'SQL Queries (1)')
        self.assertEqual(viewer.entries[0].description, 'SELECT * FROM suppliers')
        self.assertEqual(viewer.entries[0].source, '')

    def test_close_stops_listening(self):
        self.viewer.close()
        self.store.append('SELECT 1', 'test')
        self.assertEqual(self.viewer.title, 'SQL Queries (1)')
