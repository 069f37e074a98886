"""
Comprehensive test suite for Core module
Tests: Authentication, Session context, Toasts, Activity logs, User settings
"""
from django.test import TestCase, RequestFactory, SimpleTestCase
from rest_framework import status
from stockroom.core.context import SessionContext, get_client_ip
from stockroom.core.models import ActivityLog, UserPreference
from stockroom.core.settings_service import SettingsError, UserSettingsService
from stockroom.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from stockroom.core import toasts
from stockroom.core.utils import create_activity_log


class AuthenticationTests(TestCase):
    """Test authentication endpoints"""

    def setUp(self):
        self.user = TestDataFactory.create_user(username='admin', password='s3cret-pass')
        self.client = AuthenticatedAPIClient()

    def test_login(self):
        response = self.client.post('/api/v1/auth/login/', {'username': 'admin', 'password': 's3cret-pass'})
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIn('access', response.data)
        self.assertIn('refresh', response.data)

    def test_login_wrong_password(self):
        response = self.client.post('/api/v1/auth/login/', {'username': 'admin', 'password': 'nope'})
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_me(self):
        self.client.authenticate_user(self.user)
        response = self.client.get('/api/v1/auth/me/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['username'], 'admin')


class SessionContextTests(TestCase):
    """Test building the acting-user context from a request"""

    def setUp(self):
        self.factory = RequestFactory()

    def test_forwarded_for_wins(self):
        request = self.factory.get('/', HTTP_X_FORWARDED_FOR='10.0.0.1, 10.0.0.2')
        self.assertEqual(get_client_ip(request), '10.0.0.1')

    def test_from_request(self):
        user = TestDataFactory.create_user()
        request = self.factory.get('/', REMOTE_ADDR='192.168.1.5')
        request.user = user
        context = SessionContext.from_request(request)
        self.assertEqual(context.user_id, user.pk)
        self.assertEqual(context.ip_address, '192.168.1.5')

    def test_anonymous_request_has_no_user(self):
        from django.contrib.auth.models import AnonymousUser
        request = self.factory.get('/')
        request.user = AnonymousUser()
        self.assertIsNone(SessionContext.from_request(request).user_id)


class ToastTests(SimpleTestCase):

    def test_error_is_destructive(self):
        self.assertTrue(toasts.error('boom').is_destructive)
        self.assertFalse(toasts.success('ok').is_destructive)

    def test_queue_drains_in_order(self):
        queue = toasts.ToastQueue()
        queue.push(toasts.success('one'))
        queue.push(toasts.success('two'))
        self.assertEqual([t.title for t in queue.drain()], ['one', 'two'])
        self.assertEqual(len(queue), 0)


class ActivityLogTests(TestCase):
    """Test activity log creation and listing"""

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)

    def test_missing_fields_skip_logging(self):
        with self.assertLogs('stockroom.core.utils', level='WARNING'):
            self.assertIsNone(create_activity_log(action_type='create', table_name='products'))
        self.assertEqual(ActivityLog.objects.count(), 0)

    def test_log_attributed_to_context_user(self):
        context = SessionContext(user=self.user, ip_address='127.0.0.1')
        log = create_activity_log(context, 'create', 'products', 'WH-001', {'stock': 5})
        self.assertEqual(log.user, self.user)
        self.assertEqual(log.record_id, 'WH-001')

    def test_list_filtered_by_table(self):
        create_activity_log(None, 'create', 'products', 'A')
        create_activity_log(None, 'delete', 'suppliers', 'B')
        response = self.client.get('/api/v1/activity-logs/?table_name=suppliers')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data), 1)
        self.assertEqual(response.data[0]['action_type'], 'delete')

    def test_list_limit(self):
        for record_id in ('A', 'B', 'C'):
            create_activity_log(None, 'create', 'products', record_id)
        response = self.client.get('/api/v1/activity-logs/?limit=2')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data), 2)

    def test_list_rejects_bad_limit(self):
        for limit in ('abc', '-1', '0'):
            response = self.client.get(f'/api/v1/activity-logs/?limit={limit}')
            self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
            self.assertIn('limit', response.data)


class UserSettingsServiceTests(TestCase):
    """Test settings are read and written for the acting user only"""

    def setUp(self):
        self.user = TestDataFactory.create_user(password='old-password')
        self.other = TestDataFactory.create_user()
        self.service = UserSettingsService(SessionContext(user=self.user))

    def test_requires_user(self):
        with self.assertRaises(SettingsError):
            UserSettingsService(SessionContext())

    def test_load_defaults(self):
        data = self.service.load()
        self.assertEqual(data['appearance'], {'theme': 'light', 'density': 'comfortable'})
        self.assertFalse(data['notifications']['sms_alerts'])
        self.assertTrue(data['notifications']['email_sales'])

    def test_save_account_settings(self):
        toast = self.service.save_account_settings('Jane Doe', 'jane@example.com', 'Acme', 'Manager')
        self.assertEqual(toast.title, 'Settings saved')
        self.user.refresh_from_db()
        self.assertEqual(self.user.first_name, 'Jane')
        self.assertEqual(self.user.last_name, 'Doe')
        self.assertEqual(UserPreference.objects.get(user=self.user).role, 'Manager')
        self.assertFalse(UserPreference.objects.filter(user=self.other).exists())
        self.assertTrue(ActivityLog.objects.filter(
            action_type='settings_update', record_id=str(self.user.pk)).exists())

    def test_save_company_settings(self):
        toast = self.service.save_company_settings('Acme', 'acme.example.com', '1 Road', '555-0100')
        self.assertEqual(toast.title, 'Company settings saved')
        self.assertEqual(self.service.load()['company']['website'], 'acme.example.com')

    def test_change_password(self):
        toast = self.service.change_password('old-password', 'new-password-1')
        self.assertEqual(toast.title, 'Password updated')
        self.user.refresh_from_db()
        self.assertTrue(self.user.check_password('new-password-1'))
        log = ActivityLog.objects.get(action_type='password_change')
        self.assertEqual(log.details, {})

    def test_change_password_wrong_current(self):
        toast = self.service.change_password('wrong', 'new-password-1')
        self.assertTrue(toast.is_destructive)
        self.user.refresh_from_db()
        self.assertTrue(self.user.check_password('old-password'))

    def test_notification_settings(self):
        toast = self.service.save_notification_settings({'sms_alerts': True, 'email_sales': False})
        self.assertFalse(toast.is_destructive)
        notifications = self.service.load()['notifications']
        self.assertTrue(notifications['sms_alerts'])
        self.assertFalse(notifications['email_sales'])
        self.assertTrue(notifications['desktop_alerts'])

    def test_unknown_notification_setting(self):
        self.assertTrue(self.service.save_notification_settings({'carrier_pigeon': True}).is_destructive)

    def test_appearance_settings(self):
        self.assertFalse(self.service.save_appearance_settings('dark', 'compact').is_destructive)
        self.assertTrue(self.service.save_appearance_settings('neon', 'compact').is_destructive)
        self.assertEqual(self.service.load()['appearance'], {'theme': 'dark', 'density': 'compact'})


class SettingsAPITests(TestCase):
    """Test settings endpoints"""

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)

    def test_get_settings(self):
        response = self.client.get('/api/v1/settings/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIn('appearance', response.data)

    def test_update_appearance(self):
        response = self.client.put('/api/v1/settings/appearance/', {'theme': 'system', 'density': 'compact'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['toast']['title'], 'Appearance settings saved')
        self.assertEqual(UserPreference.objects.get(user=self.user).theme, 'system')

    def test_password_change_wrong_current(self):
        response = self.client.post('/api/v1/settings/password/', {
            'current_password': 'wrong', 'new_password': 'another-pass-1'
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['toast']['variant'], 'destructive')

    def test_invalid_account_payload(self):
        response = self.client.put('/api/v1/settings/account/', {'name': 'X', 'email': 'not-an-email'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
