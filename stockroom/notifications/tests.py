"""
Test suite for Notifications module
"""
from django.test import TestCase
from rest_framework import status
from stockroom.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from .models import Notification


class NotificationTests(TestCase):
    """Test notification endpoints"""

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)
        TestDataFactory.create_notification(self.user, title='Low stock')
        TestDataFactory.create_notification(self.user, title='Order shipped', read=True)
        TestDataFactory.create_notification(TestDataFactory.create_user(), title='Not mine')

    def test_list(self):
        response = self.client.get('/api/v1/notifications/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['count'], 2)
        self.assertEqual(response.data['unread_count'], 1)

    def test_list_unread(self):
        response = self.client.get('/api/v1/notifications/?filter=unread')
        self.assertEqual([n['title'] for n in response.data['results']], ['Low stock'])

    def test_mark_all_read(self):
        response = self.client.post('/api/v1/notifications/mark-all-read/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['updated'], 1)
        self.assertFalse(Notification.objects.filter(user=self.user, read=False).exists())
        self.assertTrue(Notification.objects.filter(title='Not mine', read=False).exists())
