from django.contrib.auth.models import AbstractUser
from django.db import models
from django.core.serializers.json import DjangoJSONEncoder


class User(AbstractUser):
    """Admin user with additional contact fields"""
    phone = models.CharField(max_length=20, blank=True, null=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'users'


def default_notification_preferences():
    return {
        'email_sales': True,
        'email_updates': True,
        'email_inventory': True,
        'sms_alerts': False,
        'desktop_alerts': True,
    }


class UserPreference(models.Model):
    """Per-user dashboard settings (company info, notifications, appearance)"""
    THEME_CHOICES = [
        ('light', 'Light'),
        ('dark', 'Dark'),
        ('system', 'System'),
    ]
    DENSITY_CHOICES = [
        ('comfortable', 'Comfortable'),
        ('compact', 'Compact'),
    ]

    user = models.OneToOneField(User, on_delete=models.CASCADE, related_name='preference')
    company = models.JSONField(default=dict, blank=True)
    role = models.CharField(max_length=100, blank=True)
    notifications = models.JSONField(default=default_notification_preferences, blank=True)
    theme = models.CharField(max_length=20, choices=THEME_CHOICES, default='light')
    density = models.CharField(max_length=20, choices=DENSITY_CHOICES, default='comfortable')
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"Preferences for {self.user.username}"

    class Meta:
        db_table = 'user_preferences'


class ActivityLog(models.Model):
    """Audit trail of writes made from the dashboard screens"""
    ACTION_CHOICES = [
        ('create', 'Create'),
        ('update', 'Update'),
        ('delete', 'Delete'),
        ('settings_update', 'Settings Update'),
        ('password_change', 'Password Change'),
        ('order_place', 'Order Placed'),
    ]

    user = models.ForeignKey(User, on_delete=models.SET_NULL, null=True, blank=True, related_name='activity_logs')
    action_type = models.CharField(max_length=50, choices=ACTION_CHOICES)
    table_name = models.CharField(max_length=100)
    record_id = models.CharField(max_length=100)
    details = models.JSONField(default=dict, blank=True, encoder=DjangoJSONEncoder)
    ip_address = models.GenericIPAddressField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return f"{self.action_type} {self.table_name}:{self.record_id}"

    class Meta:
        db_table = 'activity_logs'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['-created_at'], name='idx_activity_created'),
            models.Index(fields=['action_type'], name='idx_activity_action'),
            models.Index(fields=['table_name'], name='idx_activity_table'),
        ]
