from rest_framework import serializers
from .models import User, UserPreference, ActivityLog


class UserSerializer(serializers.ModelSerializer):
    class Meta:
        model = User
        fields = ['id', 'username', 'email', 'first_name', 'last_name', 'phone', 'is_active', 'is_staff', 'created_at', 'updated_at']
        read_only_fields = ['created_at', 'updated_at']


class ActivityLogSerializer(serializers.ModelSerializer):
    username = serializers.CharField(source='user.username', read_only=True, default=None)

    class Meta:
        model = ActivityLog
        fields = ['id', 'user', 'username', 'action_type', 'table_name', 'record_id', 'details', 'ip_address', 'created_at']


class ActivityLogQuerySerializer(serializers.Serializer):
    table_name = serializers.CharField(required=False)
    action_type = serializers.CharField(required=False)
    limit = serializers.IntegerField(min_value=1, max_value=1000, required=False, default=100)


class AccountSettingsSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=300)
    email = serializers.EmailField()
    company = serializers.CharField(max_length=200, allow_blank=True, required=False, default='')
    role = serializers.CharField(max_length=100, allow_blank=True, required=False, default='')


class CompanySettingsSerializer(serializers.Serializer):
    companyName = serializers.CharField(max_length=200)
    website = serializers.CharField(max_length=200, allow_blank=True, required=False, default='')
    address = serializers.CharField(allow_blank=True, required=False, default='')
    phone = serializers.CharField(max_length=20, allow_blank=True, required=False, default='')


class PasswordChangeSerializer(serializers.Serializer):
    current_password = serializers.CharField(write_only=True)
    new_password = serializers.CharField(write_only=True, min_length=8)


class NotificationSettingsSerializer(serializers.Serializer):
    email_sales = serializers.BooleanField(required=False)
    email_updates = serializers.BooleanField(required=False)
    email_inventory = serializers.BooleanField(required=False)
    sms_alerts = serializers.BooleanField(required=False)
    desktop_alerts = serializers.BooleanField(required=False)


class AppearanceSettingsSerializer(serializers.Serializer):
    theme = serializers.ChoiceField(choices=UserPreference.THEME_CHOICES)
    density = serializers.ChoiceField(choices=UserPreference.DENSITY_CHOICES)
