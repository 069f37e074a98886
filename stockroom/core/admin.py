from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin
from .models import User, UserPreference, ActivityLog


@admin.register(User)
class UserAdmin(BaseUserAdmin):
    list_display = ['username', 'email', 'first_name', 'last_name', 'is_active', 'is_staff', 'date_joined']
    list_filter = ['is_active', 'is_staff', 'is_superuser', 'date_joined']
    search_fields = ['username', 'email', 'first_name', 'last_name']
    ordering = ['username']
    fieldsets = BaseUserAdmin.fieldsets + (
        ('Additional Info', {'fields': ('phone',)}),
    )


@admin.register(UserPreference)
class UserPreferenceAdmin(admin.ModelAdmin):
    list_display = ['user', 'role', 'theme', 'density', 'updated_at']
    search_fields = ['user__username', 'role']
    readonly_fields = ['updated_at']


@admin.register(ActivityLog)
class ActivityLogAdmin(admin.ModelAdmin):
    list_display = ['user', 'action_type', 'table_name', 'record_id', 'ip_address', 'created_at']
    list_filter = ['action_type', 'table_name', 'created_at']
    search_fields = ['user__username', 'table_name', 'record_id']
    ordering = ['-created_at']
    readonly_fields = ['user', 'action_type', 'table_name', 'record_id', 'details', 'ip_address', 'created_at']
