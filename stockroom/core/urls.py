from django.urls import path
from rest_framework_simplejwt.views import TokenRefreshView
from .views import (
    CustomTokenObtainPairView, user_me,
    activity_log_list,
    settings_detail, settings_account, settings_company, settings_password,
    settings_notifications, settings_appearance,
)

urlpatterns = [
    # Auth endpoints
    path('auth/login/', CustomTokenObtainPairView.as_view(), name='token_obtain_pair'),
    path('auth/refresh/', TokenRefreshView.as_view(), name='token_refresh'),
    path('auth/me/', user_me, name='user-me'),

    # ActivityLog endpoints
    path('activity-logs/', activity_log_list, name='activity-log-list'),

    # Settings endpoints (always scoped to the authenticated user)
    path('settings/', settings_detail, name='settings-detail'),
    path('settings/account/', settings_account, name='settings-account'),
    path('settings/company/', settings_company, name='settings-company'),
    path('settings/password/', settings_password, name='settings-password'),
    path('settings/notifications/', settings_notifications, name='settings-notifications'),
    path('settings/appearance/', settings_appearance, name='settings-appearance'),
]
