from django.urls import path
from .views import notification_list, notification_mark_all_read

urlpatterns = [
    path('notifications/', notification_list, name='notification-list'),
    path('notifications/mark-all-read/', notification_mark_all_read, name='notification-mark-all-read'),
]
