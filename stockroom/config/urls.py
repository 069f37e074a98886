"""
URL configuration for the stockroom admin project.

The `urlpatterns` list routes URLs to views. For more information please see:
    https://docs.djangoproject.com/en/5.2/topics/http/urls/
"""
from django.contrib import admin
from django.urls import path, include

admin.site.site_header = "Stockroom Admin Panel"
admin.site.site_title = "Stockroom Admin Portal"
admin.site.index_title = "Inventory and order management"

urlpatterns = [
    path('admin/', admin.site.urls),
    path('api/v1/', include('stockroom.core.urls')),
    path('api/v1/', include('stockroom.orders.urls')),
    path('api/v1/', include('stockroom.notifications.urls')),
    path('api/v1/', include('stockroom.screens.urls')),
    path('api/v1/', include('stockroom.reports.urls')),
]
