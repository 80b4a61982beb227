"""
URL configuration for the shop backend.
"""
from django.contrib import admin
from django.urls import path, include
from django.http import JsonResponse


def health_check(request):
    """Health check endpoint for container orchestration."""
    return JsonResponse({'status': 'healthy', 'service': 'shop-api'})


urlpatterns = [
    path('admin/', admin.site.urls),
    path('health', health_check, name='health-check'),
    path('', include('catalog.urls')),
    path('', include('accounts.urls')),
    path('', include('orders.urls')),
]
