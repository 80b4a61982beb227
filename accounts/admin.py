"""
Django Admin configuration for shop users.
"""
from django.contrib import admin
from .models import User


@admin.register(User)
class UserAdmin(admin.ModelAdmin):
    list_display = ['id', 'username', 'first_name', 'last_name', 'user_permissions', 'order_count']
    list_filter = ['user_permissions']
    search_fields = ['username', 'first_name', 'last_name']
    ordering = ['username']
    exclude = ['password']

    def order_count(self, obj):
        return obj.orders.count()
    order_count.short_description = 'Orders'
