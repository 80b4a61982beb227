"""
Django Admin configuration for order models.

Orders are created only by order placement, so the admin is read-only.
"""
from django.contrib import admin
from .models import Order, OrderLine


class OrderLineInline(admin.TabularInline):
    model = OrderLine
    extra = 0
    readonly_fields = ['product', 'quantity']
    can_delete = False

    def has_add_permission(self, request, obj=None):
        return False


@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    list_display = ['id', 'customer', 'order_date', 'line_count']
    list_filter = ['order_date']
    search_fields = ['id', 'customer__username']
    ordering = ['-order_date']
    readonly_fields = ['customer', 'order_date']
    inlines = [OrderLineInline]

    def has_add_permission(self, request):
        return False

    def has_delete_permission(self, request, obj=None):
        return False


@admin.register(OrderLine)
class OrderLineAdmin(admin.ModelAdmin):
    list_display = ['id', 'order', 'product', 'quantity']
    search_fields = ['product__name', 'order__id']
    ordering = ['-id']
    raw_id_fields = ['order', 'product']

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
