"""
Django Admin configuration for catalog models.
"""
from django.contrib import admin
from .models import Category, Product


@admin.register(Category)
class CategoryAdmin(admin.ModelAdmin):
    list_display = ['name', 'product_count', 'image_url']
    search_fields = ['name', 'description']
    ordering = ['name']

    def get_readonly_fields(self, request, obj=None):
        # Categories are immutable once created
        if obj is not None:
            return ['name', 'description', 'image_url']
        return []

    def product_count(self, obj):
        return obj.products.count()
    product_count.short_description = 'Products'


@admin.register(Product)
class ProductAdmin(admin.ModelAdmin):
    list_display = ['id', 'name', 'price', 'units_stored', 'category']
    list_filter = ['category']
    search_fields = ['name', 'description']
    ordering = ['id']
    raw_id_fields = ['category']
