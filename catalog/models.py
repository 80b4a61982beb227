"""
Catalog Models - Categories and the products sold in the shop.

Models:
    - Category: Product categorization, identified by its name
    - Product: Items available for sale with their stock level
"""
from django.db import models
from django.core.validators import MinValueValidator
from decimal import Decimal


class Category(models.Model):
    """
    Product category. Immutable once created.
    """
    name = models.CharField(
        max_length=100,
        primary_key=True,
        help_text="Unique category name"
    )
    description = models.TextField(
        blank=True,
        default='',
        help_text="Optional category description"
    )
    image_url = models.CharField(
        max_length=255,
        blank=True,
        default='',
        help_text="Category image reference"
    )

    class Meta:
        verbose_name = 'Category'
        verbose_name_plural = 'Categories'
        ordering = ['name']

    def __str__(self):
        return self.name


class Product(models.Model):
    """
    Product entity representing items available for sale.

    units_stored never goes below zero: it is a PositiveIntegerField, carries a
    database check constraint, and is only decremented by order placement.
    """
    name = models.CharField(
        max_length=200,
        db_index=True,
        help_text="Product name for display"
    )
    price = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0.00'))],
        help_text="Unit price"
    )
    units_stored = models.PositiveIntegerField(
        default=0,
        validators=[MinValueValidator(0)],
        help_text="Units currently in stock"
    )
    description = models.TextField(
        blank=True,
        default='',
        help_text="Optional product description"
    )
    image_url = models.CharField(
        max_length=255,
        blank=True,
        default='',
        help_text="Product image reference"
    )
    category = models.ForeignKey(
        Category,
        on_delete=models.PROTECT,
        related_name='products',
        null=True,
        blank=True,
        help_text="Product category"
    )

    class Meta:
        verbose_name = 'Product'
        verbose_name_plural = 'Products'
        ordering = ['id']
        constraints = [
            models.CheckConstraint(
                condition=models.Q(units_stored__gte=0),
                name='product_units_stored_non_negative'
            )
        ]
        indexes = [
            models.Index(fields=['category', 'name'], name='product_category_name_idx'),
        ]

    def __str__(self):
        return f"{self.name} (${self.price})"
