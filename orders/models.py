"""
Order Models - Order headers and their lines.

An Order and all of its OrderLines are written in the same transaction as
the matching stock decrements (see orders.services.place_order), so a
header without its lines is never visible.
"""
from django.db import models
from django.core.validators import MinValueValidator
from django.utils import timezone

from accounts.models import User
from catalog.models import Product


class Order(models.Model):
    """
    Order header: identity, timestamp and owning user.
    """
    order_date = models.DateTimeField(
        default=timezone.now,
        db_index=True,
        help_text="Server time when the order was placed"
    )
    customer = models.ForeignKey(
        User,
        on_delete=models.PROTECT,
        related_name='orders',
        help_text="User who placed the order"
    )

    class Meta:
        verbose_name = 'Order'
        verbose_name_plural = 'Orders'
        ordering = ['-order_date']
        indexes = [
            models.Index(fields=['customer', 'order_date'], name='order_customer_date_idx'),
        ]

    def __str__(self):
        return f"Order #{self.id} - {self.customer_id}"

    @property
    def line_count(self) -> int:
        return self.lines.count()


class OrderLine(models.Model):
    """
    One product and quantity within an order.
    """
    order = models.ForeignKey(
        Order,
        on_delete=models.CASCADE,
        related_name='lines',
        help_text="Parent order"
    )
    product = models.ForeignKey(
        Product,
        on_delete=models.PROTECT,  # Prevent deletion of products with orders
        related_name='order_lines',
        help_text="Ordered product"
    )
    quantity = models.PositiveIntegerField(
        validators=[MinValueValidator(1)],
        help_text="Quantity ordered"
    )

    class Meta:
        verbose_name = 'Order Line'
        verbose_name_plural = 'Order Lines'
        ordering = ['id']
        constraints = [
            models.CheckConstraint(
                condition=models.Q(quantity__gte=1),
                name='order_line_quantity_positive'
            )
        ]

    def __str__(self):
        return f"{self.quantity}x {self.product.name}"
