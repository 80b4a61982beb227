"""
Order Service Layer - Atomic order placement.

place_order() runs in a single transaction:
1. Insert the order header
2. Lock the referenced product rows with select_for_update()
3. For each line, in request order: re-read stock, validate, insert the
   line, decrement stock with a conditional UPDATE
4. If ANY line fails: raise, the whole transaction rolls back
5. If ALL pass: commit and return the order
"""
import logging
from typing import Dict, Sequence

from django.db import DatabaseError, transaction
from django.db.models import F, QuerySet
from django.utils import timezone

from accounts.models import User
from catalog.models import Product
from core.exceptions import (
    InsufficientStock,
    InvalidInput,
    ProductNotFound,
    ShopError,
    TransactionFailed,
)
from .models import Order, OrderLine

logger = logging.getLogger(__name__)


def _is_positive_int(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value >= 1


def _lock_products(lines: Sequence[Dict]) -> None:
    """
    Take row locks on every referenced product up front.

    Locks are taken in primary key order so two orders touching the same
    products in a different order cannot deadlock.
    """
    product_ids = sorted({
        line.get('id') for line in lines
        if isinstance(line.get('id'), int) and not isinstance(line.get('id'), bool)
    })
    if product_ids:
        list(
            Product.objects.select_for_update()
            .filter(pk__in=product_ids)
            .order_by('pk')
            .values_list('pk', flat=True)
        )


def _place_line(order: Order, index: int, line: Dict) -> OrderLine:
    product_id = line.get('id')
    quantity = line.get('quantity')

    if not _is_positive_int(quantity):
        raise InvalidInput(f"Line {index}: quantity must be a positive integer")

    try:
        product = Product.objects.select_for_update().get(pk=product_id)
    except (Product.DoesNotExist, ValueError, TypeError):
        raise ProductNotFound(product_id)

    if product.units_stored < quantity:
        raise InsufficientStock(product.id, quantity, product.units_stored)

    order_line = OrderLine.objects.create(
        order=order,
        product=product,
        quantity=quantity
    )

    # The WHERE clause re-asserts the invariant, so a concurrent decrement
    # that slipped past the check above updates zero rows
    updated = Product.objects.filter(
        pk=product.pk,
        units_stored__gte=quantity
    ).update(units_stored=F('units_stored') - quantity)
    if updated != 1:
        available = Product.objects.filter(pk=product.pk).values_list('units_stored', flat=True).first()
        raise InsufficientStock(product.id, quantity, available or 0)

    logger.debug(
        f"Order #{order.id}: line {index} takes {quantity} of product {product.id}, "
        f"remaining stock: {product.units_stored - quantity}"
    )
    return order_line


def place_order(user: User, lines: Sequence[Dict]) -> Order:
    """
    Place an order for `user` atomically.

    Args:
        user: Authenticated owner of the order
        lines: Sequence of dicts with 'id' (product id) and 'quantity'

    Returns:
        The committed Order

    Raises:
        InvalidInput: Empty order or non-positive / non-integer quantity
        ProductNotFound: A referenced product does not exist
        InsufficientStock: A product has fewer units than requested
        TransactionFailed: The database failed, including at commit
    """
    if not lines:
        raise InvalidInput("Order must contain at least one product")

    try:
        with transaction.atomic():
            order = Order.objects.create(
                customer=user,
                order_date=timezone.now()
            )
            _lock_products(lines)
            for index, line in enumerate(lines):
                _place_line(order, index, line)
    except ShopError as e:
        logger.warning(f"Order for user #{user.id} rejected: {e}")
        raise
    except DatabaseError as e:
        logger.exception(f"Order for user #{user.id} failed in the store: {e}")
        raise TransactionFailed(str(e)) from e

    logger.info(f"Order #{order.id} placed for user #{user.id}: {len(lines)} lines")
    return order


def list_order_lines_for_user(user: User) -> QuerySet:
    """
    All order lines of `user`, joined with their order and product.

    Uses select_related to avoid N+1 queries.
    """
    return (
        OrderLine.objects
        .filter(order__customer=user)
        .select_related('order', 'product')
        .order_by('order_id', 'id')
    )
