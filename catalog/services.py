"""
Catalog Service Layer.

Reader: read-only single-statement lookups (no transaction needed).
Writer: single-row inserts plus bulk variants that insert a whole batch
inside one transaction, so a failing row leaves nothing behind.
"""
import logging
from decimal import Decimal
from typing import Dict, Iterable, List, Optional

from django.db import transaction
from django.db.models import QuerySet

from core.exceptions import NotFound
from .models import Category, Product

logger = logging.getLogger(__name__)


# =============================================================================
# Reader
# =============================================================================

def list_categories() -> QuerySet:
    """All categories, ordered by name."""
    return Category.objects.order_by('name')


def list_products(category: Optional[str] = None) -> QuerySet:
    """All products, or only those whose category key equals `category`."""
    queryset = Product.objects.all()
    if category:
        queryset = queryset.filter(category_id=category)
    return queryset.order_by('id')


def get_product(product_id: int) -> Product:
    """Raises NotFound when no product has this id."""
    try:
        return Product.objects.get(pk=product_id)
    except Product.DoesNotExist:
        raise NotFound(f"Product {product_id} not found")


def get_units_stored(product_id: int) -> int:
    """Current stock of a product, read without loading the row."""
    units = Product.objects.filter(pk=product_id).values_list('units_stored', flat=True).first()
    if units is None:
        raise NotFound(f"Product {product_id} not found")
    return units


# =============================================================================
# Writer
# =============================================================================

def create_category(name: str, description: str = '', image_url: str = '') -> Category:
    """Insert one category; the caller owns the transaction."""
    return Category.objects.create(
        name=name,
        description=description,
        image_url=image_url
    )


def create_product(
    name: str,
    price: Decimal,
    units_stored: int = 0,
    description: str = '',
    image_url: str = '',
    category: Optional[Category] = None,
) -> Product:
    """Insert one product; the caller owns the transaction."""
    return Product.objects.create(
        name=name,
        price=price,
        units_stored=units_stored,
        description=description,
        image_url=image_url,
        category=category
    )


def create_categories(rows: Iterable[Dict]) -> List[Category]:
    """
    Insert a batch of categories atomically.

    Args:
        rows: dicts with keyword arguments for create_category()

    Returns:
        The created categories, in input order
    """
    with transaction.atomic():
        categories = [create_category(**row) for row in rows]
    logger.info(f"Added {len(categories)} categories")
    return categories


def create_products(rows: Iterable[Dict]) -> List[Product]:
    """
    Insert a batch of products atomically.

    Args:
        rows: dicts with keyword arguments for create_product()

    Returns:
        The created products, in input order
    """
    with transaction.atomic():
        products = [create_product(**row) for row in rows]
    logger.info(f"Added {len(products)} products")
    return products
