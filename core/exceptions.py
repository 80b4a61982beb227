"""
Error taxonomy shared by all apps and the DRF exception handler that renders it.

Every handled failure is rendered as:
    {"error": "<kind>", "detail": "<message>"}
"""
import logging

from django.db import DatabaseError
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler

logger = logging.getLogger(__name__)


class ShopError(Exception):
    """Base class for failures that map onto an HTTP status."""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    error = 'Server Error'

    def __init__(self, detail: str = ''):
        self.detail = detail or self.error
        super().__init__(self.detail)


class InvalidInput(ShopError):
    """Malformed or missing request fields."""
    status_code = status.HTTP_400_BAD_REQUEST
    error = 'Invalid Input'


class Unauthorized(ShopError):
    """Bad credentials."""
    status_code = status.HTTP_401_UNAUTHORIZED
    error = 'Unauthorized'


class Forbidden(ShopError):
    """Missing, invalid or expired token."""
    status_code = status.HTTP_403_FORBIDDEN
    error = 'Forbidden'


class NotFound(ShopError):
    status_code = status.HTTP_404_NOT_FOUND
    error = 'Not Found'


class ProductNotFound(NotFound):
    def __init__(self, product_id):
        self.product_id = product_id
        super().__init__(f"Product {product_id} not found")


class InsufficientStock(ShopError):
    """Raised when there's not enough stock for an order line."""
    status_code = status.HTTP_409_CONFLICT
    error = 'Insufficient Stock'

    def __init__(self, product_id: int, requested: int, available: int):
        self.product_id = product_id
        self.requested = requested
        self.available = available
        super().__init__(
            f"Insufficient stock for product {product_id}: "
            f"requested {requested}, available {available}"
        )


class StoreUnavailable(ShopError):
    """Connection, timeout or other database failure."""
    error = 'Store Unavailable'


class TransactionFailed(StoreUnavailable):
    error = 'Transaction Failed'


class OrderFailed(ShopError):
    """
    Any failure while placing an order. POST /order reports them all as a
    server error, keeping the label and detail of the underlying failure.
    """

    def __init__(self, error: str, detail):
        self.error = error
        super().__init__(detail)


def api_exception_handler(exc, context):
    """
    DRF exception handler.

    Renders ShopError subclasses, turns database errors into StoreUnavailable
    and hands everything else to DRF's default handler.
    """
    if isinstance(exc, DatabaseError):
        view = context.get('view')
        logger.exception(f"Store error in {view.__class__.__name__ if view else 'unknown view'}: {exc}")
        exc = StoreUnavailable(str(exc))

    if isinstance(exc, ShopError):
        return Response(
            {'error': exc.error, 'detail': exc.detail},
            status=exc.status_code
        )

    return exception_handler(exc, context)
