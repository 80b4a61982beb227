"""
Order API Views.

Implements:
- POST /order - Place an order with an atomic transaction
- GET /myorders - Order lines of the authenticated user
"""
from rest_framework import generics
from rest_framework.exceptions import ParseError, ValidationError
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from accounts.authentication import JWTAuthentication
from core.exceptions import InvalidInput, OrderFailed, ShopError
from .serializers import OrderCreateSerializer, MyOrderLineSerializer
from .services import place_order, list_order_lines_for_user


class OrderCreateView(APIView):
    """
    POST: Place an order for the token owner.

    Request Body:
    {
        "products": [
            {"id": 1, "quantity": 2},
            {"id": 3, "quantity": 1}
        ]
    }

    Returns:
        - 200: {"orderId": 17}
        - 403: Missing or invalid token
        - 500: Any validation, stock or store failure, as
               {"error": "<kind>", "detail": "<message>"}
    """
    authentication_classes = [JWTAuthentication]
    permission_classes = [IsAuthenticated]

    def post(self, request):
        try:
            serializer = OrderCreateSerializer(data=request.data)
            serializer.is_valid(raise_exception=True)
            order = place_order(request.user, serializer.validated_data['products'])
        except (ParseError, ValidationError) as e:
            raise OrderFailed(InvalidInput.error, e.detail) from e
        except ShopError as e:
            raise OrderFailed(e.error, e.detail) from e

        return Response({'orderId': order.id})


class MyOrdersView(generics.ListAPIView):
    """
    GET: Every order line of the token owner, joined with order and product.
    """
    authentication_classes = [JWTAuthentication]
    permission_classes = [IsAuthenticated]
    serializer_class = MyOrderLineSerializer

    def get_queryset(self):
        return list_order_lines_for_user(self.request.user)
