"""
Catalog API Views.

Implements:
- GET/POST /categories - List categories, bulk-add categories
- GET/POST /products - List products (optional ?category=), bulk-add products
- GET /products/{id} - Product detail
- POST /units_stored - Current stock level of a product
"""
from django.http import HttpResponse
from rest_framework import generics
from rest_framework.response import Response
from rest_framework.views import APIView

from . import services
from .serializers import (
    CategorySerializer,
    CategoryCreateSerializer,
    ProductSerializer,
    ProductCreateSerializer,
    UnitsStoredRequestSerializer,
)


# =============================================================================
# Category Views
# =============================================================================

class CategoryListCreateView(generics.ListAPIView):
    """
    GET: List all categories
    POST: Add an array of categories in one transaction

    Request Body (POST):
    [
        {"categoryName": "Books", "description": "...", "imageUrl": "books.png"}
    ]
    """
    serializer_class = CategorySerializer

    def get_queryset(self):
        return services.list_categories()

    def post(self, request):
        serializer = CategoryCreateSerializer(data=request.data, many=True, allow_empty=False)
        serializer.is_valid(raise_exception=True)
        services.create_categories(serializer.validated_data)
        return HttpResponse("Categories added!", content_type='text/plain')


# =============================================================================
# Product Views
# =============================================================================

class ProductListCreateView(generics.ListAPIView):
    """
    GET: List products
    POST: Add an array of products in one transaction

    Query Parameters (GET):
        - category: Only products in this category (exact match)
    """
    serializer_class = ProductSerializer

    def get_queryset(self):
        return services.list_products(self.request.query_params.get('category'))

    def post(self, request):
        serializer = ProductCreateSerializer(data=request.data, many=True, allow_empty=False)
        serializer.is_valid(raise_exception=True)
        services.create_products(serializer.validated_data)
        return HttpResponse("Products added!", content_type='text/plain')


class ProductDetailView(generics.RetrieveAPIView):
    """
    GET: Retrieve a product by id
    """
    serializer_class = ProductSerializer

    def get_object(self):
        return services.get_product(self.kwargs['pk'])


class UnitsStoredView(APIView):
    """
    POST: Current stock level for a product.

    Request Body:
        {"productId": 42}
    """

    def post(self, request):
        serializer = UnitsStoredRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        units = services.get_units_stored(serializer.validated_data['productId'])
        return Response({'units_stored': units})
