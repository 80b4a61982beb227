"""
Serializers for catalog models.
Request schemas validate bodies before any service runs; response schemas
produce the camelCase JSON the storefront consumes.
"""
from rest_framework import serializers
from .models import Category, Product


class CategorySerializer(serializers.ModelSerializer):
    """Response shape for GET /categories."""
    categoryName = serializers.CharField(source='name', read_only=True)
    categoryDescription = serializers.CharField(source='description', read_only=True)
    imageUrl = serializers.CharField(source='image_url', read_only=True)

    class Meta:
        model = Category
        fields = ['categoryName', 'categoryDescription', 'imageUrl']


class CategoryBulkCreateSerializer(serializers.ListSerializer):

    def validate(self, attrs):
        names = [row['name'] for row in attrs]
        if len(names) != len(set(names)):
            raise serializers.ValidationError("Duplicate category names in request")
        return attrs


class CategoryCreateSerializer(serializers.Serializer):
    """One element of the POST /categories array."""
    categoryName = serializers.CharField(source='name', max_length=100)
    description = serializers.CharField(allow_blank=True, required=False, default='')
    imageUrl = serializers.CharField(source='image_url', max_length=255, allow_blank=True, required=False, default='')

    class Meta:
        list_serializer_class = CategoryBulkCreateSerializer

    def validate_categoryName(self, value):
        if Category.objects.filter(pk=value).exists():
            raise serializers.ValidationError(f"Category '{value}' already exists")
        return value


class ProductSerializer(serializers.ModelSerializer):
    """Response shape for product endpoints."""
    productName = serializers.CharField(source='name', read_only=True)
    unitsStored = serializers.IntegerField(source='units_stored', read_only=True)
    productDescription = serializers.CharField(source='description', read_only=True)
    imageUrl = serializers.CharField(source='image_url', read_only=True)
    category = serializers.PrimaryKeyRelatedField(read_only=True)

    class Meta:
        model = Product
        fields = [
            'id', 'productName', 'price', 'unitsStored',
            'productDescription', 'imageUrl', 'category'
        ]


class ProductCreateSerializer(serializers.Serializer):
    """One element of the POST /products array."""
    productName = serializers.CharField(source='name', max_length=200)
    price = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=0)
    unitsStored = serializers.IntegerField(source='units_stored', min_value=0, required=False, default=0)
    productDescription = serializers.CharField(source='description', allow_blank=True, required=False, default='')
    imageUrl = serializers.CharField(source='image_url', max_length=255, allow_blank=True, required=False, default='')
    category = serializers.PrimaryKeyRelatedField(
        queryset=Category.objects.all(),
        allow_null=True,
        required=False,
        default=None
    )


class UnitsStoredRequestSerializer(serializers.Serializer):
    """Body of POST /units_stored."""
    productId = serializers.IntegerField()
