"""
Serializers for order endpoints.
"""
from rest_framework import serializers
from .models import OrderLine


class OrderLineCreateSerializer(serializers.Serializer):
    """One entry of the `products` array in POST /order."""
    id = serializers.IntegerField(min_value=1)
    quantity = serializers.IntegerField(min_value=1)


class OrderCreateSerializer(serializers.Serializer):
    """
    Serializer for placing orders via POST /order

    Request format:
    {
        "products": [
            {"id": 1, "quantity": 2},
            {"id": 3, "quantity": 1}
        ]
    }

    The owner always comes from the bearer token; a body customerId is refused.
    """
    products = OrderLineCreateSerializer(many=True, allow_empty=False)

    def validate(self, attrs):
        if 'customerId' in self.initial_data:
            raise serializers.ValidationError(
                {'customerId': "Not accepted; the order owner is taken from the bearer token"}
            )
        return attrs


class MyOrderLineSerializer(serializers.ModelSerializer):
    """
    Response shape for GET /myorders: one order line joined with its
    order header and product.
    """
    orderId = serializers.IntegerField(source='order_id', read_only=True)
    productId = serializers.IntegerField(source='product_id', read_only=True)
    orderDate = serializers.DateTimeField(source='order.order_date', read_only=True)
    productName = serializers.CharField(source='product.name', read_only=True)
    price = serializers.DecimalField(
        source='product.price',
        max_digits=10,
        decimal_places=2,
        read_only=True
    )
    imageUrl = serializers.CharField(source='product.image_url', read_only=True)
    category = serializers.CharField(source='product.category_id', read_only=True, allow_null=True)

    class Meta:
        model = OrderLine
        fields = [
            'orderId', 'productId', 'orderDate', 'productName',
            'price', 'imageUrl', 'category', 'quantity'
        ]
