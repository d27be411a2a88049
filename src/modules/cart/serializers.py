"""Cart DRF serializers."""

from __future__ import annotations

from rest_framework import serializers

from modules.cart.engine import MAX_LINE_QUANTITY


class AddCartItemSerializer(serializers.Serializer):
    item_id = serializers.UUIDField()
    quantity = serializers.IntegerField(required=False, default=1, max_value=MAX_LINE_QUANTITY)


class UpdateCartItemSerializer(serializers.Serializer):
    quantity = serializers.IntegerField(max_value=MAX_LINE_QUANTITY)


class CartLineSerializer(serializers.Serializer):
    item_id = serializers.CharField()
    name = serializers.CharField(source="item.name")
    unit_price = serializers.DecimalField(
        max_digits=10, decimal_places=2, source="item.unit_price"
    )
    image_url = serializers.CharField(source="item.image_url")
    category = serializers.CharField(source="item.category")
    quantity = serializers.IntegerField()
    line_total = serializers.DecimalField(max_digits=None, decimal_places=2)


class CartSerializer(serializers.Serializer):
    """Read-only view of a ``Cart``; totals are derived, never stored."""

    lines = CartLineSerializer(many=True)
    item_count = serializers.IntegerField()
    subtotal = serializers.DecimalField(max_digits=None, decimal_places=2)
    shipping_cost = serializers.DecimalField(max_digits=None, decimal_places=2)
    grand_total = serializers.DecimalField(max_digits=None, decimal_places=2)
