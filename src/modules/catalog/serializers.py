"""Catalog DRF serializers (read side).

Writes are validated by the pydantic DTOs in ``dtos.py``.
"""

from __future__ import annotations

from rest_framework import serializers

from modules.catalog.models import Category, HeroImage, Product


class CategorySerializer(serializers.ModelSerializer):
    class Meta:
        model = Category
        fields = ["id", "name", "slug", "image_url", "image_hint", "display_order"]
        read_only_fields = fields


class ProductSerializer(serializers.ModelSerializer):
    category = serializers.SlugRelatedField(slug_field="slug", read_only=True)
    category_name = serializers.CharField(read_only=True)

    class Meta:
        model = Product
        fields = [
            "id",
            "name",
            "description",
            "price",
            "category",
            "category_name",
            "image_url",
            "image_hint",
            "stock",
            "rating",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class HeroImageSerializer(serializers.ModelSerializer):
    class Meta:
        model = HeroImage
        fields = [
            "id",
            "image_url",
            "alt_text",
            "image_hint",
            "display_order",
            "is_active",
            "link_url",
        ]
        read_only_fields = fields
