"""Catalog API views.

Listings are public; writes require a staff user.  Domain errors raised by
``CatalogService`` are translated by ``modules.core.errors``.
"""

from __future__ import annotations

from rest_framework import status
from rest_framework.decorators import action
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.throttling import BaseThrottle
from rest_framework.viewsets import GenericViewSet

from modules.catalog.dtos import (
    BulkCreateProductsDTO,
    CreateCategoryDTO,
    CreateHeroImageDTO,
    CreateProductDTO,
    UpdateProductDTO,
)
from modules.catalog.filters import ProductFilter
from modules.catalog.repositories import (
    CategoryDjangoRepository,
    HeroImageDjangoRepository,
    ProductDjangoRepository,
)
from modules.catalog.serializers import (
    CategorySerializer,
    HeroImageSerializer,
    ProductSerializer,
)
from modules.catalog.services import CatalogService
from modules.core.pagination import StandardResultsSetPagination
from modules.core.permissions import IsAdminOrReadOnly


def build_catalog_service() -> CatalogService:
    return CatalogService(
        product_repository=ProductDjangoRepository(),
        category_repository=CategoryDjangoRepository(),
        hero_image_repository=HeroImageDjangoRepository(),
    )


class CatalogViewSetMixin:
    """Shared wiring: service construction and admin write throttling."""

    permission_classes = [IsAdminOrReadOnly]

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = build_catalog_service()

    def get_throttles(self) -> list[BaseThrottle]:
        is_write = self.action not in {"list", "retrieve", None}
        self.throttle_scope = "catalog_admin" if is_write else None
        return super().get_throttles()


class ProductViewSet(CatalogViewSetMixin, GenericViewSet):
    serializer_class = ProductSerializer
    pagination_class = StandardResultsSetPagination

    def list(self, request: Request) -> Response:
        """GET /api/v1/products/?name=&category=&min_price=&max_price="""
        filters = ProductFilter(request.query_params).to_lookups()
        products = self._service.list_items(filters)
        page = self.paginate_queryset(products)
        return self.get_paginated_response(ProductSerializer(page, many=True).data)

    def retrieve(self, request: Request, pk: str | None = None) -> Response:
        product = self._service.get_item(pk)
        return Response(ProductSerializer(product).data)

    def create(self, request: Request) -> Response:
        product = self._service.create_item(CreateProductDTO.model_validate(request.data))
        return Response(ProductSerializer(product).data, status=status.HTTP_201_CREATED)

    def partial_update(self, request: Request, pk: str | None = None) -> Response:
        product = self._service.update_item(pk, UpdateProductDTO.model_validate(request.data))
        return Response(ProductSerializer(product).data)

    def destroy(self, request: Request, pk: str | None = None) -> Response:
        self._service.delete_item(pk)
        return Response(status=status.HTTP_204_NO_CONTENT)

    @action(detail=False, methods=["post"], url_path="bulk")
    def bulk(self, request: Request) -> Response:
        """POST /api/v1/products/bulk/ with a JSON array of products."""
        payload = request.data
        if isinstance(payload, list):
            payload = {"products": payload}
        dto = BulkCreateProductsDTO.model_validate(payload)
        products = self._service.bulk_create_items(list(dto.products))
        return Response(
            ProductSerializer(products, many=True).data,
            status=status.HTTP_201_CREATED,
        )


class CategoryViewSet(CatalogViewSetMixin, GenericViewSet):
    serializer_class = CategorySerializer
    pagination_class = None

    def list(self, request: Request) -> Response:
        categories = self._service.list_groupings()
        return Response(CategorySerializer(categories, many=True).data)

    def create(self, request: Request) -> Response:
        category = self._service.create_grouping(CreateCategoryDTO.model_validate(request.data))
        return Response(CategorySerializer(category).data, status=status.HTTP_201_CREATED)


class HeroImageViewSet(CatalogViewSetMixin, GenericViewSet):
    serializer_class = HeroImageSerializer
    pagination_class = None

    def list(self, request: Request) -> Response:
        heroes = self._service.list_hero_images()
        return Response(HeroImageSerializer(heroes, many=True).data)

    def create(self, request: Request) -> Response:
        hero = self._service.create_hero_image(CreateHeroImageDTO.model_validate(request.data))
        return Response(HeroImageSerializer(hero).data, status=status.HTTP_201_CREATED)
