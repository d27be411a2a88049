"""Django ORM implementation of the catalog repositories.

Missing rows come back as ``None``; storage failures surface as
``CatalogUnavailable`` so callers can tell "empty catalog" from "catalog
could not be read".
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

import structlog
from django.core.exceptions import ValidationError
from django.db import transaction

from modules.catalog.exceptions import CatalogUnavailable
from modules.catalog.models import Category, HeroImage, Product
from modules.catalog.repositories.interfaces import (
    ICategoryRepository,
    IHeroImageRepository,
    IProductRepository,
)
from modules.core.exceptions import persistence_boundary

logger = structlog.get_logger(__name__)


class ProductDjangoRepository(IProductRepository):
    """Concrete Product repository backed by Django ORM."""

    @persistence_boundary("Product", CatalogUnavailable)
    def get_by_id(self, id: str) -> Optional[Product]:
        try:
            return Product.objects.alive().select_related("category").filter(id=id).first()
        except (ValueError, ValidationError):
            return None

    @persistence_boundary("Product", CatalogUnavailable)
    def list(self, filters: Optional[Dict[str, Any]] = None) -> List[Product]:
        queryset = Product.objects.alive().select_related("category")
        if filters:
            queryset = queryset.filter(**filters)
        return list(queryset)

    @persistence_boundary("Product", CatalogUnavailable)
    @transaction.atomic
    def save(self, entity: Product) -> Product:
        entity.save()
        logger.info("product.saved", product_id=str(entity.id))
        return entity

    @persistence_boundary("Product", CatalogUnavailable)
    @transaction.atomic
    def bulk_save(self, entities: List[Product]) -> List[Product]:
        for entity in entities:
            entity.save()
        logger.info("product.bulk_saved", count=len(entities))
        return entities

    @persistence_boundary("Product", CatalogUnavailable)
    @transaction.atomic
    def delete(self, id: str) -> bool:
        product = self.get_by_id(id)
        if not product:
            return False
        product.delete()
        logger.info("product.soft_deleted", product_id=str(id))
        return True


class CategoryDjangoRepository(ICategoryRepository):
    @persistence_boundary("Category", CatalogUnavailable)
    def get_by_id(self, id: str) -> Optional[Category]:
        try:
            return Category.objects.alive().filter(id=id).first()
        except (ValueError, ValidationError):
            return None

    @persistence_boundary("Category", CatalogUnavailable)
    def get_by_slug(self, slug: str) -> Optional[Category]:
        return Category.objects.alive().filter(slug=slug.lower()).first()

    @persistence_boundary("Category", CatalogUnavailable)
    def list(self, filters: Optional[Dict[str, Any]] = None) -> List[Category]:
        queryset = Category.objects.alive().order_by("display_order", "name")
        if filters:
            queryset = queryset.filter(**filters)
        return list(queryset)

    @persistence_boundary("Category", CatalogUnavailable)
    @transaction.atomic
    def save(self, entity: Category) -> Category:
        entity.save()
        logger.info("category.saved", category_id=str(entity.id), slug=entity.slug)
        return entity


class HeroImageDjangoRepository(IHeroImageRepository):
    @persistence_boundary("Hero image", CatalogUnavailable)
    def get_by_id(self, id: str) -> Optional[HeroImage]:
        try:
            return HeroImage.objects.alive().filter(id=id).first()
        except (ValueError, ValidationError):
            return None

    @persistence_boundary("Hero image", CatalogUnavailable)
    def list(self, filters: Optional[Dict[str, Any]] = None) -> List[HeroImage]:
        queryset = HeroImage.objects.alive()
        if filters:
            queryset = queryset.filter(**filters)
        return list(queryset.order_by("display_order"))

    def list_active(self) -> List[HeroImage]:
        return self.list({"is_active": True})

    @persistence_boundary("Hero image", CatalogUnavailable)
    @transaction.atomic
    def save(self, entity: HeroImage) -> HeroImage:
        entity.save()
        logger.info("hero_image.saved", hero_image_id=str(entity.id))
        return entity
