"""Catalog service layer (Use Cases).

Public reads (items, categories, hero images) and the administrative
writes behind the dashboard.  Reads have no side effects; writes are
atomic and last-write-wins.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, List, Optional

import structlog
from django.db import transaction

from modules.catalog.exceptions import (
    CategoryAlreadyExists,
    UnknownCategory,
    ProductNotFound,
)
from modules.catalog.models import Category, HeroImage, Product

if TYPE_CHECKING:
    from modules.catalog.dtos import (
        CreateCategoryDTO,
        CreateHeroImageDTO,
        CreateProductDTO,
        UpdateProductDTO,
    )
    from modules.catalog.repositories.interfaces import (
        ICategoryRepository,
        IHeroImageRepository,
        IProductRepository,
    )

logger = structlog.get_logger(__name__)


class CatalogService:
    """Application service for the catalog.

    Receives its repositories via constructor injection (DIP).
    """

    def __init__(
        self,
        product_repository: IProductRepository,
        category_repository: ICategoryRepository,
        hero_image_repository: IHeroImageRepository,
    ) -> None:
        self._product_repo = product_repository
        self._category_repo = category_repository
        self._hero_repo = hero_image_repository

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def list_items(self, filters: Optional[Dict[str, Any]] = None) -> List[Product]:
        return self._product_repo.list(filters)

    def get_item(self, id: str) -> Product:
        """Retrieve a single product.

        Raises:
            ProductNotFound: the product does not exist or was retired.
            CatalogUnavailable: the catalog could not be read.
        """
        product = self._product_repo.get_by_id(id)
        if not product:
            raise ProductNotFound(f"Product {id} not found.")
        return product

    def list_groupings(self) -> List[Category]:
        return self._category_repo.list()

    def list_hero_images(self) -> List[HeroImage]:
        return self._hero_repo.list_active()

    # ------------------------------------------------------------------
    # Commands (admin)
    # ------------------------------------------------------------------

    @transaction.atomic
    def create_item(self, dto: CreateProductDTO) -> Product:
        product = self._build_product(dto)
        product = self._product_repo.save(product)
        logger.info("catalog.item_created", product_id=str(product.id))
        return product

    @transaction.atomic
    def bulk_create_items(self, dtos: List[CreateProductDTO]) -> List[Product]:
        """Create every product or none of them.

        Category slugs are resolved before anything is written, so a bad
        row in the middle of the batch leaves the catalog untouched.
        """
        products = [self._build_product(dto, row=index) for index, dto in enumerate(dtos)]
        products = self._product_repo.bulk_save(products)
        logger.info("catalog.items_bulk_created", count=len(products))
        return products

    @transaction.atomic
    def update_item(self, id: str, dto: UpdateProductDTO) -> Product:
        product = self.get_item(id)
        changes = dto.changes()
        slug = changes.pop("category", None)
        if slug is not None:
            product.category = self._resolve_category(slug)
        for field, value in changes.items():
            setattr(product, field, value)
        product = self._product_repo.save(product)
        logger.info("catalog.item_updated", product_id=str(id), fields=sorted(dto.changes()))
        return product

    @transaction.atomic
    def delete_item(self, id: str) -> None:
        if not self._product_repo.delete(id):
            raise ProductNotFound(f"Product {id} not found.")
        logger.info("catalog.item_deleted", product_id=str(id))

    @transaction.atomic
    def create_grouping(self, dto: CreateCategoryDTO) -> Category:
        if self._category_repo.get_by_slug(dto.slug):
            logger.warning("catalog.duplicate_category", slug=dto.slug)
            raise CategoryAlreadyExists(
                f"Category '{dto.slug}' already exists.",
                field_errors={"slug": ["A category with this slug already exists."]},
            )
        category = self._category_repo.save(Category(**dto.model_dump()))
        logger.info("catalog.category_created", category_id=str(category.id))
        return category

    @transaction.atomic
    def create_hero_image(self, dto: CreateHeroImageDTO) -> HeroImage:
        hero = self._hero_repo.save(HeroImage(**dto.model_dump()))
        logger.info("catalog.hero_image_created", hero_image_id=str(hero.id))
        return hero

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _resolve_category(self, slug: str, row: Optional[int] = None) -> Category:
        category = self._category_repo.get_by_slug(slug)
        if not category:
            attr = "category" if row is None else f"products.{row}.category"
            raise UnknownCategory(
                f"Category '{slug}' not found.",
                field_errors={attr: [f"Unknown category '{slug}'."]},
            )
        return category

    def _build_product(self, dto: CreateProductDTO, row: Optional[int] = None) -> Product:
        data = dto.model_dump(exclude={"category"})
        return Product(category=self._resolve_category(dto.category, row), **data)
