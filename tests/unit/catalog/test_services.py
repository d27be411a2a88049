"""Unit tests for CatalogService against the Django repositories."""

from __future__ import annotations

from decimal import Decimal
from unittest.mock import MagicMock
from uuid import uuid4

import pytest

from modules.catalog.dtos import (
    CreateCategoryDTO,
    CreateHeroImageDTO,
    CreateProductDTO,
    UpdateProductDTO,
)
from modules.catalog.exceptions import (
    CatalogUnavailable,
    CategoryAlreadyExists,
    ProductNotFound,
    UnknownCategory,
)
from modules.catalog.models import Category, HeroImage, Product
from modules.catalog.repositories import (
    CategoryDjangoRepository,
    HeroImageDjangoRepository,
    ProductDjangoRepository,
)
from modules.catalog.services import CatalogService
from modules.core.exceptions import ErrorKind

pytestmark = pytest.mark.unit


@pytest.fixture()
def service():
    return CatalogService(
        product_repository=ProductDjangoRepository(),
        category_repository=CategoryDjangoRepository(),
        hero_image_repository=HeroImageDjangoRepository(),
    )


def _create_dto(**overrides):
    data = {
        "name": "Sky Rocket",
        "description": "Whistles all the way up.",
        "price": "12.00",
        "category": "sparklers",
    }
    data.update(overrides)
    return CreateProductDTO.model_validate(data)


class TestQueries:
    def test_list_items_excludes_retired(self, service, product_a, product_b):
        product_b.delete()
        assert [p.id for p in service.list_items()] == [product_a.id]

    def test_list_items_applies_filters(self, service, product_a, product_b):
        result = service.list_items({"price__gte": Decimal("6.00")})
        assert result == [product_a]

    def test_get_item(self, service, product_a):
        assert service.get_item(str(product_a.id)) == product_a

    def test_get_item_unknown(self, service):
        with pytest.raises(ProductNotFound) as exc_info:
            service.get_item(str(uuid4()))
        assert exc_info.value.kind is ErrorKind.NOT_FOUND

    def test_get_item_malformed_id(self, service):
        with pytest.raises(ProductNotFound):
            service.get_item("not-a-uuid")

    def test_groupings_sorted_by_display_order_then_name(self, service):
        Category.objects.create(name="Zeta", slug="zeta", display_order=1)
        Category.objects.create(name="Alpha", slug="alpha", display_order=1)
        Category.objects.create(name="First", slug="first", display_order=0)
        Category.objects.create(name="Unranked", slug="unranked")
        assert [c.slug for c in service.list_groupings()] == [
            "first",
            "alpha",
            "zeta",
            "unranked",
        ]

    def test_hero_images_only_active(self, service):
        HeroImage.objects.create(image_url="https://e.com/2.png", alt_text="Two", display_order=2)
        HeroImage.objects.create(image_url="https://e.com/1.png", alt_text="One", display_order=1)
        HeroImage.objects.create(
            image_url="https://e.com/off.png", alt_text="Off", is_active=False
        )
        assert [h.alt_text for h in service.list_hero_images()] == ["One", "Two"]

    def test_empty_catalog_is_not_an_error(self, service):
        assert service.list_items() == []
        assert service.list_groupings() == []


class TestCommands:
    def test_create_item(self, service, category):
        product = service.create_item(_create_dto())
        assert product.category == category
        assert Product.objects.filter(name="Sky Rocket").exists()

    def test_create_item_unknown_category(self, service):
        with pytest.raises(UnknownCategory) as exc_info:
            service.create_item(_create_dto(category="nope"))
        assert exc_info.value.field_errors == {"category": ["Unknown category 'nope'."]}

    def test_bulk_create_is_all_or_nothing(self, service, category):
        dtos = [_create_dto(name="First Item"), _create_dto(name="Bad Item", category="nope")]
        with pytest.raises(UnknownCategory) as exc_info:
            service.bulk_create_items(dtos)
        assert "products.1.category" in exc_info.value.field_errors
        assert not Product.objects.exists()

    def test_bulk_create(self, service, category):
        products = service.bulk_create_items(
            [_create_dto(name="First Item"), _create_dto(name="Second Item")]
        )
        assert len(products) == 2
        assert Product.objects.count() == 2

    def test_update_item_applies_partial_changes(self, service, product_a):
        Category.objects.create(name="Rockets", slug="rockets")
        updated = service.update_item(
            str(product_a.id),
            UpdateProductDTO.model_validate({"price": "11.50", "category": "rockets"}),
        )
        product_a.refresh_from_db()
        assert updated.price == Decimal("11.50")
        assert product_a.category.slug == "rockets"
        assert product_a.name == "Golden Sparkler"

    def test_update_unknown_item(self, service):
        with pytest.raises(ProductNotFound):
            service.update_item(str(uuid4()), UpdateProductDTO(name="Whatever"))

    def test_delete_item_soft_deletes(self, service, product_a):
        service.delete_item(str(product_a.id))
        assert Product.objects.alive().count() == 0
        assert Product.objects.dead().count() == 1

    def test_delete_twice_raises(self, service, product_a):
        service.delete_item(str(product_a.id))
        with pytest.raises(ProductNotFound):
            service.delete_item(str(product_a.id))

    def test_create_grouping(self, service):
        category = service.create_grouping(
            CreateCategoryDTO.model_validate({"name": "Rockets", "slug": "rockets"})
        )
        assert category.display_order == 99

    def test_create_duplicate_grouping(self, service, category):
        with pytest.raises(CategoryAlreadyExists) as exc_info:
            service.create_grouping(
                CreateCategoryDTO.model_validate({"name": "More Sparklers", "slug": "sparklers"})
            )
        assert "slug" in exc_info.value.field_errors

    def test_create_hero_image(self, service):
        hero = service.create_hero_image(
            CreateHeroImageDTO.model_validate(
                {"image_url": "https://e.com/h.png", "alt_text": "Hero"}
            )
        )
        assert hero in service.list_hero_images()


class TestUnavailableCatalog:
    def test_repository_failure_surfaces_as_unavailable(self):
        from django.db import OperationalError

        from modules.core.exceptions import persistence_boundary

        repo = MagicMock()

        @persistence_boundary("Product", CatalogUnavailable)
        def broken_list(filters=None):
            raise OperationalError("no such table: products")

        repo.list.side_effect = broken_list
        service = CatalogService(repo, MagicMock(), MagicMock())
        with pytest.raises(CatalogUnavailable) as exc_info:
            service.list_items()
        assert exc_info.value.kind is ErrorKind.UNAVAILABLE
