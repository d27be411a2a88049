"""Catalog repositories package."""

from modules.catalog.repositories.django_repository import (
    CategoryDjangoRepository,
    HeroImageDjangoRepository,
    ProductDjangoRepository,
)
from modules.catalog.repositories.interfaces import (
    ICategoryRepository,
    IHeroImageRepository,
    IProductRepository,
)

__all__ = [
    "ICategoryRepository",
    "IHeroImageRepository",
    "IProductRepository",
    "CategoryDjangoRepository",
    "HeroImageDjangoRepository",
    "ProductDjangoRepository",
]
