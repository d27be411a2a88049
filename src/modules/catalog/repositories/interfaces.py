"""Catalog repository interfaces."""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, Any, Dict, List, Optional

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from modules.catalog.models import Category, HeroImage, Product


class IProductRepository(IRepository["Product"]):
    @abstractmethod
    def list(self, filters: Optional[Dict[str, Any]] = None) -> List[Product]:
        """Live products ordered by name, optionally filtered by ORM look-ups."""

    @abstractmethod
    def delete(self, id: str) -> bool:
        """Soft-delete a product; ``False`` when it does not exist."""

    @abstractmethod
    def bulk_save(self, entities: List[Product]) -> List[Product]:
        """Persist several products as a single all-or-nothing batch."""


class ICategoryRepository(IRepository["Category"]):
    @abstractmethod
    def list(self, filters: Optional[Dict[str, Any]] = None) -> List[Category]:
        """Live categories ordered by ``display_order`` then ``name``."""

    @abstractmethod
    def get_by_slug(self, slug: str) -> Optional[Category]:
        """Retrieve a live category by slug."""


class IHeroImageRepository(IRepository["HeroImage"]):
    @abstractmethod
    def list_active(self) -> List[HeroImage]:
        """Active banners ordered by ``display_order``."""
