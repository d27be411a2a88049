"""Generic repository interface (Dependency Inversion Principle).

``IRepository[T]`` is the base contract every bounded context extends.
Services depend on these abstractions and receive a concrete repository
through their constructor, so tests can hand them in-memory doubles and
no module reaches for a process-wide database client.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Dict, Generic, Iterable, Optional, TypeVar

T = TypeVar("T")


class IRepository(ABC, Generic[T]):
    """Base generic repository contract.

    Implementations translate storage failures into the domain error kinds
    of ``modules.core.exceptions`` and return ``None`` for missing rows.
    """

    @abstractmethod
    def get_by_id(self, id: str) -> Optional[T]:
        """Retrieve an entity by its primary key."""

    @abstractmethod
    def list(self, filters: Optional[Dict[str, Any]] = None) -> Iterable[T]:
        """List entities with optional filters."""

    @abstractmethod
    def save(self, entity: T) -> T:
        """Persist (create or update) an entity."""
