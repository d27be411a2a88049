"""Catalog domain exceptions.

Each one derives from a kind in ``modules.core.exceptions`` so the API
error handler can translate it without a per-view ``try`` block.
"""

from __future__ import annotations

from modules.core.exceptions import NotFound, Unavailable, ValidationFailed


class ProductNotFound(NotFound):
    """The requested product does not exist or has been retired."""


class UnknownCategory(ValidationFailed):
    """A write referenced a category slug that does not exist."""


class CategoryAlreadyExists(ValidationFailed):
    """A category with the same slug already exists."""


class CatalogUnavailable(Unavailable):
    """The catalog store could not be read (unreachable or not set up)."""

    default_message = "The catalog is temporarily unavailable."
