"""Catalog DTOs for the Service Layer.

Pydantic v2 contracts between the API layer and ``CatalogService``.  The
validation minimums mirror the admin forms of the storefront dashboard.
Products reference their category by slug, which keeps bulk JSON imports
readable.
"""

from __future__ import annotations

import re
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from modules.catalog.constants import (
    CATEGORY_NAME_MIN_LENGTH,
    CATEGORY_SLUG_MIN_LENGTH,
    DEFAULT_DISPLAY_ORDER,
    PRODUCT_DESCRIPTION_MIN_LENGTH,
    PRODUCT_NAME_MIN_LENGTH,
)

SLUG_RE = re.compile(r"^[a-z0-9]+(?:-[a-z0-9]+)*$")


def _price_positive(v: Optional[Decimal]) -> Optional[Decimal]:
    if v is not None and v <= 0:
        raise ValueError("Price must be greater than zero.")
    return v


# ---------------------------------------------------------------------------
# Products
# ---------------------------------------------------------------------------


class CreateProductDTO(BaseModel):
    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    name: str = Field(min_length=PRODUCT_NAME_MIN_LENGTH, max_length=255)
    description: str = Field(min_length=PRODUCT_DESCRIPTION_MIN_LENGTH)
    price: Decimal = Field(max_digits=10, decimal_places=2)
    category: str
    image_url: str = ""
    image_hint: str = ""
    stock: Optional[int] = Field(default=None, ge=0)
    rating: Optional[Decimal] = Field(default=None, ge=0, le=5)

    check_price = field_validator("price")(_price_positive)


class UpdateProductDTO(BaseModel):
    """Partial update: only supplied (non-``None``) fields are applied."""

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    name: Optional[str] = Field(default=None, min_length=PRODUCT_NAME_MIN_LENGTH)
    description: Optional[str] = Field(
        default=None, min_length=PRODUCT_DESCRIPTION_MIN_LENGTH
    )
    price: Optional[Decimal] = Field(default=None, max_digits=10, decimal_places=2)
    category: Optional[str] = None
    image_url: Optional[str] = None
    image_hint: Optional[str] = None
    stock: Optional[int] = Field(default=None, ge=0)
    rating: Optional[Decimal] = Field(default=None, ge=0, le=5)

    check_price = field_validator("price")(_price_positive)

    def changes(self) -> dict:
        return self.model_dump(exclude_none=True)


class BulkCreateProductsDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    products: List[CreateProductDTO] = Field(min_length=1)


# ---------------------------------------------------------------------------
# Categories / hero images
# ---------------------------------------------------------------------------


class CreateCategoryDTO(BaseModel):
    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    name: str = Field(min_length=CATEGORY_NAME_MIN_LENGTH, max_length=120)
    slug: str = Field(min_length=CATEGORY_SLUG_MIN_LENGTH, max_length=120)
    image_url: str = ""
    image_hint: str = ""
    display_order: int = Field(default=DEFAULT_DISPLAY_ORDER, ge=0)

    @field_validator("slug")
    @classmethod
    def slug_must_be_kebab_case(cls, v: str) -> str:
        v = v.lower()
        if not SLUG_RE.match(v):
            raise ValueError("Slug may only contain lowercase letters, digits and hyphens.")
        return v


class CreateHeroImageDTO(BaseModel):
    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    image_url: str = Field(min_length=1)
    alt_text: str = Field(min_length=3, max_length=255)
    image_hint: str = ""
    display_order: int = Field(default=0, ge=0)
    is_active: bool = True
    link_url: str = ""
