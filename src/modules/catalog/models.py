"""Catalog models: products, their categories and promotional banners.

- Product price must be greater than zero.
- ``stock`` is informational only; ``None`` means "unknown".
- ``rating`` is optional and bounded to 0.0 - 5.0.
- Categories list by ``display_order`` then ``name``; unranked ones use 99.
- Hero images are shown only while ``is_active``.
"""

from __future__ import annotations

from decimal import Decimal

import structlog
from django.core.exceptions import ValidationError
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models

from modules.catalog.constants import DEFAULT_DISPLAY_ORDER
from modules.core.models import SoftDeleteModel

logger = structlog.get_logger(__name__)


class Category(SoftDeleteModel):
    name = models.CharField(max_length=120)
    slug = models.SlugField(max_length=120, unique=True)
    image_url = models.URLField(max_length=500, blank=True, default="")
    image_hint = models.CharField(max_length=60, blank=True, default="")
    display_order = models.PositiveIntegerField(default=DEFAULT_DISPLAY_ORDER)

    class Meta:
        db_table = "categories"
        ordering = ["display_order", "name"]
        verbose_name_plural = "categories"

    def __str__(self) -> str:
        return self.name


class Product(SoftDeleteModel):
    """Sellable catalog item.

    Carts and orders copy ``name`` and ``price`` when an item is added, so
    later edits here never change what a customer already agreed to pay.
    """

    name = models.CharField(max_length=255)
    description = models.TextField(blank=True, default="")
    price = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0.01"))],
    )
    category = models.ForeignKey(
        Category,
        on_delete=models.PROTECT,
        related_name="products",
    )
    image_url = models.URLField(max_length=500, blank=True, default="")
    image_hint = models.CharField(max_length=60, blank=True, default="")
    stock = models.PositiveIntegerField(null=True, blank=True, default=None)
    rating = models.DecimalField(
        max_digits=2,
        decimal_places=1,
        null=True,
        blank=True,
        default=None,
        validators=[MinValueValidator(Decimal("0")), MaxValueValidator(Decimal("5"))],
    )

    class Meta:
        db_table = "products"
        ordering = ["name"]
        indexes = [
            models.Index(fields=["category", "name"], name="products_category_name_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(price__gt=0),
                name="products_price_positive",
            ),
        ]

    def clean(self) -> None:
        super().clean()
        if self.price is not None and self.price <= 0:
            raise ValidationError({"price": "Price must be greater than zero."})

    def save(self, *args, **kwargs) -> None:
        is_new = self._state.adding
        super().save(*args, **kwargs)
        if is_new:
            logger.info("product.created", product_id=str(self.id), name=self.name)

    @property
    def category_name(self) -> str:
        return self.category.name if self.category_id else ""

    def __str__(self) -> str:
        return self.name


class HeroImage(SoftDeleteModel):
    image_url = models.URLField(max_length=500)
    alt_text = models.CharField(max_length=255)
    image_hint = models.CharField(max_length=60, blank=True, default="")
    display_order = models.PositiveIntegerField(default=0)
    is_active = models.BooleanField(default=True)
    link_url = models.CharField(max_length=500, blank=True, default="")

    class Meta:
        db_table = "hero_images"
        ordering = ["display_order"]
        indexes = [
            models.Index(fields=["is_active", "display_order"], name="hero_active_order_idx"),
        ]

    def __str__(self) -> str:
        return self.alt_text
