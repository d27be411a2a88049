"""Per-user storefront profile."""

from __future__ import annotations

from django.conf import settings
from django.db import models

from modules.core.models import BaseModel


class UserProfile(BaseModel):
    """Holds the default shipping address offered at checkout.

    ``default_shipping_address`` has the shape of ``ShippingAddressDTO``;
    ``None`` means the user never saved one.
    """

    user = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="storefront_profile",
    )
    default_shipping_address = models.JSONField(null=True, blank=True, default=None)

    class Meta:
        db_table = "user_profiles"

    def __str__(self) -> str:
        return f"Profile of user {self.user_id}"
