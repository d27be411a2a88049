"""Cart domain exceptions."""

from __future__ import annotations

from modules.core.exceptions import NotFound


class CartItemNotFound(NotFound):
    """The item is not in the cart."""
