"""Order domain exceptions.

Raised by ``OrderService`` when a lifecycle rule is violated; the API
error handler maps each kind to its HTTP status.
"""

from __future__ import annotations

from modules.core.exceptions import (
    IllegalTransition,
    NotFound,
    PermissionDenied,
    ValidationFailed,
)


class OrderNotFound(NotFound):
    """The requested order does not exist."""


class EmptyCartError(ValidationFailed):
    """Checkout was attempted with no items."""

    default_message = "Cannot place an order with an empty cart."


class InvalidStatusValue(ValidationFailed):
    """The requested status is not one of ``OrderStatus``."""


class IllegalTransitionError(IllegalTransition):
    """The status change is not an edge of the lifecycle graph."""


class OrderPermissionDenied(PermissionDenied):
    """Only the order owner or a staff user may view or cancel an order."""


class IdempotencyKeyConflict(ValidationFailed):
    """The idempotency key was already used by a different user."""
