"""Order DTOs for the Service Layer.

Pydantic v2 contracts between the API layer and ``OrderService``, all
immutable (``frozen=True``).

- ``ShippingAddressDTO``: address captured at checkout.
- ``CreateOrderItemDTO``: one cart line, price already snapshotted.
- ``CreateOrderDTO``: checkout request.
- ``OrderOutputDTO``: materialized order, used by the confirmation e-mail.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import TYPE_CHECKING, Any, Dict, Iterable, List, Optional
from uuid import UUID

from django.core.exceptions import ValidationError as DjangoValidationError
from django.core.validators import validate_email
from pydantic import BaseModel, ConfigDict, Field, field_validator

from modules.cart.engine import MAX_LINE_QUANTITY

if TYPE_CHECKING:
    from modules.cart.engine import CartLine
    from modules.orders.models import Order, OrderStatusHistory


# ---------------------------------------------------------------------------
# Input DTOs
# ---------------------------------------------------------------------------


class ShippingAddressDTO(BaseModel):
    """Where the order ships to; minimums match the checkout form."""

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    full_name: str = Field(min_length=2, max_length=255)
    email: str = Field(max_length=254)
    address_line1: str = Field(min_length=5, max_length=255)
    address_line2: Optional[str] = Field(default=None, max_length=255)
    city: str = Field(min_length=2, max_length=120)
    postal_code: str = Field(min_length=4, max_length=20)
    country: str = Field(min_length=2, max_length=80)

    @field_validator("email")
    @classmethod
    def email_must_be_valid(cls, v: str) -> str:
        try:
            validate_email(v)
        except DjangoValidationError:
            raise ValueError("Enter a valid email address.") from None
        return v.lower()

    @field_validator("address_line2")
    @classmethod
    def blank_line2_is_none(cls, v: Optional[str]) -> Optional[str]:
        return v or None


class CreateOrderItemDTO(BaseModel):
    """A cart line frozen for checkout.

    ``unit_price`` is the price captured when the item entered the cart;
    the service never re-reads the catalog.
    """

    model_config = ConfigDict(frozen=True)

    product_id: UUID
    product_name: str
    unit_price: Decimal = Field(gt=0, max_digits=10, decimal_places=2)
    quantity: int = Field(ge=1, le=MAX_LINE_QUANTITY)
    image_url: str = ""

    @classmethod
    def from_cart_line(cls, line: CartLine) -> CreateOrderItemDTO:
        return cls(
            product_id=line.item_id,
            product_name=line.item.name,
            unit_price=line.item.unit_price,
            quantity=line.quantity,
            image_url=line.item.image_url,
        )


class CreateOrderDTO(BaseModel):
    """Checkout request.

    ``items`` may be empty here: rejecting an empty cart is a business rule
    owned by ``OrderService`` (``EmptyCartError``).
    """

    model_config = ConfigDict(frozen=True)

    user_id: int
    items: List[CreateOrderItemDTO]
    shipping_address: ShippingAddressDTO
    idempotency_key: Optional[str] = Field(default=None, max_length=255)

    @classmethod
    def from_cart(
        cls,
        user_id: int,
        lines: Iterable[CartLine],
        shipping_address: Dict[str, Any] | ShippingAddressDTO,
        idempotency_key: Optional[str] = None,
    ) -> CreateOrderDTO:
        return cls(
            user_id=user_id,
            items=[CreateOrderItemDTO.from_cart_line(line) for line in lines],
            shipping_address=shipping_address,
            idempotency_key=idempotency_key or None,
        )


# ---------------------------------------------------------------------------
# Output DTOs
# ---------------------------------------------------------------------------


class OrderItemOutputDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    product_id: Optional[UUID]
    product_name: str
    image_url: str
    quantity: int
    unit_price: Decimal
    line_total: Decimal


class StatusHistoryDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    old_status: Optional[str]
    new_status: str
    notes: str
    created_at: datetime

    @classmethod
    def from_entity(cls, history: OrderStatusHistory) -> StatusHistoryDTO:
        return cls(
            old_status=history.old_status,
            new_status=history.new_status,
            notes=history.notes,
            created_at=history.created_at,
        )


class OrderOutputDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: UUID
    order_number: str
    user_id: int
    customer_email: str
    status: str
    subtotal: Decimal
    shipping_cost: Decimal
    grand_total: Decimal
    shipping_address: ShippingAddressDTO
    created_at: datetime
    items: List[OrderItemOutputDTO]
    history: List[StatusHistoryDTO] = []

    @classmethod
    def from_entity(cls, order: Order) -> OrderOutputDTO:
        """Build an output DTO from an Order model instance.

        Assumes ``items`` and ``status_history`` are prefetched.
        """
        address = ShippingAddressDTO.model_validate(order.shipping_address)
        return cls(
            id=order.id,
            order_number=order.order_number,
            user_id=order.user_id,
            customer_email=address.email,
            status=order.status,
            subtotal=order.subtotal,
            shipping_cost=order.shipping_cost,
            grand_total=order.grand_total,
            shipping_address=address,
            created_at=order.created_at,
            items=[
                OrderItemOutputDTO(
                    product_id=item.product_id,
                    product_name=item.product_name,
                    image_url=item.image_url,
                    quantity=item.quantity,
                    unit_price=item.unit_price,
                    line_total=item.line_total,
                )
                for item in order.items.all()
            ],
            history=[StatusHistoryDTO.from_entity(h) for h in order.status_history.all()],
        )
