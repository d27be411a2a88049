"""Unit tests for order DTOs."""

from __future__ import annotations

from decimal import Decimal
from uuid import uuid4

import pytest
from pydantic import ValidationError

from modules.cart.engine import CartLine, ItemSnapshot
from modules.orders.dtos import CreateOrderDTO, CreateOrderItemDTO, ShippingAddressDTO

pytestmark = pytest.mark.unit


class TestShippingAddressDTO:
    def test_email_is_lowercased(self, shipping_address):
        dto = ShippingAddressDTO.model_validate(shipping_address)
        assert dto.email == "jane.doe@example.com"

    def test_blank_line2_becomes_none(self, shipping_address):
        assert ShippingAddressDTO.model_validate(shipping_address).address_line2 is None

    def test_whitespace_is_stripped(self, shipping_address):
        shipping_address["city"] = "  Springfield  "
        assert ShippingAddressDTO.model_validate(shipping_address).city == "Springfield"

    def test_invalid_email(self, shipping_address):
        shipping_address["email"] = "not-an-email"
        with pytest.raises(ValidationError, match="valid email"):
            ShippingAddressDTO.model_validate(shipping_address)

    @pytest.mark.parametrize(
        ("field", "value"),
        [
            ("full_name", "J"),
            ("address_line1", "1 St"),
            ("city", "X"),
            ("postal_code", "123"),
            ("country", "U"),
        ],
    )
    def test_minimum_lengths(self, shipping_address, field, value):
        shipping_address[field] = value
        with pytest.raises(ValidationError) as exc_info:
            ShippingAddressDTO.model_validate(shipping_address)
        assert exc_info.value.errors()[0]["loc"] == (field,)

    def test_missing_field(self, shipping_address):
        del shipping_address["country"]
        with pytest.raises(ValidationError):
            ShippingAddressDTO.model_validate(shipping_address)


class TestCreateOrderDTO:
    def test_from_cart_copies_snapshot(self, shipping_address):
        item_id = uuid4()
        line = CartLine(
            item=ItemSnapshot(item_id=item_id, name="Rocket", unit_price=Decimal("10.00")),
            quantity=2,
        )
        dto = CreateOrderDTO.from_cart(
            user_id=1, lines=[line], shipping_address=shipping_address, idempotency_key=""
        )
        assert dto.items == [
            CreateOrderItemDTO(
                product_id=item_id,
                product_name="Rocket",
                unit_price=Decimal("10.00"),
                quantity=2,
            )
        ]
        assert dto.idempotency_key is None
        assert isinstance(dto.shipping_address, ShippingAddressDTO)

    def test_empty_items_allowed_at_dto_level(self, shipping_address):
        dto = CreateOrderDTO.from_cart(user_id=1, lines=[], shipping_address=shipping_address)
        assert dto.items == []

    def test_item_quantity_must_be_positive(self):
        with pytest.raises(ValidationError):
            CreateOrderItemDTO(
                product_id=uuid4(), product_name="X", unit_price=Decimal("1.00"), quantity=0
            )

    def test_item_quantity_has_upper_bound(self):
        with pytest.raises(ValidationError) as exc_info:
            CreateOrderItemDTO(
                product_id=uuid4(), product_name="X", unit_price=Decimal("1.00"), quantity=1000
            )
        assert exc_info.value.errors()[0]["loc"] == ("quantity",)
