"""Unit tests for the in-memory cart engine (no database)."""

from __future__ import annotations

from decimal import Decimal

import pytest

from modules.cart.engine import (
    Cart,
    CartLine,
    MAX_LINE_QUANTITY,
    FlatRateShipping,
    ItemSnapshot,
    compute_totals,
    default_shipping_policy,
    to_money,
)
from modules.cart.exceptions import CartItemNotFound
from modules.core.exceptions import ErrorKind

pytestmark = pytest.mark.unit


@pytest.fixture()
def policy():
    return FlatRateShipping(fee=Decimal("5.00"), free_threshold=Decimal("20.00"))


@pytest.fixture()
def cart(policy):
    return Cart(policy)


@pytest.fixture()
def item_a():
    return ItemSnapshot(item_id="a", name="Rocket", unit_price=Decimal("10.00"))


@pytest.fixture()
def item_b():
    return ItemSnapshot(item_id="b", name="Sparkler", unit_price=Decimal("5.00"))


class TestItemSnapshot:
    def test_price_is_quantized_to_cents(self):
        item = ItemSnapshot(item_id="x", name="X", unit_price="3.456")
        assert item.unit_price == Decimal("3.46")

    def test_item_id_is_stringified(self):
        item = ItemSnapshot(item_id=42, name="X", unit_price=Decimal("1"))
        assert item.item_id == "42"

    def test_from_product_copies_catalog_fields(self):
        class StubProduct:
            id = "p-1"
            name = "Fountain"
            price = Decimal("9.75")
            image_url = None
            category_name = "Fountains"

        item = ItemSnapshot.from_product(StubProduct())
        assert item.item_id == "p-1"
        assert item.unit_price == Decimal("9.75")
        assert item.image_url == ""
        assert item.category == "Fountains"


class TestAddItem:
    def test_new_item_creates_line(self, cart, item_a):
        cart.add_item(item_a, 2)
        assert len(cart) == 1
        assert cart.get_line("a").quantity == 2

    def test_default_quantity_is_one(self, cart, item_a):
        cart.add_item(item_a)
        assert cart.get_line("a").quantity == 1

    def test_same_item_sums_quantities(self, cart, item_a):
        cart.add_item(item_a, 2)
        cart.add_item(item_a, 3)
        assert len(cart) == 1
        assert cart.get_line("a").quantity == 5

    def test_quantity_below_one_is_clamped(self, cart, item_a):
        cart.add_item(item_a, 0)
        assert cart.get_line("a").quantity == 1
        cart.add_item(item_a, -4)
        assert cart.get_line("a").quantity == 2

    def test_summed_quantity_is_capped(self, cart, item_a):
        cart.add_item(item_a, MAX_LINE_QUANTITY)
        cart.add_item(item_a, 5)
        assert cart.get_line("a").quantity == MAX_LINE_QUANTITY

    def test_readding_keeps_original_price(self, cart, item_a):
        cart.add_item(item_a, 1)
        repriced = ItemSnapshot(item_id="a", name="Rocket", unit_price=Decimal("12.00"))
        cart.add_item(repriced, 1)
        assert cart.get_line("a").item.unit_price == Decimal("10.00")
        assert cart.subtotal() == Decimal("20.00")

    def test_lines_keep_insertion_order(self, cart, item_a, item_b):
        cart.add_item(item_b)
        cart.add_item(item_a)
        cart.add_item(item_b)
        assert [line.item_id for line in cart.lines] == ["b", "a"]


class TestUpdateQuantity:
    def test_replaces_quantity(self, cart, item_a):
        cart.add_item(item_a, 5)
        cart.update_quantity("a", 2)
        assert cart.get_line("a").quantity == 2

    def test_zero_clamps_to_one(self, cart, item_a):
        cart.add_item(item_a, 5)
        cart.update_quantity("a", 0)
        assert cart.get_line("a").quantity == 1

    def test_large_quantity_is_capped(self, cart, item_a):
        cart.add_item(item_a, 1)
        cart.update_quantity("a", 10**13)
        assert cart.get_line("a").quantity == MAX_LINE_QUANTITY
        assert cart.subtotal() == Decimal("9990.00")

    def test_missing_item_raises_not_found(self, cart):
        with pytest.raises(CartItemNotFound) as exc_info:
            cart.update_quantity("missing", 3)
        assert exc_info.value.kind is ErrorKind.NOT_FOUND


class TestRemoveAndClear:
    def test_remove_deletes_line(self, cart, item_a, item_b):
        cart.add_item(item_a)
        cart.add_item(item_b)
        cart.remove_item("a")
        assert cart.get_line("a") is None
        assert len(cart) == 1

    def test_remove_missing_item_is_noop(self, cart, item_a):
        cart.add_item(item_a)
        cart.remove_item("missing")
        assert len(cart) == 1

    def test_clear_empties_cart(self, cart, item_a, item_b):
        cart.add_item(item_a)
        cart.add_item(item_b)
        cart.clear()
        assert cart.is_empty
        assert cart.item_count() == 0
        assert cart.grand_total() == Decimal("0.00")


class TestTotals:
    def test_worked_example(self, cart, item_a, item_b):
        cart.add_item(item_a, 2)
        cart.add_item(item_b, 1)
        assert cart.subtotal() == Decimal("25.00")
        assert cart.shipping_cost() == Decimal("0.00")
        assert cart.grand_total() == Decimal("25.00")
        assert cart.item_count() == 3

        cart.remove_item("b")
        assert cart.item_count() == 2
        assert cart.subtotal() == Decimal("20.00")

    def test_fee_applies_below_threshold(self, cart, item_b):
        cart.add_item(item_b, 1)
        totals = cart.totals()
        assert totals.subtotal == Decimal("5.00")
        assert totals.shipping_cost == Decimal("5.00")
        assert totals.grand_total == Decimal("10.00")

    def test_grand_total_is_subtotal_plus_shipping(self, cart, item_a, item_b):
        cart.add_item(item_a, 1)
        cart.add_item(item_b, 1)
        totals = cart.totals()
        assert totals.grand_total == totals.subtotal + totals.shipping_cost

    def test_empty_cart_ships_for_nothing(self, cart):
        assert cart.totals() == (Decimal("0.00"), Decimal("0.00"), Decimal("0.00"), 0)

    def test_decimal_arithmetic_is_exact(self, policy):
        cart = Cart(policy)
        cart.add_item(ItemSnapshot(item_id="c", name="Popper", unit_price="0.10"), 3)
        assert cart.subtotal() == Decimal("0.30")

    def test_compute_totals_matches_cart(self, cart, item_a, policy):
        cart.add_item(item_a, 1)
        assert compute_totals(cart.lines, policy) == cart.totals()


class TestFlatRateShipping:
    def test_no_threshold_never_waives(self):
        policy = FlatRateShipping(fee=Decimal("5"))
        assert policy.quote(Decimal("1000.00"), 3) == Decimal("5.00")

    def test_threshold_is_inclusive(self, policy):
        assert policy.quote(Decimal("20.00"), 1) == Decimal("0.00")
        assert policy.quote(Decimal("19.99"), 1) == Decimal("5.00")

    def test_default_policy_reads_settings(self, settings):
        settings.SHIPPING_FLAT_FEE = Decimal("7.50")
        settings.FREE_SHIPPING_THRESHOLD = None
        policy = default_shipping_policy()
        assert policy.fee == Decimal("7.50")
        assert policy.free_threshold is None


class TestSnapshotAndState:
    def test_snapshot_is_immutable_copy(self, cart, item_a):
        cart.add_item(item_a, 1)
        snapshot = cart.snapshot()
        cart.add_item(item_a, 4)
        assert isinstance(snapshot, tuple)
        assert snapshot[0].quantity == 1

    def test_state_restores_equal_cart(self, cart, policy, item_a, item_b):
        cart.add_item(item_a, 2)
        cart.add_item(item_b, 1)
        restored = Cart.from_state(cart.to_state(), policy)
        assert restored.lines == cart.lines
        assert restored.totals() == cart.totals()

    def test_constructor_clamps_line_quantities(self, policy, item_a):
        cart = Cart(policy, [CartLine(item=item_a, quantity=0)])
        assert cart.get_line("a").quantity == 1


def test_to_money_rounds_half_up():
    assert to_money("2.345") == Decimal("2.35")
