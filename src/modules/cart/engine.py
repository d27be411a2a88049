"""Cart engine: pure, in-memory shopping cart arithmetic.

No I/O happens here.  The cart keeps one line per catalog item, in the
order items were first added, and derives every total from those lines:

- every line quantity is between 1 and ``MAX_LINE_QUANTITY``; removing a
  line deletes it;
- ``subtotal`` is the sum of ``unit_price * quantity`` over the lines,
  using the price captured when the item was first added;
- ``grand_total == subtotal + shipping_cost`` exactly (``Decimal``);
- ``item_count`` is the sum of quantities, 0 iff the cart is empty.

Shipping is a strategy object so the fee rule can change without touching
the cart.  ``compute_totals`` is shared with checkout, which freezes the
same numbers onto the order.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, replace
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Dict, Iterable, List, Mapping, NamedTuple, Optional, Tuple

from modules.cart.exceptions import CartItemNotFound

CENT = Decimal("0.01")
ZERO = Decimal("0.00")

# Upper bound for a single line; larger requests are rejected at the API.
MAX_LINE_QUANTITY = 999


def to_money(value: Any) -> Decimal:
    return Decimal(str(value)).quantize(CENT, rounding=ROUND_HALF_UP)


# ---------------------------------------------------------------------------
# Value objects
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ItemSnapshot:
    """The catalog item as it looked when it entered the cart."""

    item_id: str
    name: str
    unit_price: Decimal
    image_url: str = ""
    category: str = ""

    def __post_init__(self) -> None:
        object.__setattr__(self, "item_id", str(self.item_id))
        object.__setattr__(self, "unit_price", to_money(self.unit_price))

    @classmethod
    def from_product(cls, product: Any) -> ItemSnapshot:
        return cls(
            item_id=str(product.id),
            name=product.name,
            unit_price=product.price,
            image_url=product.image_url or "",
            category=getattr(product, "category_name", "") or "",
        )


@dataclass(frozen=True)
class CartLine:
    item: ItemSnapshot
    quantity: int

    @property
    def item_id(self) -> str:
        return self.item.item_id

    @property
    def line_total(self) -> Decimal:
        return self.item.unit_price * self.quantity


class CartTotals(NamedTuple):
    subtotal: Decimal
    shipping_cost: Decimal
    grand_total: Decimal
    item_count: int


# ---------------------------------------------------------------------------
# Shipping policy
# ---------------------------------------------------------------------------


class ShippingPolicy(ABC):
    """Pure function of the cart contents that yields the shipping fee."""

    @abstractmethod
    def quote(self, subtotal: Decimal, item_count: int) -> Decimal: ...


class FlatRateShipping(ShippingPolicy):
    """Flat ``fee``, waived once ``subtotal`` reaches ``free_threshold``.

    ``free_threshold=None`` never waives the fee.  An empty cart ships
    for nothing.
    """

    def __init__(self, fee: Decimal, free_threshold: Optional[Decimal] = None) -> None:
        self.fee = to_money(fee)
        self.free_threshold = None if free_threshold is None else to_money(free_threshold)

    def quote(self, subtotal: Decimal, item_count: int) -> Decimal:
        if item_count == 0:
            return ZERO
        if self.free_threshold is not None and subtotal >= self.free_threshold:
            return ZERO
        return self.fee

    def __repr__(self) -> str:
        return f"FlatRateShipping(fee={self.fee}, free_threshold={self.free_threshold})"


def default_shipping_policy() -> FlatRateShipping:
    """Policy configured by ``SHIPPING_FLAT_FEE`` / ``FREE_SHIPPING_THRESHOLD``."""
    from django.conf import settings

    return FlatRateShipping(
        fee=settings.SHIPPING_FLAT_FEE,
        free_threshold=settings.FREE_SHIPPING_THRESHOLD,
    )


def compute_totals(lines: Iterable[CartLine], policy: ShippingPolicy) -> CartTotals:
    lines = list(lines)
    subtotal = sum((line.line_total for line in lines), ZERO)
    item_count = sum(line.quantity for line in lines)
    shipping = policy.quote(subtotal, item_count)
    return CartTotals(subtotal, shipping, subtotal + shipping, item_count)


# ---------------------------------------------------------------------------
# Cart
# ---------------------------------------------------------------------------


def _clamp(quantity: Any) -> int:
    return min(MAX_LINE_QUANTITY, max(1, int(quantity)))


class Cart:
    def __init__(
        self,
        shipping_policy: ShippingPolicy,
        lines: Iterable[CartLine] = (),
    ) -> None:
        self.shipping_policy = shipping_policy
        self._lines: Dict[str, CartLine] = {}
        for line in lines:
            self._lines[line.item_id] = replace(line, quantity=_clamp(line.quantity))

    # -- mutations -----------------------------------------------------

    def add_item(self, item: ItemSnapshot, quantity: int = 1) -> CartLine:
        """Add ``quantity`` of ``item``; an existing line keeps its snapshot."""
        quantity = _clamp(quantity)
        existing = self._lines.get(item.item_id)
        if existing is not None:
            line = replace(existing, quantity=_clamp(existing.quantity + quantity))
        else:
            line = CartLine(item=item, quantity=quantity)
        self._lines[item.item_id] = line
        return line

    def update_quantity(self, item_id: str, quantity: int) -> CartLine:
        """Replace the quantity of a line, clamped to 1..MAX_LINE_QUANTITY.

        Raises:
            CartItemNotFound: ``item_id`` is not in the cart.
        """
        item_id = str(item_id)
        existing = self._lines.get(item_id)
        if existing is None:
            raise CartItemNotFound(f"Item {item_id} is not in the cart.")
        line = replace(existing, quantity=_clamp(quantity))
        self._lines[item_id] = line
        return line

    def remove_item(self, item_id: str) -> None:
        self._lines.pop(str(item_id), None)

    def clear(self) -> None:
        self._lines.clear()

    # -- queries -------------------------------------------------------

    @property
    def lines(self) -> List[CartLine]:
        return list(self._lines.values())

    @property
    def is_empty(self) -> bool:
        return not self._lines

    def get_line(self, item_id: str) -> Optional[CartLine]:
        return self._lines.get(str(item_id))

    def totals(self) -> CartTotals:
        return compute_totals(self._lines.values(), self.shipping_policy)

    def subtotal(self) -> Decimal:
        return self.totals().subtotal

    def shipping_cost(self) -> Decimal:
        return self.totals().shipping_cost

    def grand_total(self) -> Decimal:
        return self.totals().grand_total

    def item_count(self) -> int:
        return sum(line.quantity for line in self._lines.values())

    def snapshot(self) -> Tuple[CartLine, ...]:
        """Immutable copy of the lines, as handed to checkout."""
        return tuple(self._lines.values())

    # -- session serialization ----------------------------------------

    def to_state(self) -> List[Dict[str, Any]]:
        return [
            {
                "item_id": line.item_id,
                "name": line.item.name,
                "unit_price": str(line.item.unit_price),
                "image_url": line.item.image_url,
                "category": line.item.category,
                "quantity": line.quantity,
            }
            for line in self._lines.values()
        ]

    @classmethod
    def from_state(
        cls, state: Iterable[Mapping[str, Any]], shipping_policy: ShippingPolicy
    ) -> Cart:
        lines = [
            CartLine(
                item=ItemSnapshot(
                    item_id=entry["item_id"],
                    name=entry["name"],
                    unit_price=Decimal(entry["unit_price"]),
                    image_url=entry.get("image_url", ""),
                    category=entry.get("category", ""),
                ),
                quantity=entry["quantity"],
            )
            for entry in state
        ]
        return cls(shipping_policy, lines)

    def __len__(self) -> int:
        return len(self._lines)

    def __repr__(self) -> str:
        return f"Cart(lines={len(self._lines)}, item_count={self.item_count()})"
