"""Cart service layer.

Resolves catalog items into snapshots and persists the cart after every
mutation.  Prices are captured the first time an item is added; adding the
same item again only increases its quantity.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from modules.cart.engine import Cart, ItemSnapshot
from modules.catalog.exceptions import ProductNotFound

if TYPE_CHECKING:
    from modules.cart.storage import ICartStore
    from modules.catalog.repositories.interfaces import IProductRepository

logger = structlog.get_logger(__name__)


class CartService:
    def __init__(self, store: ICartStore, product_repository: IProductRepository) -> None:
        self._store = store
        self._product_repo = product_repository

    def get_cart(self) -> Cart:
        return self._store.load()

    def add_item(self, item_id: str, quantity: int = 1) -> Cart:
        """Add a catalog item to the cart.

        Raises:
            ProductNotFound: the item is not (or no longer) in the catalog.
        """
        cart = self._store.load()
        existing = cart.get_line(item_id)
        if existing is not None:
            snapshot = existing.item
        else:
            product = self._product_repo.get_by_id(item_id)
            if not product:
                raise ProductNotFound(f"Product {item_id} not found.")
            snapshot = ItemSnapshot.from_product(product)
        line = cart.add_item(snapshot, quantity)
        self._store.save(cart)
        logger.info("cart.item_added", item_id=line.item_id, quantity=line.quantity)
        return cart

    def update_quantity(self, item_id: str, quantity: int) -> Cart:
        cart = self._store.load()
        line = cart.update_quantity(item_id, quantity)
        self._store.save(cart)
        logger.info("cart.quantity_updated", item_id=line.item_id, quantity=line.quantity)
        return cart

    def remove_item(self, item_id: str) -> Cart:
        cart = self._store.load()
        cart.remove_item(item_id)
        self._store.save(cart)
        logger.info("cart.item_removed", item_id=str(item_id))
        return cart

    def clear(self) -> Cart:
        cart = self._store.load()
        cart.clear()
        self._store.clear()
        logger.info("cart.cleared")
        return cart
