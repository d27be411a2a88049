"""Cart persistence in the Django session.

The cart never touches the database: it is serialized into the session
(backed by the cache) and disappears with it.
"""

from __future__ import annotations

from typing import Any, Optional, Protocol

import structlog

from modules.cart.engine import Cart, ShippingPolicy, default_shipping_policy

logger = structlog.get_logger(__name__)

SESSION_KEY = "cart"


class ICartStore(Protocol):
    def load(self) -> Cart: ...

    def save(self, cart: Cart) -> None: ...

    def clear(self) -> None: ...


class SessionCartStore:
    def __init__(
        self,
        session: Any,
        shipping_policy: Optional[ShippingPolicy] = None,
        key: str = SESSION_KEY,
    ) -> None:
        self._session = session
        self._policy = shipping_policy or default_shipping_policy()
        self._key = key

    def load(self) -> Cart:
        state = self._session.get(self._key) or []
        try:
            return Cart.from_state(state, self._policy)
        except (KeyError, TypeError, ValueError, ArithmeticError):
            # unreadable state from an older deploy
            logger.warning("cart.session_state_discarded", lines=len(state))
            self._session.pop(self._key, None)
            return Cart(self._policy)

    def save(self, cart: Cart) -> None:
        self._session[self._key] = cart.to_state()
        self._session.modified = True

    def clear(self) -> None:
        self._session.pop(self._key, None)
        self._session.modified = True
