"""Order service layer (Use Cases).

Checkout, status management and cancellation.  Every write runs in a
single ``transaction.atomic`` block, so a failure leaves no partial order,
item or history row behind.

Rules enforced here:
- An empty cart cannot be checked out.
- Prices come from the cart snapshot; the catalog is not consulted again.
- Totals are computed once with the configured ``ShippingPolicy``.
- Status changes follow ``VALID_TRANSITIONS`` and are recorded in history.
- Only the owner or a staff user may view or cancel an order.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, List, Optional
from uuid import UUID

import structlog
from django.db import transaction

from modules.cart.engine import CartLine, ItemSnapshot, compute_totals
from modules.core.exceptions import ValidationFailed
from modules.orders.constants import OrderStatus
from modules.orders.events import OrderCancelled, OrderCreated, OrderStatusChanged
from modules.orders.exceptions import (
    EmptyCartError,
    IdempotencyKeyConflict,
    IllegalTransitionError,
    InvalidStatusValue,
    OrderNotFound,
    OrderPermissionDenied,
)

if TYPE_CHECKING:
    from modules.cart.engine import ShippingPolicy
    from modules.orders.dtos import CreateOrderDTO
    from modules.orders.models import Order
    from modules.orders.repositories.interfaces import IOrderRepository

logger = structlog.get_logger(__name__)


class OrderService:
    """Application service for Order use-cases.

    Receives its repository and shipping policy via constructor injection.
    """

    def __init__(
        self,
        order_repository: IOrderRepository,
        shipping_policy: ShippingPolicy,
    ) -> None:
        self._order_repo = order_repository
        self._shipping_policy = shipping_policy

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    @transaction.atomic
    def create_order(self, dto: CreateOrderDTO) -> Order:
        """Place an order from a cart snapshot.

        Steps:
        1. Replay: an existing order with the same idempotency key is
           returned unchanged, also when a concurrent request wins the
           race on the unique key.
        2. Reject an empty item list.
        3. Freeze line prices and compute subtotal, shipping and total.
        4. Persist order + items, record the initial history entry and
           register ``OrderCreated`` (published after commit).

        Raises:
            EmptyCartError: ``dto.items`` is empty; nothing is persisted.
            IdempotencyKeyConflict: the key belongs to another user's order.
        """
        log = logger.bind(user_id=dto.user_id)
        log.info("order.creation_started", item_count=len(dto.items))

        replayed = self._replay(dto, log)
        if replayed is not None:
            return replayed

        if not dto.items:
            log.warning("order.empty_cart")
            raise EmptyCartError()

        lines = [
            CartLine(
                item=ItemSnapshot(
                    item_id=str(item.product_id),
                    name=item.product_name,
                    unit_price=item.unit_price,
                    image_url=item.image_url,
                ),
                quantity=item.quantity,
            )
            for item in dto.items
        ]
        totals = compute_totals(lines, self._shipping_policy)

        data = {
            "user_id": dto.user_id,
            "items": [
                {
                    "product_id": line.item_id,
                    "product_name": line.item.name,
                    "image_url": line.item.image_url,
                    "unit_price": line.item.unit_price,
                    "quantity": line.quantity,
                }
                for line in lines
            ],
            "subtotal": totals.subtotal,
            "shipping_cost": totals.shipping_cost,
            "grand_total": totals.grand_total,
            "shipping_address": dto.shipping_address.model_dump(),
            "idempotency_key": dto.idempotency_key,
        }
        try:
            order = self._order_repo.create(data)
        except ValidationFailed:
            # A concurrent request with the same key committed first.
            replayed = self._replay(dto, log)
            if replayed is None:
                raise
            return replayed

        order.add_domain_event(
            OrderCreated(
                aggregate_id=order.id,
                order_number=order.order_number,
                user_id=dto.user_id,
            )
        )
        self._order_repo.save(order)

        self._order_repo.add_history(
            order_id=order.id,
            status=OrderStatus.PENDING,
            notes="Order placed",
            user_id=dto.user_id,
        )

        log.info(
            "order.created",
            order_id=str(order.id),
            order_number=order.order_number,
            grand_total=str(totals.grand_total),
        )
        return self._order_repo.get_by_id(str(order.id)) or order

    def _replay(self, dto: CreateOrderDTO, log: Any) -> Optional[Order]:
        """Return the order already placed under ``dto.idempotency_key``, if any."""
        if not dto.idempotency_key:
            return None
        existing = self._order_repo.get_by_idempotency_key(dto.idempotency_key)
        if existing is None:
            return None
        if existing.user_id != dto.user_id:
            log.warning("order.idempotency_conflict")
            raise IdempotencyKeyConflict(
                "This idempotency key has already been used.",
                field_errors={"idempotency_key": ["Key already in use."]},
            )
        log.info("order.idempotency_hit", order_id=str(existing.id))
        return existing

    @transaction.atomic
    def transition_status(
        self,
        order_id: UUID | str,
        new_status: str,
        changed_by: Optional[Any] = None,
        notes: str = "",
    ) -> Order:
        """Move an order along one edge of the lifecycle graph.

        The order row is locked (``SELECT FOR UPDATE``) before the edge is
        checked, so concurrent changes are serialized.

        Raises:
            InvalidStatusValue: ``new_status`` is not a known status.
            OrderNotFound: the order does not exist.
            IllegalTransitionError: the edge is not in ``VALID_TRANSITIONS``.
        """
        new_status = str(new_status).upper()
        if new_status not in OrderStatus.values:
            raise InvalidStatusValue(
                f"Unknown status '{new_status}'.",
                field_errors={"status": [f"'{new_status}' is not a valid status."]},
            )

        order = self._order_repo.get_for_update(str(order_id))
        if not order:
            raise OrderNotFound(f"Order {order_id} not found.")

        log = logger.bind(
            order_id=str(order.id),
            current_status=order.status,
            new_status=new_status,
        )

        if not order.can_transition_to(new_status):
            log.warning("order.illegal_transition")
            raise IllegalTransitionError(
                f"Cannot move order from {order.status} to {new_status}."
            )

        old_status = order.status
        order.status = new_status
        if new_status == OrderStatus.CANCELLED:
            order.add_domain_event(OrderCancelled(aggregate_id=order.id, old_status=old_status))
        else:
            order.add_domain_event(
                OrderStatusChanged(
                    aggregate_id=order.id, old_status=old_status, new_status=new_status
                )
            )
        self._order_repo.save(order)

        self._order_repo.add_history(
            order_id=order.id,
            status=new_status,
            notes=notes,
            old_status=old_status,
            user_id=getattr(changed_by, "pk", None),
        )

        log.info("order.status_updated")
        return self._order_repo.get_by_id(str(order.id)) or order

    @transaction.atomic
    def cancel_order(
        self, order_id: UUID | str, requested_by: Any, notes: str = ""
    ) -> Order:
        """Cancel an order on behalf of its owner or a staff user.

        Raises:
            OrderNotFound: the order does not exist.
            OrderPermissionDenied: ``requested_by`` is neither owner nor staff.
            IllegalTransitionError: the order is already shipped, delivered
                or cancelled.
        """
        order = self._order_repo.get_for_update(str(order_id))
        if not order:
            raise OrderNotFound(f"Order {order_id} not found.")
        if not order.is_visible_to(requested_by):
            logger.warning(
                "order.cancel_forbidden",
                order_id=str(order.id),
                user_id=getattr(requested_by, "pk", None),
            )
            raise OrderPermissionDenied("You may only cancel your own orders.")

        return self.transition_status(
            order.id,
            OrderStatus.CANCELLED,
            changed_by=requested_by,
            notes=notes or "Order cancelled",
        )

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_order(self, order_id: UUID | str, requested_by: Optional[Any] = None) -> Order:
        """Retrieve a single order.

        When ``requested_by`` is given, only its owner or staff may read it.
        Internal callers (the confirmation task) pass no user.

        Raises:
            OrderNotFound: the order does not exist.
            OrderPermissionDenied: the order belongs to someone else.
        """
        order = self._order_repo.get_by_id(str(order_id))
        if not order:
            raise OrderNotFound(f"Order {order_id} not found.")
        if requested_by is not None and not order.is_visible_to(requested_by):
            raise OrderPermissionDenied("You may only view your own orders.")
        return order

    def list_orders_for_user(self, user_id: int) -> List[Order]:
        """The user's orders, newest first."""
        return self._order_repo.list({"user_id": user_id})

    def list_all_orders(self, filters: Optional[Dict[str, Any]] = None) -> List[Order]:
        """Every order, newest first (admin dashboard)."""
        return self._order_repo.list(filters)
