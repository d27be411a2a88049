"""Django ORM implementation of the Order repository.

Writes are atomic.  Domain events collected on the aggregate are handed
to the event bus with ``transaction.on_commit``, so subscribers (the
confirmation e-mail, for one) never see an order that was rolled back.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional
from uuid import UUID

import structlog
from django.core.exceptions import ValidationError
from django.db import transaction

from modules.core.exceptions import persistence_boundary
from modules.orders.models import Order, OrderItem, OrderStatusHistory
from modules.orders.repositories.interfaces import IOrderRepository
from shared.domain.bus import IEventBus
from shared.infrastructure.bus import event_bus as default_event_bus

logger = structlog.get_logger(__name__)


class OrderDjangoRepository(IOrderRepository):
    """Concrete Order repository backed by Django ORM."""

    def __init__(self, event_bus: Optional[IEventBus] = None) -> None:
        self._event_bus = event_bus or default_event_bus

    @staticmethod
    def _base_queryset():
        return Order.objects.select_related("user").prefetch_related(
            "items", "status_history"
        )

    # ------------------------------------------------------------------
    # Create (aggregate root + children)
    # ------------------------------------------------------------------

    @persistence_boundary("Order")
    @transaction.atomic
    def create(self, data: Dict[str, Any]) -> Order:
        order = Order(
            user_id=data["user_id"],
            subtotal=data["subtotal"],
            shipping_cost=data["shipping_cost"],
            grand_total=data["grand_total"],
            shipping_address=data["shipping_address"],
            idempotency_key=data.get("idempotency_key"),
        )
        order.save()

        items = data.get("items", [])
        for position, item_data in enumerate(items):
            OrderItem(
                order=order,
                product_id=item_data["product_id"],
                product_name=item_data["product_name"],
                image_url=item_data.get("image_url", ""),
                quantity=item_data["quantity"],
                unit_price=item_data["unit_price"],
                position=position,
            ).save()

        logger.info("order.persisted", order_id=str(order.id), item_count=len(items))
        return order

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    @persistence_boundary("Order")
    def get_by_id(self, id: str) -> Optional[Order]:
        """Returns ``None`` for non-existent or malformed IDs."""
        try:
            return self._base_queryset().filter(id=id).first()
        except (ValueError, ValidationError):
            return None

    @persistence_boundary("Order")
    def get_for_update(self, id: str) -> Optional[Order]:
        try:
            return Order.objects.select_for_update().filter(id=id).first()
        except (ValueError, ValidationError):
            return None

    @persistence_boundary("Order")
    def list(self, filters: Optional[Dict[str, Any]] = None) -> List[Order]:
        queryset = self._base_queryset().order_by("-created_at", "-id")
        if filters:
            queryset = queryset.filter(**filters)
        return list(queryset)

    @persistence_boundary("Order")
    def get_by_idempotency_key(self, key: str) -> Optional[Order]:
        return self._base_queryset().filter(idempotency_key=key).first()

    # ------------------------------------------------------------------
    # Save
    # ------------------------------------------------------------------

    @persistence_boundary("Order")
    @transaction.atomic
    def save(self, entity: Order) -> Order:
        """Persist the order and publish its pending domain events on commit."""
        entity.save()

        events = entity.domain_events
        for event in events:
            transaction.on_commit(
                lambda event=event: self._event_bus.publish(event), robust=True
            )
        entity.clear_domain_events()

        logger.info("order.saved", order_id=str(entity.id), event_count=len(events))
        return entity

    @persistence_boundary("Order status history")
    @transaction.atomic
    def add_history(
        self,
        order_id: UUID,
        status: str,
        notes: str = "",
        old_status: Optional[str] = None,
        user_id: Optional[int] = None,
    ) -> OrderStatusHistory:
        history = OrderStatusHistory.objects.create(
            order_id=order_id,
            old_status=old_status,
            new_status=status,
            notes=notes,
            user_id=user_id,
        )
        logger.info(
            "order.history_added",
            order_id=str(order_id),
            old_status=old_status,
            new_status=status,
        )
        return history
