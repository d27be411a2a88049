"""Event handlers that turn domain events into notifications."""

from __future__ import annotations

import structlog
from kombu.exceptions import OperationalError as BrokerUnavailable

from modules.notifications.tasks import send_order_confirmation
from modules.orders.events import OrderCreated
from shared.domain.bus import IEventHandler

logger = structlog.get_logger(__name__)


class OrderConfirmationHandler(IEventHandler[OrderCreated]):
    """Enqueues the confirmation e-mail once an order is committed.

    A broker outage is logged and swallowed: the order is already placed
    and must not fail because of its e-mail.
    """

    def __init__(self, task=send_order_confirmation) -> None:
        self._task = task

    def handle(self, event: OrderCreated) -> None:
        order_id = str(event.aggregate_id)
        try:
            self._task.delay(order_id)
        except BrokerUnavailable as exc:
            logger.error(
                "notification.enqueue_failed",
                order_id=order_id,
                order_number=event.order_number,
                error=str(exc),
            )
            return
        logger.info("notification.enqueued", order_id=order_id, order_number=event.order_number)


order_confirmation_handler = OrderConfirmationHandler()
