"""Celery tasks for order notifications.

Sending is best-effort: the order is already committed when the task
runs, failures are logged and reported in the task result, and nothing is
retried.
"""

from __future__ import annotations

from typing import Any, Dict

import structlog
from celery import shared_task
from django.conf import settings

from modules.cart.engine import default_shipping_policy
from modules.core.exceptions import ConfigurationMissing, DomainError
from modules.notifications.composer import compose_confirmation
from modules.notifications.transport import SmtpEmailTransport
from modules.orders.dtos import OrderOutputDTO
from modules.orders.repositories import OrderDjangoRepository
from modules.orders.services import OrderService

logger = structlog.get_logger(__name__)


@shared_task(name="notifications.send_order_confirmation", max_retries=0)
def send_order_confirmation(order_id: str) -> Dict[str, Any]:
    log = logger.bind(order_id=order_id)

    try:
        order = OrderService(OrderDjangoRepository(), default_shipping_policy()).get_order(
            order_id
        )
    except DomainError as exc:
        log.error("notification.order_unavailable", kind=exc.kind.value, error=exc.message)
        return {"status": "failed", "error": exc.kind.value}

    message = compose_confirmation(
        OrderOutputDTO.from_entity(order),
        shop_name=settings.SHOP_NAME,
        shop_url=settings.SHOP_URL,
    )

    try:
        transport = SmtpEmailTransport.from_settings()
    except ConfigurationMissing as exc:
        log.error("notification.configuration_missing", missing=exc.missing)
        return {"status": "skipped", "missing": exc.missing}

    result = transport.send(
        to=message.to,
        subject=message.subject,
        html_body=message.html_body,
        text_body=message.text_body,
    )
    if not result.success:
        log.error("notification.failed", error=result.error)
        return {"status": "failed", "error": result.error}

    log.info("notification.sent", order_number=order.order_number)
    return {"status": "sent", "order_number": order.order_number}
