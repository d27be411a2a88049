"""Unit tests for the confirmation task and the OrderCreated handler."""

from __future__ import annotations

from decimal import Decimal
from unittest.mock import MagicMock, patch
from uuid import uuid4

import pytest
from django.core import mail
from kombu.exceptions import OperationalError

from modules.cart.engine import CartLine, FlatRateShipping, ItemSnapshot
from modules.notifications.handlers import OrderConfirmationHandler, order_confirmation_handler
from modules.notifications.tasks import send_order_confirmation
from modules.notifications.transport import DeliveryResult
from modules.orders.dtos import CreateOrderDTO
from modules.orders.events import OrderCreated
from modules.orders.repositories import OrderDjangoRepository
from modules.orders.services import OrderService
from shared.infrastructure.bus import InMemoryEventBus, event_bus

pytestmark = pytest.mark.unit


@pytest.fixture()
def smtp_settings(settings):
    settings.SMTP_HOST = "smtp.example.com"
    settings.SMTP_PORT = "587"
    settings.SMTP_USER = "mailer"
    settings.SMTP_PASS = "secret"
    settings.SMTP_FROM_EMAIL = "orders@example.com"
    settings.SHOP_NAME = "CrackleMart"
    return settings


@pytest.fixture()
def order(user, product_a, shipping_address):
    service = OrderService(
        OrderDjangoRepository(event_bus=InMemoryEventBus()),
        FlatRateShipping(Decimal("5.00"), Decimal("20.00")),
    )
    return service.create_order(
        CreateOrderDTO.from_cart(
            user_id=user.pk,
            lines=[CartLine(item=ItemSnapshot.from_product(product_a), quantity=1)],
            shipping_address=shipping_address,
        )
    )


class TestSendOrderConfirmation:
    def test_sends_to_checkout_email(self, order, smtp_settings):
        result = send_order_confirmation(str(order.id))

        assert result == {"status": "sent", "order_number": order.order_number}
        assert len(mail.outbox) == 1
        message = mail.outbox[0]
        assert message.to == ["jane.doe@example.com"]
        assert message.subject == f"Your CrackleMart Order #{order.order_number} is Confirmed!"
        assert "Golden Sparkler x1" in message.body

    def test_skipped_without_smtp_settings(self, order):
        result = send_order_confirmation(str(order.id))

        assert result["status"] == "skipped"
        assert "SMTP_HOST" in result["missing"]
        assert mail.outbox == []

    def test_unknown_order_fails_without_raising(self, smtp_settings):
        result = send_order_confirmation(str(uuid4()))
        assert result == {"status": "failed", "error": "not_found"}
        assert mail.outbox == []

    def test_delivery_failure_is_reported(self, order, smtp_settings):
        with patch(
            "modules.notifications.tasks.SmtpEmailTransport.send",
            return_value=DeliveryResult.failed("auth"),
        ):
            result = send_order_confirmation(str(order.id))
        assert result == {"status": "failed", "error": "auth"}

    def test_order_is_untouched_by_failure(self, order, smtp_settings):
        with patch(
            "modules.notifications.tasks.SmtpEmailTransport.send",
            return_value=DeliveryResult.failed("timeout"),
        ):
            send_order_confirmation(str(order.id))
        order.refresh_from_db()
        assert order.status == "PENDING"


class TestOrderConfirmationHandler:
    def test_enqueues_task_with_order_id(self):
        task = MagicMock()
        order_id = uuid4()
        OrderConfirmationHandler(task=task).handle(OrderCreated(aggregate_id=order_id))
        task.delay.assert_called_once_with(str(order_id))

    def test_broker_outage_is_swallowed(self):
        task = MagicMock()
        task.delay.side_effect = OperationalError("broker down")
        OrderConfirmationHandler(task=task).handle(OrderCreated(aggregate_id=uuid4()))
        task.delay.assert_called_once()

    def test_subscribed_on_startup(self):
        assert order_confirmation_handler in event_bus.handlers_for(OrderCreated)
