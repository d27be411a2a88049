"""Order confirmation e-mail composition.

``compose_confirmation`` is a pure function of the order and the shop
identity: composing the same order twice yields identical messages.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict

from django.template.loader import render_to_string

from modules.orders.dtos import OrderOutputDTO

SUBJECT_TEMPLATE = "Your {shop_name} Order #{order_number} is Confirmed!"
HTML_TEMPLATE = "notifications/order_confirmation.html"
TEXT_TEMPLATE = "notifications/order_confirmation.txt"


@dataclass(frozen=True)
class ConfirmationMessage:
    to: str
    subject: str
    html_body: str
    text_body: str


def build_context(order: OrderOutputDTO, shop_name: str, shop_url: str) -> Dict[str, Any]:
    address = order.shipping_address
    return {
        "shop_name": shop_name,
        "shop_url": shop_url.rstrip("/"),
        "customer_name": address.full_name,
        "order_number": order.order_number,
        "order_id": str(order.id),
        "items": [
            {
                "name": item.product_name,
                "quantity": item.quantity,
                "unit_price": item.unit_price,
                "line_total": item.line_total,
            }
            for item in order.items
        ],
        "subtotal": order.subtotal,
        "shipping_cost": order.shipping_cost,
        "grand_total": order.grand_total,
        "address": address,
    }


def compose_confirmation(
    order: OrderOutputDTO, shop_name: str, shop_url: str
) -> ConfirmationMessage:
    context = build_context(order, shop_name, shop_url)
    return ConfirmationMessage(
        to=order.customer_email,
        subject=SUBJECT_TEMPLATE.format(
            shop_name=shop_name, order_number=order.order_number
        ),
        html_body=render_to_string(HTML_TEMPLATE, context),
        text_body=render_to_string(TEXT_TEMPLATE, context),
    )
