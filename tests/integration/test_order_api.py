"""Integration tests for order history, admin status changes and cancellation."""

from decimal import Decimal
from uuid import uuid4

import pytest

from modules.cart.engine import CartLine, FlatRateShipping, ItemSnapshot
from modules.orders.dtos import CreateOrderDTO
from modules.orders.repositories import OrderDjangoRepository
from modules.orders.services import OrderService

pytestmark = pytest.mark.integration

ORDERS_URL = "/api/v1/orders/"


@pytest.fixture()
def place_order(product_a, shipping_address):
    service = OrderService(
        OrderDjangoRepository(), FlatRateShipping(Decimal("5.00"), Decimal("20.00"))
    )

    def _place(owner, quantity=1):
        return service.create_order(
            CreateOrderDTO.from_cart(
                user_id=owner.pk,
                lines=[CartLine(item=ItemSnapshot.from_product(product_a), quantity=quantity)],
                shipping_address=shipping_address,
            )
        )

    return _place


@pytest.fixture()
def order(place_order, user):
    return place_order(user)


@pytest.fixture()
def other_client(other_user):
    from rest_framework.test import APIClient

    client = APIClient()
    client.force_authenticate(user=other_user)
    return client


class TestListOrders:
    def test_lists_own_orders_newest_first(self, auth_client, place_order, user, other_user):
        first = place_order(user)
        second = place_order(user, quantity=3)
        place_order(other_user)

        response = auth_client.get(ORDERS_URL)
        assert response.status_code == 200
        data = response.json()
        assert data["count"] == 2
        assert [o["id"] for o in data["results"]] == [str(second.id), str(first.id)]
        assert data["results"][0]["item_count"] == 3

    def test_customer_scope_all_is_ignored(self, auth_client, place_order, user, other_user):
        place_order(user)
        place_order(other_user)
        assert auth_client.get(ORDERS_URL, {"scope": "all"}).json()["count"] == 1

    def test_staff_lists_all_with_filters(self, staff_client, place_order, user, other_user):
        place_order(user)
        place_order(other_user, quantity=3)
        response = staff_client.get(ORDERS_URL, {"scope": "all"})
        assert response.json()["count"] == 2
        response = staff_client.get(ORDERS_URL, {"scope": "all", "min_total": "25"})
        assert response.json()["count"] == 1
        response = staff_client.get(ORDERS_URL, {"scope": "all", "user": other_user.pk})
        assert response.json()["count"] == 1

    def test_anonymous_rejected(self, api_client):
        assert api_client.get(ORDERS_URL).status_code == 401


class TestRetrieveOrder:
    def test_owner_reads_order(self, auth_client, order):
        response = auth_client.get(f"{ORDERS_URL}{order.id}/")
        assert response.status_code == 200
        assert response.json()["order_number"] == order.order_number

    def test_stranger_is_forbidden(self, other_client, order):
        response = other_client.get(f"{ORDERS_URL}{order.id}/")
        assert response.status_code == 403
        assert response.json()["errors"][0]["code"] == "permission_denied"

    def test_staff_reads_any_order(self, staff_client, order):
        assert staff_client.get(f"{ORDERS_URL}{order.id}/").status_code == 200

    def test_unknown_order(self, auth_client):
        assert auth_client.get(f"{ORDERS_URL}{uuid4()}/").status_code == 404


class TestStatusUpdate:
    def test_staff_advances_status(self, staff_client, order):
        response = staff_client.patch(
            f"{ORDERS_URL}{order.id}/", {"status": "PROCESSING", "notes": "Packed"}, format="json"
        )
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "PROCESSING"
        assert data["status_history"][-1] == {
            "old_status": "PENDING",
            "new_status": "PROCESSING",
            "notes": "Packed",
            "created_at": data["status_history"][-1]["created_at"],
        }

    def test_illegal_transition_is_conflict(self, staff_client, order):
        response = staff_client.patch(
            f"{ORDERS_URL}{order.id}/", {"status": "DELIVERED"}, format="json"
        )
        assert response.status_code == 409
        body = response.json()
        assert body["errors"][0]["code"] == "illegal_transition"
        order.refresh_from_db()
        assert order.status == "PENDING"

    def test_unknown_status_value(self, staff_client, order):
        response = staff_client.patch(f"{ORDERS_URL}{order.id}/", {"status": "LOST"}, format="json")
        assert response.status_code == 400
        assert response.json()["errors"][0]["attr"] == "status"

    def test_customer_cannot_change_status(self, auth_client, order):
        response = auth_client.patch(
            f"{ORDERS_URL}{order.id}/", {"status": "PROCESSING"}, format="json"
        )
        assert response.status_code == 403


class TestCancelOrder:
    def test_owner_cancels(self, auth_client, order):
        response = auth_client.post(f"{ORDERS_URL}{order.id}/cancel/", {}, format="json")
        assert response.status_code == 200
        assert response.json()["status"] == "CANCELLED"

    def test_stranger_cannot_cancel(self, other_client, order):
        response = other_client.post(f"{ORDERS_URL}{order.id}/cancel/", {}, format="json")
        assert response.status_code == 403
        order.refresh_from_db()
        assert order.status == "PENDING"

    def test_staff_cancels_with_notes(self, staff_client, order):
        response = staff_client.post(
            f"{ORDERS_URL}{order.id}/cancel/", {"notes": "Customer called"}, format="json"
        )
        assert response.json()["status_history"][-1]["notes"] == "Customer called"

    def test_shipped_order_cannot_be_cancelled(self, auth_client, staff_client, order):
        for status in ("PROCESSING", "SHIPPED"):
            staff_client.patch(f"{ORDERS_URL}{order.id}/", {"status": status}, format="json")
        response = auth_client.post(f"{ORDERS_URL}{order.id}/cancel/", {}, format="json")
        assert response.status_code == 409

    def test_cancelled_order_is_final(self, auth_client, staff_client, order):
        auth_client.post(f"{ORDERS_URL}{order.id}/cancel/", {}, format="json")
        response = staff_client.patch(
            f"{ORDERS_URL}{order.id}/", {"status": "PROCESSING"}, format="json"
        )
        assert response.status_code == 409
