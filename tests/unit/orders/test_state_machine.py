"""Unit tests for the order lifecycle graph (no database)."""

import pytest

from modules.orders.constants import TERMINAL_STATES, VALID_TRANSITIONS, OrderStatus
from modules.orders.models import Order

pytestmark = pytest.mark.unit

ALLOWED = [
    (OrderStatus.PENDING, OrderStatus.PROCESSING),
    (OrderStatus.PENDING, OrderStatus.CANCELLED),
    (OrderStatus.PROCESSING, OrderStatus.SHIPPED),
    (OrderStatus.PROCESSING, OrderStatus.CANCELLED),
    (OrderStatus.SHIPPED, OrderStatus.DELIVERED),
]


class TestTransitionGraph:
    def test_every_status_has_an_entry(self):
        assert set(VALID_TRANSITIONS) == set(OrderStatus.values)

    def test_terminal_states_have_no_exits(self):
        for status in TERMINAL_STATES:
            assert VALID_TRANSITIONS[status] == set()

    @pytest.mark.parametrize(("current", "target"), ALLOWED)
    def test_allowed_edges(self, current, target):
        assert Order(status=current).can_transition_to(target)

    @pytest.mark.parametrize(
        ("current", "target"),
        [
            (current, target)
            for current in OrderStatus.values
            for target in OrderStatus.values
            if (current, target) not in ALLOWED
        ],
    )
    def test_every_other_edge_is_rejected(self, current, target):
        assert not Order(status=current).can_transition_to(target)

    def test_shipped_order_cannot_be_cancelled(self):
        assert not Order(status=OrderStatus.SHIPPED).can_transition_to(OrderStatus.CANCELLED)

    @pytest.mark.parametrize("status", [OrderStatus.DELIVERED, OrderStatus.CANCELLED])
    def test_is_terminal(self, status):
        assert Order(status=status).is_terminal

    def test_pending_is_not_terminal(self):
        assert not Order(status=OrderStatus.PENDING).is_terminal
