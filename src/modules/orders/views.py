"""Order API views.

Exposes ``OrderService`` over HTTP.  Checkout turns the session cart into
an order; the order id returned here is what the confirmation page fetches
afterwards.  Domain errors are translated by ``modules.core.errors``.
"""

from __future__ import annotations

from rest_framework import status
from rest_framework.decorators import action
from rest_framework.permissions import IsAdminUser, IsAuthenticated
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.throttling import BaseThrottle
from rest_framework.viewsets import GenericViewSet

from modules.accounts.repositories import UserProfileDjangoRepository
from modules.accounts.services import AccountService
from modules.cart.engine import default_shipping_policy
from modules.cart.storage import SessionCartStore
from modules.core.exceptions import ValidationFailed
from modules.core.pagination import StandardResultsSetPagination
from modules.orders.dtos import CreateOrderDTO
from modules.orders.filters import OrderFilter
from modules.orders.repositories import OrderDjangoRepository
from modules.orders.serializers import (
    CancelOrderSerializer,
    CheckoutSerializer,
    OrderListSerializer,
    OrderSerializer,
    StatusUpdateSerializer,
)
from modules.orders.services import OrderService


class OrderViewSet(GenericViewSet):
    """Checkout, order history, admin status changes and cancellation.

    Does **not** extend ``ModelViewSet``: all ORM access goes through the
    service/repository layer.
    """

    serializer_class = OrderSerializer
    pagination_class = StandardResultsSetPagination

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = OrderService(
            order_repository=OrderDjangoRepository(),
            shipping_policy=default_shipping_policy(),
        )
        self._accounts = AccountService(UserProfileDjangoRepository())

    def get_permissions(self):
        if self.action == "partial_update":
            return [IsAuthenticated(), IsAdminUser()]
        return [IsAuthenticated()]

    def get_throttles(self) -> list[BaseThrottle]:
        if self.action == "create":
            self.throttle_scope = "order_creation"
        elif self.action in {"list", "retrieve"}:
            self.throttle_scope = "order_listing"
        else:
            self.throttle_scope = None
        return super().get_throttles()

    # ------------------------------------------------------------------
    # Checkout
    # ------------------------------------------------------------------

    def create(self, request: Request) -> Response:
        """POST /api/v1/orders/

        Places an order from the session cart and clears the cart.  A
        repeated ``Idempotency-Key`` header returns the original order.
        """
        serializer = CheckoutSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        address = data.get("shipping_address")
        if address is None:
            saved = self._accounts.get_default_address(request.user.pk)
            if saved is None:
                raise ValidationFailed(
                    "A shipping address is required.",
                    field_errors={"shipping_address": ["This field is required."]},
                )
            address = saved

        store = SessionCartStore(request.session)
        cart = store.load()
        dto = CreateOrderDTO.from_cart(
            user_id=request.user.pk,
            lines=cart.snapshot(),
            shipping_address=address,
            idempotency_key=request.headers.get("Idempotency-Key"),
        )

        order = self._service.create_order(dto)
        store.clear()

        if data["save_as_default"]:
            self._accounts.set_default_address(request.user.pk, dto.shipping_address)

        return Response(OrderSerializer(order).data, status=status.HTTP_201_CREATED)

    # ------------------------------------------------------------------
    # List / Retrieve
    # ------------------------------------------------------------------

    def list(self, request: Request) -> Response:
        """GET /api/v1/orders/

        Own orders, newest first.  Staff may pass ``?scope=all`` plus the
        ``OrderFilter`` parameters to browse every order.
        """
        if request.query_params.get("scope") == "all" and request.user.is_staff:
            filters = OrderFilter(request.query_params).to_lookups()
            orders = self._service.list_all_orders(filters)
        else:
            orders = self._service.list_orders_for_user(request.user.pk)

        page = self.paginate_queryset(orders)
        return self.get_paginated_response(OrderListSerializer(page, many=True).data)

    def retrieve(self, request: Request, pk: str | None = None) -> Response:
        """GET /api/v1/orders/{pk}/"""
        order = self._service.get_order(pk, requested_by=request.user)
        return Response(OrderSerializer(order).data)

    # ------------------------------------------------------------------
    # Status changes
    # ------------------------------------------------------------------

    def partial_update(self, request: Request, pk: str | None = None) -> Response:
        """PATCH /api/v1/orders/{pk}/ (staff only) ``{"status": ..., "notes": ...}``"""
        serializer = StatusUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        order = self._service.transition_status(
            order_id=pk,
            new_status=serializer.validated_data["status"],
            changed_by=request.user,
            notes=serializer.validated_data["notes"],
        )
        return Response(OrderSerializer(order).data)

    @action(detail=True, methods=["post"])
    def cancel(self, request: Request, pk: str | None = None) -> Response:
        """POST /api/v1/orders/{pk}/cancel/ (owner or staff)"""
        serializer = CancelOrderSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        order = self._service.cancel_order(
            order_id=pk,
            requested_by=request.user,
            notes=serializer.validated_data["notes"],
        )
        return Response(OrderSerializer(order).data)
