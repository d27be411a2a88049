"""Cart API views.

The cart belongs to the browser session, so these endpoints are open to
anonymous shoppers.  Checkout (``POST /api/v1/orders/``) consumes it.
"""

from __future__ import annotations

from rest_framework import status
from rest_framework.permissions import AllowAny
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from modules.cart.serializers import (
    AddCartItemSerializer,
    CartSerializer,
    UpdateCartItemSerializer,
)
from modules.cart.services import CartService
from modules.cart.storage import SessionCartStore
from modules.catalog.repositories import ProductDjangoRepository


class CartServiceMixin:
    permission_classes = [AllowAny]

    def get_service(self, request: Request) -> CartService:
        return CartService(
            store=SessionCartStore(request.session),
            product_repository=ProductDjangoRepository(),
        )


class CartView(CartServiceMixin, APIView):
    def get(self, request: Request) -> Response:
        """GET /api/v1/cart/"""
        cart = self.get_service(request).get_cart()
        return Response(CartSerializer(cart).data)

    def delete(self, request: Request) -> Response:
        """DELETE /api/v1/cart/"""
        cart = self.get_service(request).clear()
        return Response(CartSerializer(cart).data)


class CartItemsView(CartServiceMixin, APIView):
    def post(self, request: Request) -> Response:
        """POST /api/v1/cart/items/ ``{"item_id": ..., "quantity": 1}``"""
        serializer = AddCartItemSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        cart = self.get_service(request).add_item(str(data["item_id"]), data["quantity"])
        return Response(CartSerializer(cart).data, status=status.HTTP_201_CREATED)


class CartItemDetailView(CartServiceMixin, APIView):
    def patch(self, request: Request, item_id: str) -> Response:
        """PATCH /api/v1/cart/items/{item_id}/ ``{"quantity": N}``"""
        serializer = UpdateCartItemSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        cart = self.get_service(request).update_quantity(
            item_id, serializer.validated_data["quantity"]
        )
        return Response(CartSerializer(cart).data)

    def delete(self, request: Request, item_id: str) -> Response:
        """DELETE /api/v1/cart/items/{item_id}/"""
        cart = self.get_service(request).remove_item(item_id)
        return Response(CartSerializer(cart).data)
