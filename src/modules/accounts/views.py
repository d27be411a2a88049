"""Account API views."""

from __future__ import annotations

from rest_framework.permissions import IsAuthenticated
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from modules.accounts.repositories import UserProfileDjangoRepository
from modules.accounts.services import AccountService
from modules.orders.dtos import ShippingAddressDTO


class DefaultAddressView(APIView):
    """GET/PUT /api/v1/account/address/"""

    permission_classes = [IsAuthenticated]

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = AccountService(UserProfileDjangoRepository())

    def get(self, request: Request) -> Response:
        address = self._service.get_default_address(request.user.pk)
        return Response(
            {
                "username": request.user.get_username(),
                "shipping_address": address.model_dump() if address else None,
            }
        )

    def put(self, request: Request) -> Response:
        address = ShippingAddressDTO.model_validate(request.data)
        saved = self._service.set_default_address(request.user.pk, address)
        return Response(
            {
                "username": request.user.get_username(),
                "shipping_address": saved.model_dump(),
            }
        )
