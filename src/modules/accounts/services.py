"""Account service: the user's saved default shipping address."""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

import structlog
from django.db import transaction

from modules.orders.dtos import ShippingAddressDTO

if TYPE_CHECKING:
    from modules.accounts.repositories.interfaces import IUserProfileRepository

logger = structlog.get_logger(__name__)


class AccountService:
    def __init__(self, profile_repository: IUserProfileRepository) -> None:
        self._profile_repo = profile_repository

    def get_default_address(self, user_id: int) -> Optional[ShippingAddressDTO]:
        profile = self._profile_repo.get_by_user(user_id)
        if profile is None or not profile.default_shipping_address:
            return None
        return ShippingAddressDTO.model_validate(profile.default_shipping_address)

    @transaction.atomic
    def set_default_address(
        self, user_id: int, address: ShippingAddressDTO
    ) -> ShippingAddressDTO:
        profile = self._profile_repo.get_or_create_for_user(user_id)
        profile.default_shipping_address = address.model_dump()
        self._profile_repo.save(profile)
        logger.info("account.default_address_saved", user_id=user_id)
        return address
