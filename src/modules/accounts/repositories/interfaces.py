"""User profile repository interface."""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, Optional

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from modules.accounts.models import UserProfile


class IUserProfileRepository(IRepository["UserProfile"]):
    @abstractmethod
    def get_by_user(self, user_id: int) -> Optional[UserProfile]:
        """Retrieve the profile of a user, if one was ever saved."""

    @abstractmethod
    def get_or_create_for_user(self, user_id: int) -> UserProfile:
        """Retrieve the profile of a user, creating an empty one if needed."""
