"""User profile repositories package."""

from modules.accounts.repositories.django_repository import UserProfileDjangoRepository
from modules.accounts.repositories.interfaces import IUserProfileRepository

__all__ = ["IUserProfileRepository", "UserProfileDjangoRepository"]
