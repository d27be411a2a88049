"""Django ORM implementation of the user profile repository."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

import structlog
from django.core.exceptions import ValidationError
from django.db import transaction

from modules.accounts.models import UserProfile
from modules.accounts.repositories.interfaces import IUserProfileRepository
from modules.core.exceptions import persistence_boundary

logger = structlog.get_logger(__name__)


class UserProfileDjangoRepository(IUserProfileRepository):
    @persistence_boundary("User profile")
    def get_by_id(self, id: str) -> Optional[UserProfile]:
        try:
            return UserProfile.objects.filter(id=id).first()
        except (ValueError, ValidationError):
            return None

    @persistence_boundary("User profile")
    def get_by_user(self, user_id: int) -> Optional[UserProfile]:
        return UserProfile.objects.filter(user_id=user_id).first()

    @persistence_boundary("User profile")
    @transaction.atomic
    def get_or_create_for_user(self, user_id: int) -> UserProfile:
        profile, created = UserProfile.objects.get_or_create(user_id=user_id)
        if created:
            logger.info("profile.created", user_id=user_id)
        return profile

    @persistence_boundary("User profile")
    def list(self, filters: Optional[Dict[str, Any]] = None) -> List[UserProfile]:
        queryset = UserProfile.objects.all()
        if filters:
            queryset = queryset.filter(**filters)
        return list(queryset)

    @persistence_boundary("User profile")
    @transaction.atomic
    def save(self, entity: UserProfile) -> UserProfile:
        entity.save()
        logger.info("profile.saved", user_id=entity.user_id)
        return entity
