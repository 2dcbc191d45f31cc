"""User profile repository (device only)."""

from ..config import STORAGE_KEYS
from ..models import UserProfile
from .base import SingletonRepository

__all__ = ["UserProfileRepository"]


class UserProfileRepository(SingletonRepository[UserProfile]):
    key = STORAGE_KEYS["user_profile"]
    entity_cls = UserProfile
