"""Macro target repository."""

from ..config import STORAGE_KEYS
from ..models import MacroTargets
from .base import SingletonRepository

__all__ = ["MacroTargetsRepository"]


class MacroTargetsRepository(SingletonRepository[MacroTargets]):
    key = STORAGE_KEYS["macro_targets"]
    entity_cls = MacroTargets
    endpoint = "/api/macro-targets"
