"""Routine repository."""

from ..config import STORAGE_KEYS
from ..models import Routine
from .base import EntityRepository

__all__ = ["RoutineRepository"]


class RoutineRepository(EntityRepository[Routine]):
    key = STORAGE_KEYS["routines"]
    entity_cls = Routine
    endpoint = "/api/routines"
    delete_endpoint = "/api/routines/{id}"
