"""Run history repository."""

from ..config import STORAGE_KEYS
from ..models import RunEntry
from .base import EntityRepository

__all__ = ["RunRepository"]


class RunRepository(EntityRepository[RunEntry]):
    key = STORAGE_KEYS["run_history"]
    entity_cls = RunEntry
    endpoint = "/api/runs"
    delete_endpoint = "/api/runs/{id}"

    def _order(self, items: list[RunEntry]) -> list[RunEntry]:
        # Newest first when served from the device
        return sorted(items, key=lambda r: r.completed_at, reverse=True)
