"""Body-weight repository: one entry per calendar day."""

import logging
from datetime import date as date_cls
from typing import Optional
from urllib.parse import quote

from ..config import STORAGE_KEYS
from ..models import BodyWeightEntry
from .base import EntityRepository, SyncOutcome

__all__ = ["BodyWeightRepository"]

logger = logging.getLogger(__name__)


class BodyWeightRepository(EntityRepository[BodyWeightEntry]):
    """Weigh-ins.

    The server deletes by its own numeric id, resolved through the
    identifier map learned from fetches and push responses.
    """

    key = STORAGE_KEYS["body_weights"]
    entity_cls = BodyWeightEntry
    endpoint = "/api/body-weights"
    delete_endpoint = "/api/body-weights/{id}"

    async def add_for_today(
        self, weight_kg: float, today: Optional[str] = None
    ) -> tuple[BodyWeightEntry, SyncOutcome]:
        """Record today's weight, replacing any earlier entry for the same day."""
        today = today or date_cls.today().isoformat()
        existing = next(
            (e for e in await self.load_local() if e.date == today), None
        )
        entry = BodyWeightEntry(
            id=existing.id if existing else "",
            weight_kg=weight_kg,
            date=today,
        )
        outcome = await self.save(entry)
        return entry, outcome

    async def _remote_delete_path(self, entity_id: str) -> Optional[str]:
        server_id = (await self.server_ids()).get(entity_id)
        if server_id is None:
            return None
        return self.delete_endpoint.format(id=quote(str(server_id), safe=""))
