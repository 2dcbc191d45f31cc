"""Food log repository and daily nutrition totals."""

import logging
from datetime import datetime, timezone
from typing import Optional

from ..config import STORAGE_KEYS
from ..models import Food, FoodLogEntry, MacroTargets
from ..nutrition import sum_macros
from ..sync.http_client import RemoteError
from .base import DECODE_ERRORS, EntityRepository, SyncOutcome

__all__ = ["FoodLogRepository"]

logger = logging.getLogger(__name__)


class FoodLogRepository(EntityRepository[FoodLogEntry]):
    key = STORAGE_KEYS["food_log"]
    entity_cls = FoodLogEntry
    endpoint = "/api/food-logs"
    delete_endpoint = "/api/food-logs/{id}"

    async def get_for_date(self, date: str) -> list[FoodLogEntry]:
        """Entries logged on date (YYYY-MM-DD).

        A date-filtered server response is a partial view, so it is returned
        without touching the local mirror.
        """
        if self._can_sync(self.endpoint):
            try:
                entries, _ = await self._fetch_remote(params={"date": date})
                return entries
            except RemoteError as e:
                logger.info(f"Using local food log for {date}: {e}")
            except DECODE_ERRORS as e:
                logger.warning(f"Malformed food log response, using local data: {e}")

        return [e for e in await self.load_local() if e.date == date]

    async def daily_totals(self, date: str) -> MacroTargets:
        """Calories and macros eaten on date; zeros when nothing was logged."""
        return sum_macros(e for e in await self.get_for_date(date) if e.date == date)

    async def add(
        self,
        food: Food,
        date: str,
        meal_type: Optional[str] = None,
    ) -> tuple[FoodLogEntry, SyncOutcome]:
        """Log a food for date as a new entry."""
        entry = FoodLogEntry(
            food=food,
            food_id=food.id,
            date=date,
            created_at=datetime.now(timezone.utc).isoformat(),
            meal_type=meal_type,
        )
        outcome = await self.save(entry)
        return entry, outcome
