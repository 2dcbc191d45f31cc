"""Interfaces to services outside the data layer.

Food search and photo analysis run on the FitLog server and are implemented
here by RemoteFoodServices. Barcode lookup and local notifications belong to
the host app; only their interfaces live here.
"""

import logging
from dataclasses import dataclass, field
from typing import Optional, Protocol, runtime_checkable

from .models import Food
from .sync.http_client import RemoteClient, RemoteError

__all__ = [
    "FoodMatch",
    "PhotoAnalysis",
    "FoodSearchService",
    "PhotoAnalyzer",
    "BarcodeLookup",
    "NotificationScheduler",
    "RemoteFoodServices",
]

logger = logging.getLogger(__name__)

SEARCH_TIMEOUT = 15
PHOTO_ANALYSIS_TIMEOUT = 45
MIN_QUERY_LENGTH = 2


@dataclass
class FoodMatch:
    """A candidate food with nutrition per serving."""

    name: str
    calories: float = 0
    protein: float = 0
    carbs: float = 0
    fat: float = 0
    serving_size: Optional[str] = None
    brand: Optional[str] = None
    id: str = ""

    @classmethod
    def from_dict(cls, data: dict) -> "FoodMatch":
        return cls(
            id=str(data.get("id") or ""),
            name=data.get("name") or "",
            brand=data.get("brand"),
            serving_size=data.get("servingSize"),
            calories=data.get("calories") or 0,
            protein=data.get("protein") or 0,
            carbs=data.get("carbs") or 0,
            fat=data.get("fat") or 0,
        )

    def to_food(self) -> Food:
        """Convert to a Food ready for the food log."""
        return Food(
            id=self.id,
            name=self.name,
            calories=self.calories,
            protein=self.protein,
            carbs=self.carbs,
            fat=self.fat,
            serving=self.serving_size,
        )


@dataclass
class PhotoAnalysis:
    success: bool
    foods: list[FoodMatch] = field(default_factory=list)
    message: str = ""
    mode: Optional[str] = None
    requires_manual_entry: bool = False

    @classmethod
    def manual_entry(cls, message: str) -> "PhotoAnalysis":
        return cls(success=False, message=message, requires_manual_entry=True)


@runtime_checkable
class FoodSearchService(Protocol):
    """Free-text food search."""

    async def search(self, query: str) -> list[FoodMatch]: ...


@runtime_checkable
class PhotoAnalyzer(Protocol):
    """Estimates foods and macros from a meal photo."""

    async def analyze(self, image_base64: str) -> PhotoAnalysis: ...


@runtime_checkable
class BarcodeLookup(Protocol):
    """Resolves a product barcode; None when the product is unknown."""

    async def lookup(self, barcode: str) -> Optional[FoodMatch]: ...


@runtime_checkable
class NotificationScheduler(Protocol):
    """Schedules the daily workout reminder on the device."""

    async def schedule_workout_reminder(self, hour: int, minute: int) -> Optional[str]: ...


class RemoteFoodServices:
    """Food search and photo analysis backed by the FitLog server.

    Neither call raises on transport failure: search yields no matches and
    photo analysis asks for manual entry, so the caller can fall back.
    """

    def __init__(self, client: RemoteClient):
        self.client = client

    async def search(self, query: str) -> list[FoodMatch]:
        query = query.strip()
        if len(query) < MIN_QUERY_LENGTH:
            return []

        try:
            data = await self.client.request(
                "GET",
                "/api/foods/search",
                params={"query": query},
                timeout=SEARCH_TIMEOUT,
            )
        except RemoteError as e:
            logger.warning(f"Food search failed: {e}")
            return []

        foods = data.get("foods") if isinstance(data, dict) else None
        if not isinstance(foods, list):
            return []
        return [FoodMatch.from_dict(f) for f in foods if isinstance(f, dict)]

    async def analyze(self, image_base64: str) -> PhotoAnalysis:
        if not image_base64:
            return PhotoAnalysis.manual_entry("No image provided")

        try:
            data = await self.client.request(
                "POST",
                "/api/foods/analyze-photo",
                data={"imageBase64": image_base64},
                timeout=PHOTO_ANALYSIS_TIMEOUT,
            )
        except RemoteError as e:
            logger.warning(f"Photo analysis failed: {e}")
            return PhotoAnalysis.manual_entry("Photo analysis unavailable")

        if not isinstance(data, dict):
            return PhotoAnalysis.manual_entry("Unexpected response from photo analysis")

        foods = [FoodMatch.from_dict(f) for f in data.get("foods") or [] if isinstance(f, dict)]
        if not data.get("success") or not foods:
            return PhotoAnalysis.manual_entry(data.get("message") or "No food items identified")

        return PhotoAnalysis(
            success=True,
            foods=foods,
            message=data.get("description") or "",
            mode=data.get("mode"),
        )
