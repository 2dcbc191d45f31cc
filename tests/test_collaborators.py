"""Tests for the server-backed food services."""

import pytest
from unittest.mock import AsyncMock, Mock

from fitlog.collaborators import (
    BarcodeLookup,
    FoodMatch,
    FoodSearchService,
    NotificationScheduler,
    PHOTO_ANALYSIS_TIMEOUT,
    PhotoAnalyzer,
    RemoteFoodServices,
)
from fitlog.sync.http_client import NetworkError, RemoteClient


class TestFoodMatch:
    """Tests for FoodMatch."""

    def test_from_dict(self):
        match = FoodMatch.from_dict(
            {"id": "ai-1", "name": "Chicken breast", "servingSize": "100g", "calories": 165, "protein": 31, "carbs": 0, "fat": 4}
        )

        assert match.serving_size == "100g"
        assert match.protein == 31

    def test_to_food(self):
        """Test conversion for the food log."""
        food = FoodMatch(
            name="Rice", calories=130, protein=3, carbs=28, fat=0, serving_size="100g", id="usda-168878"
        ).to_food()

        assert food.name == "Rice"
        assert food.serving == "100g"
        assert food.id == "usda-168878"


class TestRemoteFoodServices:
    """Tests for RemoteFoodServices."""

    def setup_method(self):
        """Set up test fixtures."""
        self.client = Mock(spec=RemoteClient)
        self.client.request = AsyncMock()
        self.services = RemoteFoodServices(self.client)

    def test_satisfies_protocols(self):
        """Test the service fits both seams."""
        assert isinstance(self.services, FoodSearchService)
        assert isinstance(self.services, PhotoAnalyzer)
        assert not isinstance(self.services, BarcodeLookup)
        assert not isinstance(self.services, NotificationScheduler)

    @pytest.mark.asyncio
    async def test_search(self):
        """Test matches are parsed from the foods key."""
        self.client.request.return_value = {
            "foods": [{"id": "ai-1", "name": "Oats", "calories": 389}],
            "totalResults": 1,
        }

        matches = await self.services.search("  oats ")

        assert [m.name for m in matches] == ["Oats"]
        args, kwargs = self.client.request.call_args
        assert args == ("GET", "/api/foods/search")
        assert kwargs["params"] == {"query": "oats"}

    @pytest.mark.asyncio
    async def test_search_short_query(self):
        """Test queries under two characters are not sent."""
        assert await self.services.search("a") == []
        self.client.request.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_search_failure_returns_empty(self):
        """Test transport failures yield no matches."""
        self.client.request.side_effect = NetworkError("offline")

        assert await self.services.search("oats") == []

    @pytest.mark.asyncio
    async def test_analyze_success(self):
        """Test a recognised photo."""
        self.client.request.return_value = {
            "success": True,
            "foods": [{"name": "Spaghetti", "calories": 520, "protein": 18, "carbs": 80, "fat": 14}],
            "mode": "maintenance",
            "description": "Identified 1 food item(s)",
        }

        analysis = await self.services.analyze("aGVsbG8=")

        assert analysis.success is True
        assert analysis.foods[0].name == "Spaghetti"
        assert analysis.mode == "maintenance"
        kwargs = self.client.request.call_args.kwargs
        assert kwargs["data"] == {"imageBase64": "aGVsbG8="}
        assert kwargs["timeout"] == PHOTO_ANALYSIS_TIMEOUT

    @pytest.mark.asyncio
    async def test_analyze_not_recognised(self):
        """Test the server asking for manual entry."""
        self.client.request.return_value = {
            "success": False,
            "message": "No food items identified. Please enter details manually.",
            "requiresManualEntry": True,
        }

        analysis = await self.services.analyze("aGVsbG8=")

        assert analysis.success is False
        assert analysis.requires_manual_entry is True
        assert "No food items" in analysis.message

    @pytest.mark.asyncio
    async def test_analyze_failure(self):
        """Test transport failures fall back to manual entry."""
        self.client.request.side_effect = NetworkError("timed out")

        analysis = await self.services.analyze("aGVsbG8=")

        assert analysis.requires_manual_entry is True

    @pytest.mark.asyncio
    async def test_analyze_without_image(self):
        """Test an empty image is not sent."""
        analysis = await self.services.analyze("")

        assert analysis.success is False
        self.client.request.assert_not_awaited()
