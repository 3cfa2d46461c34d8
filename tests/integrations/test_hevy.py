"""Tests for Hevy integration."""

import httpx
import pytest

from gotrain.integrations.base import IntegrationError, RateLimitError
from gotrain.integrations.hevy import HevyClient, HevyWorkout


WORKOUTS_PAGE = {
    "page": 1,
    "page_count": 3,
    "workouts": [
        {
            "id": "w1",
            "title": "Push Day",
            "description": None,
            "start_time": "2024-03-01T10:00:00Z",
            "end_time": "2024-03-01T11:00:00Z",
            "exercises": [
                {
                    "index": 0,
                    "title": "Bench Press (Barbell)",
                    "notes": "",
                    "sets": [
                        {"index": 0, "type": "normal", "weight_kg": 80, "reps": 8},
                        {"index": 1, "type": "normal", "weight_kg": 85, "reps": 6},
                    ],
                },
                {
                    "index": 1,
                    "title": "Plank",
                    "sets": [
                        {"index": 0, "weight_kg": None, "reps": None, "duration_seconds": 60},
                    ],
                },
            ],
        }
    ],
}


class TestHevyWorkout:
    """Tests for HevyWorkout parsing."""

    def test_from_api_response(self):
        workout = HevyWorkout.from_api_response(WORKOUTS_PAGE["workouts"][0])

        assert workout.title == "Push Day"
        assert workout.description == ""
        assert [e.exercise_title for e in workout.exercises] == ["Bench Press (Barbell)", "Plank"]
        assert workout.exercises[0].sets[1].weight_kg == 85

    def test_null_weight_and_reps_become_zero(self):
        """Timed and bodyweight sets count as zero load."""
        plank = HevyWorkout.from_api_response(WORKOUTS_PAGE["workouts"][0]).exercises[1]
        assert plank.sets[0].weight_kg == 0
        assert plank.sets[0].reps == 0
        assert plank.sets[0].duration_seconds == 60


class TestHevyClient:
    """Tests for HevyClient.fetch_workouts."""

    @pytest.mark.asyncio
    async def test_fetch_workouts(self):
        """Sends the api-key header and paging parameters."""
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["key"] = request.headers["api-key"]
            seen["params"] = dict(request.url.params)
            return httpx.Response(200, json=WORKOUTS_PAGE)

        async with HevyClient("hevy-key", transport=httpx.MockTransport(handler)) as client:
            workouts = await client.fetch_workouts(page=1, page_size=5)

        assert seen["key"] == "hevy-key"
        assert seen["params"] == {"page": "1", "pageSize": "5"}
        assert len(workouts) == 1

    @pytest.mark.asyncio
    async def test_error_status(self):
        transport = httpx.MockTransport(lambda request: httpx.Response(401))
        async with HevyClient("bad", transport=transport) as client:
            with pytest.raises(IntegrationError, match="Hevy API Error: Unauthorized"):
                await client.fetch_workouts()

    @pytest.mark.asyncio
    async def test_rate_limited(self):
        transport = httpx.MockTransport(lambda request: httpx.Response(429))
        async with HevyClient("key", transport=transport) as client:
            with pytest.raises(RateLimitError):
                await client.fetch_workouts()

    @pytest.mark.asyncio
    async def test_empty_page(self):
        transport = httpx.MockTransport(lambda request: httpx.Response(200, json={"page": 9, "workouts": []}))
        async with HevyClient("key", transport=transport) as client:
            assert await client.fetch_workouts(page=9) == []

    @pytest.mark.asyncio
    async def test_unreadable_body(self):
        transport = httpx.MockTransport(lambda request: httpx.Response(200, text="<html>maintenance</html>"))
        async with HevyClient("key", transport=transport) as client:
            with pytest.raises(IntegrationError, match="unreadable response"):
                await client.fetch_workouts()

    @pytest.mark.asyncio
    async def test_skips_malformed_workouts(self):
        """Workouts that cannot be read are dropped, the rest are kept."""
        page = {"workouts": [
            {"id": "bad", "exercises": [{"sets": []}]},
            {"title": "No id"},
            WORKOUTS_PAGE["workouts"][0],
        ]}
        transport = httpx.MockTransport(lambda request: httpx.Response(200, json=page))
        async with HevyClient("key", transport=transport) as client:
            workouts = await client.fetch_workouts()

        assert [w.id for w in workouts] == ["w1"]
