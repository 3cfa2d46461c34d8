"""Hevy integration for strength-training history."""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional

import httpx

from .base import IntegrationClient, IntegrationError, RateLimitError


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class HevySet:
    """A single logged set."""
    index: int
    weight_kg: float
    reps: int
    id: Optional[str] = None
    distance_meters: Optional[float] = None
    duration_seconds: Optional[int] = None
    rpe: Optional[float] = None

    @classmethod
    def from_api_response(cls, data: dict) -> "HevySet":
        # Bodyweight and timed sets come back with null weight/reps
        return cls(
            id=data.get("id"),
            index=data.get("index", 0),
            weight_kg=data.get("weight_kg") or 0,
            reps=data.get("reps") or 0,
            distance_meters=data.get("distance_meters"),
            duration_seconds=data.get("duration_seconds"),
            rpe=data.get("rpe"),
        )


@dataclass(frozen=True)
class HevyExerciseSet:
    """An exercise within a workout and its sets."""
    exercise_title: str
    sets: List[HevySet] = field(default_factory=list)
    id: Optional[str] = None
    notes: str = ""

    @classmethod
    def from_api_response(cls, data: dict) -> "HevyExerciseSet":
        return cls(
            id=data.get("id"),
            exercise_title=data["title"] if "title" in data else data["exercise_title"],
            notes=data.get("notes") or "",
            sets=[HevySet.from_api_response(s) for s in data.get("sets", [])],
        )


@dataclass(frozen=True)
class HevyWorkout:
    """One recorded strength session."""
    id: str
    title: str
    start_time: str
    end_time: str
    exercises: List[HevyExerciseSet] = field(default_factory=list)
    description: str = ""

    @classmethod
    def from_api_response(cls, data: dict) -> "HevyWorkout":
        return cls(
            id=data["id"],
            title=data.get("title", ""),
            description=data.get("description") or "",
            start_time=data.get("start_time", ""),
            end_time=data.get("end_time", ""),
            exercises=[HevyExerciseSet.from_api_response(e) for e in data.get("exercises", [])],
        )


class HevyClient(IntegrationClient):
    """
    Client for the Hevy public API.

    Usage:
        async with HevyClient(api_key) as client:
            workouts = await client.fetch_workouts(page=1, page_size=5)
    """

    provider = "hevy"
    base_url = "https://api.hevyapp.com/v1"

    def __init__(
        self,
        api_key: str,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        super().__init__(transport=transport)
        self.api_key = api_key

    def get_auth_headers(self) -> Dict[str, str]:
        return {
            "api-key": self.api_key,
            "Content-Type": "application/json",
        }

    async def fetch_workouts(self, page: int = 1, page_size: int = 5) -> List[HevyWorkout]:
        """
        Fetch a page of workouts, most recent first.

        Workouts that cannot be read are skipped.

        Raises:
            RateLimitError: If the rate limit is exceeded
            IntegrationError: For any other non-success or undecodable response
        """
        client = await self._get_client()
        response = await client.get(
            f"{self.base_url}/workouts",
            headers=self.get_auth_headers(),
            params={"page": page, "pageSize": page_size},
        )

        if response.status_code == 429:
            raise RateLimitError("Hevy rate limit exceeded.", self.provider)

        if not response.is_success:
            raise IntegrationError(
                f"Hevy API Error: {response.reason_phrase or response.status_code}",
                self.provider,
                str(response.status_code),
            )

        try:
            data = response.json()
        except ValueError:
            raise IntegrationError(
                "Hevy API Error: unreadable response",
                self.provider,
                "invalid_body",
            )
        if not isinstance(data, dict):
            raise IntegrationError("Hevy API Error: unexpected response", self.provider, "invalid_body")

        workouts = []
        for item in data.get("workouts") or []:
            try:
                workouts.append(HevyWorkout.from_api_response(item))
            except (KeyError, TypeError, ValueError, AttributeError) as e:
                logger.warning(f"Skipping malformed Hevy workout: {e!r}")
                continue

        logger.info(f"Fetched {len(workouts)} Hevy workouts (page {page})")
        return workouts
