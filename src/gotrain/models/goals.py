"""User goals and unit preferences consumed by every prompt builder."""

import logging
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, ValidationError, field_validator

from .base import CamelModel


logger = logging.getLogger(__name__)


class FitnessLevel(str, Enum):
    """Self-reported training experience."""
    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"


class DistanceUnit(str, Enum):
    KILOMETERS = "kilometers"
    MILES = "miles"


class WeightUnit(str, Enum):
    KG = "kg"
    LBS = "lbs"


# (tag, label) pairs offered by the goal form
ACTIVITY_OPTIONS = [
    ("running", "Running"),
    ("cycling", "Cycling"),
    ("weightlifting", "Strength"),
    ("yoga", "Yoga"),
    ("swimming", "Swimming"),
    ("mixed", "Mixed"),
]

DEFAULT_ACTIVITY = "running"

LEGACY_ACTIVITY_KEY = "preferredActivity"
ACTIVITIES_KEY = "preferredActivities"
DAYS_KEY = "daysPerWeek"

MIN_DAYS_PER_WEEK = 1
MAX_DAYS_PER_WEEK = 7

METERS_PER_MILE = 1609.344
LBS_PER_KG = 2.20462


class UnitPreferences(BaseModel):
    """Unit system every distance and weight in a plan must use."""

    distance: DistanceUnit = DistanceUnit.KILOMETERS
    weight: WeightUnit = WeightUnit.KG

    @property
    def distance_label(self) -> str:
        return "km" if self.distance == DistanceUnit.KILOMETERS else "mi"

    def convert_distance(self, meters: float) -> float:
        """Convert meters into the preferred distance unit."""
        if self.distance == DistanceUnit.MILES:
            return meters / METERS_PER_MILE
        return meters / 1000

    def convert_weight(self, kg: float) -> float:
        """Convert kilograms into the preferred weight unit."""
        if self.weight == WeightUnit.LBS:
            return kg * LBS_PER_KG
        return kg


class UserGoals(CamelModel):
    """
    Training goals captured by the goal form.

    Invariant: preferred_activities is never empty.
    """

    main_goal: str = ""
    days_per_week: int = Field(default=3, ge=MIN_DAYS_PER_WEEK, le=MAX_DAYS_PER_WEEK)
    fitness_level: FitnessLevel = FitnessLevel.INTERMEDIATE
    preferred_activities: List[str] = Field(default_factory=lambda: [DEFAULT_ACTIVITY])
    considerations: Optional[str] = None

    @field_validator("preferred_activities")
    @classmethod
    def _non_empty_unique(cls, value: List[str]) -> List[str]:
        seen: List[str] = []
        for tag in value:
            if tag not in seen:
                seen.append(tag)
        if not seen:
            raise ValueError("preferred_activities must contain at least one activity")
        return seen

    def to_dict(self) -> dict:
        return self.model_dump(by_alias=True, mode="json")


def normalize_goals(raw: Optional[Dict[str, Any]]) -> Optional[UserGoals]:
    """
    Build canonical goals from stored data.

    Stored goals written before multi-select existed carry a single
    ``preferredActivity`` string. It becomes the sole element of
    ``preferredActivities`` and the legacy key is dropped.

    Never raises for bad stored values. An empty activity list falls back
    to the default activity and days per week is clamped to 1..7; other
    unreadable fields take their defaults.

    Args:
        raw: Stored goals dictionary (camelCase or snake_case keys)

    Returns:
        UserGoals, or None when nothing has been saved
    """
    if not raw:
        return None

    data = dict(raw)
    legacy = data.pop(LEGACY_ACTIVITY_KEY, None)
    legacy = data.pop("preferred_activity", legacy)

    activities = data.pop("preferred_activities", None)
    activities = data.pop(ACTIVITIES_KEY, activities)
    if not isinstance(activities, list):
        activities = []
    activities = [a for a in activities if isinstance(a, str) and a]
    if not activities:
        activities = [legacy] if isinstance(legacy, str) and legacy else [DEFAULT_ACTIVITY]
    data[ACTIVITIES_KEY] = activities

    days = data.pop("days_per_week", None)
    days = data.pop(DAYS_KEY, days)
    if isinstance(days, (int, float)) and not isinstance(days, bool):
        data[DAYS_KEY] = min(max(int(days), MIN_DAYS_PER_WEEK), MAX_DAYS_PER_WEEK)
    elif days is not None:
        data[DAYS_KEY] = days

    try:
        return UserGoals.model_validate(data)
    except ValidationError as e:
        invalid = {err["loc"][0] for err in e.errors() if err["loc"]}
        logger.warning(f"Resetting unreadable stored goal fields to defaults: {sorted(invalid)}")
        for name, info in UserGoals.model_fields.items():
            if name in invalid or info.alias in invalid:
                data.pop(name, None)
                data.pop(info.alias, None)
        return UserGoals.model_validate(data)


def toggle_activity(goals: UserGoals, tag: str) -> UserGoals:
    """
    Add ``tag`` if absent, remove it if present.

    Removing the last remaining activity is refused: the result keeps
    ``tag`` as the only preference.
    """
    current = list(goals.preferred_activities)
    if tag in current:
        updated = [a for a in current if a != tag]
    else:
        updated = current + [tag]

    if not updated:
        updated = [tag]

    return goals.model_copy(update={"preferred_activities": updated})
