"""Weekly plan models matching the JSON contract given to the model.

Values are kept exactly as the model produced them. ``type`` and
``intensity`` are plain strings: the enums below name the expected values
for rendering, but an unknown value is still a valid plan.
"""

import json
from enum import Enum
from typing import List, Optional, Union

from pydantic import ConfigDict, Field

from .base import CamelModel


# Models sometimes emit numbers for sets/reps/duration; keep them as sent.
FreeText = Union[str, int, float]


class DayType(str, Enum):
    """Expected values of WorkoutDay.type."""
    REST = "rest"
    RUN = "run"
    STRENGTH = "strength"
    CROSS_TRAIN = "cross-train"


class Intensity(str, Enum):
    """Expected values of WorkoutActivity.intensity."""
    EASY = "Easy"
    MODERATE = "Moderate"
    HARD = "Hard"
    MAX = "Max"


class PlanExercise(CamelModel):
    """A structured strength exercise prescription."""

    model_config = ConfigDict(extra="allow")

    name: str
    sets: Optional[FreeText] = None
    reps: Optional[FreeText] = None
    weight: Optional[FreeText] = None
    notes: Optional[str] = None


class WorkoutActivity(CamelModel):
    """One activity within a training day."""

    model_config = ConfigDict(extra="allow")

    name: str
    duration: FreeText = ""
    intensity: str = ""
    details: str = ""
    exercises: Optional[List[PlanExercise]] = None


class WorkoutDay(CamelModel):
    """A single day of the weekly plan."""

    model_config = ConfigDict(extra="allow")

    day_number: int
    date: Optional[str] = None
    title: str
    type: str
    activities: List[WorkoutActivity] = Field(default_factory=list)
    coach_tips: List[str] = Field(default_factory=list)

    @property
    def is_rest(self) -> bool:
        return self.type == DayType.REST.value


class WeeklyPlan(CamelModel):
    """The current training plan: a summary plus (normally) seven days."""

    model_config = ConfigDict(extra="allow")

    weekly_summary: str
    days: List[WorkoutDay]

    def to_json(self, indent: Optional[int] = None) -> str:
        return json.dumps(self.to_dict(), indent=indent, ensure_ascii=False)
