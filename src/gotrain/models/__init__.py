"""Data models for GoTrain."""

from .base import CamelModel, to_camel

from .goals import (
    # Enums
    DistanceUnit,
    FitnessLevel,
    WeightUnit,
    # Models
    UnitPreferences,
    UserGoals,
    # Constants
    ACTIVITY_OPTIONS,
    # Normalization
    normalize_goals,
    toggle_activity,
)

from .plan import (
    DayType,
    Intensity,
    PlanExercise,
    WeeklyPlan,
    WorkoutActivity,
    WorkoutDay,
)

from .chat import ChatMessage, ChatRole

__all__ = [
    "CamelModel",
    "to_camel",
    "DistanceUnit",
    "FitnessLevel",
    "WeightUnit",
    "UnitPreferences",
    "UserGoals",
    "ACTIVITY_OPTIONS",
    "normalize_goals",
    "toggle_activity",
    "DayType",
    "Intensity",
    "PlanExercise",
    "WeeklyPlan",
    "WorkoutActivity",
    "WorkoutDay",
    "ChatMessage",
    "ChatRole",
]
