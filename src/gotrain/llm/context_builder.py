"""Build plan-generation and coach-chat prompts from goals and training data."""

from datetime import date
from typing import List, Optional, Sequence

from ..analysis.strength import ExerciseStat, format_exercise_stats
from ..integrations.strava import StravaActivity
from ..models.goals import UnitPreferences, UserGoals
from ..models.plan import WeeklyPlan
from .prompts import (
    COACH_CHAT_SYSTEM,
    NO_ACTIVITIES,
    NO_GOALS,
    NO_PLAN,
    PLAN_GENERATION_USER,
    REVISED_PLAN_END_TAG,
    REVISED_PLAN_START_TAG,
    STRENGTH_BLOCK,
    WEEKLY_PLAN_SCHEMA,
)


def format_goals_block(goals: UserGoals, units: UnitPreferences) -> str:
    """Format goals as the bullet list used in the generation prompt."""
    parts = [
        f"- Main Goal: {goals.main_goal}",
        f"- Availability: {goals.days_per_week} days/week",
        f"- Level: {goals.fitness_level.value}",
        f"- Preference: {', '.join(goals.preferred_activities)}",
    ]
    if goals.considerations:
        parts.append(f"- Special Considerations/Injuries: {goals.considerations}")
    parts.append(
        f"- Preferred Units: {units.distance.value} for distance, "
        f"{units.weight.value} for weights."
    )
    return "\n".join(parts)


def format_activity_line(activity: StravaActivity, units: UnitPreferences) -> str:
    """
    Format one activity for the generation prompt.

    Example: "- Morning Run: Run, 10.0 km, 52 mins"
    """
    distance = units.convert_distance(activity.distance_m)
    return (
        f"- {activity.name}: {activity.type}, "
        f"{distance:.1f} {units.distance_label}, "
        f"{activity.moving_time_min:.0f} mins"
    )


def format_activities_block(
    activities: Sequence[StravaActivity],
    units: UnitPreferences,
) -> str:
    """Activity lines, or an explicit statement that there are none."""
    if not activities:
        return NO_ACTIVITIES
    return "\n".join(format_activity_line(a, units) for a in activities)


def build_initial_prompt(
    goals: UserGoals,
    activities: Sequence[StravaActivity],
    stats: Sequence[ExerciseStat],
    units: UnitPreferences,
    current_date: date,
) -> str:
    """
    Build the user prompt for a full weekly plan.

    Deterministic: the same inputs always give the same text. The
    day-count, unit, date and exercise-field constraints are stated
    literally so the model receives them unchanged.

    Args:
        goals: Saved user goals
        activities: Endurance activities from the last week
        stats: Per-exercise strength stats (may be empty)
        units: Unit system for all distances and weights
        current_date: Date assigned to day 1

    Returns:
        Prompt text to submit alongside PLAN_GENERATION_SYSTEM
    """
    strength_block = ""
    if stats:
        strength_block = STRENGTH_BLOCK.format(
            stats=format_exercise_stats(list(stats), units),
        )

    schema = WEEKLY_PLAN_SCHEMA.format(
        distance_label=units.distance_label,
        weight_unit=units.weight.value,
    )

    return PLAN_GENERATION_USER.format(
        goals_block=format_goals_block(goals, units),
        activities_block=format_activities_block(activities, units),
        strength_block=strength_block,
        schema=schema,
        days_per_week=goals.days_per_week,
        distance_unit=units.distance.value,
        weight_unit=units.weight.value,
        current_date=current_date.isoformat(),
    )


def build_coach_system_prompt(
    goals: Optional[UserGoals],
    activities: Sequence[StravaActivity],
    current_plan: Optional[WeeklyPlan],
    units: UnitPreferences,
) -> str:
    """
    Build the system prompt for a coach chat turn.

    The current plan is embedded as JSON so the model can return a
    complete revision inside the revised-plan tags.
    """
    if goals is not None:
        goals_summary = (
            f"{goals.main_goal}, {goals.fitness_level.value}, "
            f"{goals.days_per_week} days/week, "
            f"focuses: {', '.join(goals.preferred_activities)}."
        )
        considerations_line = (
            f"Considerations: {goals.considerations}\n" if goals.considerations else ""
        )
    else:
        goals_summary = NO_GOALS
        considerations_line = ""

    recent: List[str] = [
        f"{a.name} ({units.convert_distance(a.distance_m):.1f}{units.distance_label})"
        for a in activities
    ]

    return COACH_CHAT_SYSTEM.format(
        goals_summary=goals_summary,
        considerations_line=considerations_line,
        distance_unit=units.distance.value,
        weight_unit=units.weight.value,
        current_plan=current_plan.to_json() if current_plan is not None else NO_PLAN,
        recent_activities=", ".join(recent) if recent else NO_ACTIVITIES,
        start_tag=REVISED_PLAN_START_TAG,
        end_tag=REVISED_PLAN_END_TAG,
    )
