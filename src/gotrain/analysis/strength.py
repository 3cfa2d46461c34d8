"""
Strength Statistics

Per-exercise one-rep-max and volume estimates derived from logged
strength sessions, used as context for strength-day prescriptions.
"""

from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional

from ..integrations.hevy import HevyWorkout
from ..models.goals import UnitPreferences


@dataclass
class ExerciseStat:
    """Best observed performance for one exercise."""

    exercise_name: str
    one_rep_max: float = 0.0
    max_volume: float = 0.0
    last_weight: float = 0.0
    last_reps: int = 0

    def to_dict(self) -> dict:
        return {
            "exerciseName": self.exercise_name,
            "oneRepMax": self.one_rep_max,
            "maxVolume": self.max_volume,
            "lastWeight": self.last_weight,
            "lastReps": self.last_reps,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "ExerciseStat":
        return cls(
            exercise_name=data["exerciseName"],
            one_rep_max=data.get("oneRepMax", 0.0),
            max_volume=data.get("maxVolume", 0.0),
            last_weight=data.get("lastWeight", 0.0),
            last_reps=data.get("lastReps", 0),
        )


def estimate_one_rep_max(weight: float, reps: int) -> float:
    """
    Estimate a one-rep max with the Epley formula.

    1RM = weight * (1 + reps / 30)
    """
    return weight * (1 + reps / 30)


def aggregate_exercise_stats(sessions: Iterable[HevyWorkout]) -> List[ExerciseStat]:
    """
    Merge strength sessions into one ExerciseStat per exercise name.

    The maximum 1RM and volume are taken across every set supplied; the
    caller decides the time window by what it fetched.

    ``last_weight``/``last_reps`` come from the set with index 0, and the
    last such set seen wins. This is not a chronological "most recent set".

    Args:
        sessions: Strength sessions in any order

    Returns:
        Stats in first-encounter order of exercise name
    """
    stats: Dict[str, ExerciseStat] = {}

    for session in sessions:
        for exercise in session.exercises:
            name = exercise.exercise_title
            stat = stats.get(name)
            if stat is None:
                stat = stats[name] = ExerciseStat(exercise_name=name)

            for s in exercise.sets:
                one_rep_max = estimate_one_rep_max(s.weight_kg, s.reps)
                if one_rep_max > stat.one_rep_max:
                    stat.one_rep_max = one_rep_max

                volume = s.weight_kg * s.reps
                if volume > stat.max_volume:
                    stat.max_volume = volume

                if s.index == 0:
                    stat.last_weight = s.weight_kg
                    stat.last_reps = s.reps

    return list(stats.values())


def format_exercise_stats(
    stats: List[ExerciseStat],
    units: Optional[UnitPreferences] = None,
) -> str:
    """Format stats as prompt lines in the preferred weight unit."""
    units = units or UnitPreferences()
    unit = units.weight.value
    lines = []
    for stat in stats:
        one_rep_max = units.convert_weight(stat.one_rep_max)
        last_weight = units.convert_weight(stat.last_weight)
        lines.append(
            f"- {stat.exercise_name}: estimated 1RM {one_rep_max:.1f} {unit}, "
            f"last {last_weight:.1f} {unit} x {stat.last_reps}"
        )
    return "\n".join(lines)
