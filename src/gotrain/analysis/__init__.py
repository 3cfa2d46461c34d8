"""Training data analysis."""

from .strength import (
    ExerciseStat,
    aggregate_exercise_stats,
    estimate_one_rep_max,
    format_exercise_stats,
)

__all__ = [
    "ExerciseStat",
    "aggregate_exercise_stats",
    "estimate_one_rep_max",
    "format_exercise_stats",
]
