"""
Decode model output into a WeeklyPlan.

This is the only gate between untrusted model text and the plan store.
It checks structure and JSON types only: no value coercion, no repair,
and no semantic checks such as day count or date contiguity.
"""

from dataclasses import dataclass
from typing import Union

from pydantic import ValidationError

from ..models.plan import WeeklyPlan


@dataclass(frozen=True)
class ParsedPlan:
    """Successful decode."""
    plan: WeeklyPlan
    raw_text: str

    ok = True


@dataclass(frozen=True)
class ParseFailure:
    """Failed decode; the raw text is kept for literal display."""
    raw_text: str
    reason: str

    ok = False


PlanParseResult = Union[ParsedPlan, ParseFailure]


def _summarize(error: ValidationError) -> str:
    first = error.errors()[0]
    location = ".".join(str(p) for p in first.get("loc", ())) or "<root>"
    return f"{location}: {first.get('msg', 'invalid')} ({error.error_count()} error(s))"


def parse_plan(raw_text: str) -> PlanParseResult:
    """
    Parse raw model text as a WeeklyPlan.

    Never raises for bad input: malformed JSON and JSON of the wrong
    shape both come back as ParseFailure.

    Args:
        raw_text: Text returned by the model

    Returns:
        ParsedPlan on success, ParseFailure otherwise
    """
    try:
        # Strict: a value of the wrong JSON type fails instead of being converted
        plan = WeeklyPlan.model_validate_json(raw_text, strict=True)
    except ValidationError as e:
        return ParseFailure(raw_text=raw_text, reason=_summarize(e))
    return ParsedPlan(plan=plan, raw_text=raw_text)
