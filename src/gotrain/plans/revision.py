"""
Chat-driven plan revision.

A coach reply may carry a complete replacement plan between
``<REVISED_PLAN>`` and ``</REVISED_PLAN>``. The handler here extracts and
decodes it and builds the message shown in the transcript. It never
touches the plan store: the caller commits ``replacement_plan`` after the
handler returns.

States of one chat turn:

    idle -> awaiting_response -> plan_replaced | message_only | parse_failed
"""

import logging
import re
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from ..llm.prompts import PLAN_UPDATED_MESSAGE, REVISED_PLAN_END_TAG, REVISED_PLAN_START_TAG
from ..models.plan import WeeklyPlan
from .parser import parse_plan


logger = logging.getLogger(__name__)

REVISED_PLAN_PATTERN = re.compile(
    re.escape(REVISED_PLAN_START_TAG) + r"([\s\S]*?)" + re.escape(REVISED_PLAN_END_TAG)
)
_LEADING_FENCE = re.compile(r"^```[\w-]*[ \t]*\r?\n?")
_TRAILING_FENCE = re.compile(r"\r?\n?```\s*$")


class RevisionState(str, Enum):
    """Lifecycle of a chat turn with respect to the current plan."""
    IDLE = "idle"
    AWAITING_RESPONSE = "awaiting_response"
    PLAN_REPLACED = "plan_replaced"
    MESSAGE_ONLY = "message_only"
    PARSE_FAILED = "parse_failed"


@dataclass(frozen=True)
class CoachReply:
    """Outcome of handling one coach reply."""
    display_message: str
    outcome: RevisionState
    replacement_plan: Optional[WeeklyPlan] = None
    replacement_text: Optional[str] = None

    @property
    def plan_replaced(self) -> bool:
        return self.replacement_plan is not None


def strip_code_fence(text: str) -> str:
    """Remove a wrapping ```lang ... ``` fence, if present."""
    stripped = text.strip()
    if not stripped.startswith("```"):
        return stripped
    stripped = _LEADING_FENCE.sub("", stripped, count=1)
    stripped = _TRAILING_FENCE.sub("", stripped, count=1)
    return stripped.strip()


def handle_coach_reply(raw_reply: str) -> CoachReply:
    """
    Interpret a coach reply that may contain a revised plan.

    - No tag: the reply is shown unchanged.
    - Tag with a valid plan: the tagged region is replaced by a short
      confirmation and the decoded plan is returned for the caller to commit.
    - Tag with an invalid plan: the original reply (tag included) is shown
      and no replacement is returned, so the current plan stays as it was.

    Args:
        raw_reply: Full text returned by the model

    Returns:
        CoachReply with the display message and optional replacement
    """
    match = REVISED_PLAN_PATTERN.search(raw_reply)
    if match is None:
        return CoachReply(display_message=raw_reply, outcome=RevisionState.MESSAGE_ONLY)

    plan_text = strip_code_fence(match.group(1))
    result = parse_plan(plan_text)

    if not result.ok:
        logger.warning(f"Discarding malformed revised plan: {result.reason}")
        return CoachReply(display_message=raw_reply, outcome=RevisionState.PARSE_FAILED)

    display = raw_reply[:match.start()] + PLAN_UPDATED_MESSAGE + raw_reply[match.end():]
    logger.info(f"Coach reply carries a revised plan with {len(result.plan.days)} days")
    return CoachReply(
        display_message=display,
        outcome=RevisionState.PLAN_REPLACED,
        replacement_plan=result.plan,
        replacement_text=plan_text,
    )
