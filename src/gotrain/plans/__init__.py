"""Plan parsing, revision protocol and the current-plan store."""

from .parser import ParsedPlan, ParseFailure, PlanParseResult, parse_plan
from .revision import CoachReply, RevisionState, handle_coach_reply, strip_code_fence
from .store import PlanStore
from .transcript import ChatTranscript

__all__ = [
    "ParsedPlan",
    "ParseFailure",
    "PlanParseResult",
    "parse_plan",
    "CoachReply",
    "RevisionState",
    "handle_coach_reply",
    "strip_code_fence",
    "PlanStore",
    "ChatTranscript",
]
