"""LLM client and prompt construction."""

from .context_builder import build_coach_system_prompt, build_initial_prompt
from .prompts import (
    PLAN_GENERATION_SYSTEM,
    PLAN_UPDATED_MESSAGE,
    REVISED_PLAN_END_TAG,
    REVISED_PLAN_START_TAG,
)
from .providers import LLMClient, RetryConfig

__all__ = [
    "build_coach_system_prompt",
    "build_initial_prompt",
    "PLAN_GENERATION_SYSTEM",
    "PLAN_UPDATED_MESSAGE",
    "REVISED_PLAN_END_TAG",
    "REVISED_PLAN_START_TAG",
    "LLMClient",
    "RetryConfig",
]
