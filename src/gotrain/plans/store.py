"""The single authoritative record of the current weekly plan."""

import logging
from typing import Optional

from ..db.storage import SessionStorage, StorageKey
from ..models.plan import WeeklyPlan
from .parser import PlanParseResult, parse_plan


logger = logging.getLogger(__name__)


class PlanStore:
    """
    Holds the current plan and persists it as raw text.

    The parsed plan is always re-derived from the stored text on load.
    Every write replaces the whole plan; last writer wins.
    """

    def __init__(self, storage: SessionStorage):
        self._storage = storage
        self._plan: Optional[WeeklyPlan] = None
        self._raw_text: Optional[str] = None
        self.load()

    def load(self) -> None:
        """Re-derive the current plan from persisted text."""
        raw = self._storage.get_text(StorageKey.PLAN_TEXT)
        self._raw_text = raw
        self._plan = None
        if raw is not None:
            result = parse_plan(raw)
            if result.ok:
                self._plan = result.plan

    def get(self) -> Optional[WeeklyPlan]:
        return self._plan

    @property
    def raw_text(self) -> Optional[str]:
        """Last stored plan text, shown literally when it did not parse."""
        return self._raw_text

    def set(self, plan: WeeklyPlan, raw_text: Optional[str] = None) -> None:
        """Replace the current plan."""
        text = raw_text if raw_text is not None else plan.to_json()
        self._storage.set_text(StorageKey.PLAN_TEXT, text)
        self._plan = plan
        self._raw_text = text
        logger.info(f"Current plan replaced ({len(plan.days)} days)")

    def set_raw(self, raw_text: str) -> PlanParseResult:
        """
        Replace the current plan with freshly generated model text.

        When the text does not parse there is no structured plan; the
        raw text is kept for display.
        """
        result = parse_plan(raw_text)
        self._storage.set_text(StorageKey.PLAN_TEXT, raw_text)
        self._raw_text = raw_text
        self._plan = result.plan if result.ok else None
        if result.ok:
            logger.info(f"Current plan replaced ({len(result.plan.days)} days)")
        else:
            logger.warning(f"Generated plan did not parse, keeping raw text: {result.reason}")
        return result
