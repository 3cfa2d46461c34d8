"""Tests for the revised-plan protocol handler."""

import json

import pytest

from gotrain.llm.prompts import PLAN_UPDATED_MESSAGE
from gotrain.plans.revision import (
    RevisionState,
    handle_coach_reply,
    strip_code_fence,
)


class TestStripCodeFence:
    """Tests for strip_code_fence."""

    @pytest.mark.parametrize("wrapped", [
        '```json\n{"a": 1}\n```',
        '```\n{"a": 1}\n```',
        '  ```json   \n{"a": 1}```  ',
        '{"a": 1}',
    ])
    def test_unwraps(self, wrapped):
        assert strip_code_fence(wrapped) == '{"a": 1}'

    def test_keeps_inner_backticks(self):
        text = '{"notes": "use `tempo`"}'
        assert strip_code_fence(text) == text


class TestHandleCoachReply:
    """Tests for handle_coach_reply."""

    def test_no_tag_passes_through(self):
        reply = handle_coach_reply("Great question! Hydrate well.")

        assert reply.outcome == RevisionState.MESSAGE_ONLY
        assert reply.display_message == "Great question! Hydrate well."
        assert reply.replacement_plan is None
        assert not reply.plan_replaced

    def test_valid_revision(self, plan_json):
        raw = f"Sure, moved it.\n<REVISED_PLAN>{plan_json}</REVISED_PLAN>\nEnjoy!"

        reply = handle_coach_reply(raw)

        assert reply.outcome == RevisionState.PLAN_REPLACED
        assert reply.plan_replaced
        assert reply.display_message == f"Sure, moved it.\n{PLAN_UPDATED_MESSAGE}\nEnjoy!"
        assert reply.replacement_text == plan_json
        assert len(reply.replacement_plan.days) == 3

    def test_fenced_revision(self, plan_data):
        """A fenced plan decodes the same as a bare one."""
        bare = handle_coach_reply(f"<REVISED_PLAN>{json.dumps(plan_data)}</REVISED_PLAN>")
        fenced = handle_coach_reply(
            f"<REVISED_PLAN>\n```json\n{json.dumps(plan_data, indent=2)}\n```\n</REVISED_PLAN>"
        )

        assert fenced.outcome == RevisionState.PLAN_REPLACED
        assert fenced.replacement_plan == bare.replacement_plan

    def test_malformed_revision_shows_original(self):
        """A bad plan keeps the reply verbatim and offers no replacement."""
        raw = 'Updated!\n<REVISED_PLAN>{"weeklySummary": "x", "days": [</REVISED_PLAN>'

        reply = handle_coach_reply(raw)

        assert reply.outcome == RevisionState.PARSE_FAILED
        assert reply.display_message == raw
        assert reply.replacement_plan is None

    def test_unterminated_tag_is_plain_message(self, plan_json):
        raw = f"<REVISED_PLAN>{plan_json}"
        reply = handle_coach_reply(raw)

        assert reply.outcome == RevisionState.MESSAGE_ONLY
        assert reply.display_message == raw

    def test_first_region_only(self, plan_json):
        """Only the first tagged region is used."""
        raw = (
            f"<REVISED_PLAN>{plan_json}</REVISED_PLAN> and "
            f"<REVISED_PLAN>ignored</REVISED_PLAN>"
        )
        reply = handle_coach_reply(raw)

        assert reply.outcome == RevisionState.PLAN_REPLACED
        assert reply.display_message == (
            f"{PLAN_UPDATED_MESSAGE} and <REVISED_PLAN>ignored</REVISED_PLAN>"
        )

    def test_minimal_fenced_plan(self):
        """Fence stripped, JSON decoded, tag and JSON removed from the display."""
        raw = 'Sure! <REVISED_PLAN>```json\n{"weeklySummary":"x","days":[]}\n```</REVISED_PLAN>'

        reply = handle_coach_reply(raw)

        assert reply.replacement_plan.weekly_summary == "x"
        assert reply.replacement_plan.days == []
        assert "<REVISED_PLAN>" not in reply.display_message
        assert "weeklySummary" not in reply.display_message
