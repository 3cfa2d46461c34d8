"""Tests for weekly plan models."""

import json

from gotrain.models.plan import WeeklyPlan


class TestWeeklyPlan:
    """Tests for WeeklyPlan."""

    def test_validates_wire_form(self, plan_data):
        """Plan JSON with camelCase keys validates."""
        plan = WeeklyPlan.model_validate(plan_data)

        assert plan.weekly_summary.startswith("Base week")
        assert len(plan.days) == 3
        assert plan.days[0].coach_tips == ["Keep it relaxed"]
        assert plan.days[1].activities[0].exercises[0].name == "Back Squat"

    def test_values_kept_as_sent(self, plan_data):
        """Numbers and strings are not coerced."""
        plan = WeeklyPlan.model_validate(plan_data)
        activity = plan.days[1].activities[0]

        assert activity.duration == 45
        assert activity.exercises[0].sets == 3
        assert activity.exercises[0].reps == "5"

    def test_rest_day_flag(self, plan_data):
        plan = WeeklyPlan.model_validate(plan_data)
        assert [d.is_rest for d in plan.days] == [False, False, True]

    def test_unknown_intensity_and_type_accepted(self, plan_data):
        """Unexpected enum-like values are still a valid plan."""
        plan_data["days"][0]["type"] = "hike"
        plan_data["days"][0]["activities"][0]["intensity"] = "Recovery"

        plan = WeeklyPlan.model_validate(plan_data)
        assert plan.days[0].type == "hike"
        assert not plan.days[0].is_rest

    def test_extra_fields_preserved(self, plan_data):
        """Fields the model added are carried through serialization."""
        plan_data["days"][0]["location"] = "Track"
        plan = WeeklyPlan.model_validate(plan_data)
        assert plan.to_dict()["days"][0]["location"] == "Track"

    def test_to_json_round_trip(self, plan_data):
        plan = WeeklyPlan.model_validate(plan_data)
        restored = WeeklyPlan.model_validate_json(plan.to_json())
        assert restored == plan
        assert json.loads(plan.to_json())["days"][0]["dayNumber"] == 1
