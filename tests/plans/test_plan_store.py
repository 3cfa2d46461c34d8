"""Tests for the plan store and chat transcript."""

from gotrain.db.storage import StorageKey
from gotrain.models.chat import ChatRole
from gotrain.models.plan import WeeklyPlan
from gotrain.plans.store import PlanStore
from gotrain.plans.transcript import ChatTranscript


class TestPlanStore:
    """Tests for PlanStore."""

    def test_empty_store(self, storage):
        store = PlanStore(storage)
        assert store.get() is None
        assert store.raw_text is None

    def test_set_persists_raw_text(self, storage, plan_data, plan_json):
        plan = WeeklyPlan.model_validate(plan_data)
        store = PlanStore(storage)

        store.set(plan, plan_json)

        assert store.get() == plan
        assert storage.get_text(StorageKey.PLAN_TEXT) == plan_json

    def test_set_without_text_serializes_plan(self, storage, plan_data):
        plan = WeeklyPlan.model_validate(plan_data)
        PlanStore(storage).set(plan)

        assert PlanStore(storage).get() == plan

    def test_load_rederives_plan(self, storage, plan_json):
        """A new store re-parses whatever text was persisted."""
        PlanStore(storage).set_raw(plan_json)

        reloaded = PlanStore(storage)

        assert reloaded.get() is not None
        assert reloaded.get().weekly_summary.startswith("Base week")

    def test_set_raw_failure_keeps_text_only(self, storage, plan_data):
        store = PlanStore(storage)
        store.set(WeeklyPlan.model_validate(plan_data))

        result = store.set_raw("Sorry, I cannot do that.")

        assert not result.ok
        assert store.get() is None
        assert store.raw_text == "Sorry, I cannot do that."
        assert PlanStore(storage).get() is None

    def test_last_writer_wins(self, storage, plan_data):
        store = PlanStore(storage)
        first = WeeklyPlan.model_validate(plan_data)
        second = first.model_copy(update={"weekly_summary": "Deload week"})

        store.set(first)
        store.set(second)

        assert store.get().weekly_summary == "Deload week"

    def test_reload_after_account_cleared(self, storage, plan_json):
        """Reloading after the session is wiped leaves no plan."""
        store = PlanStore(storage)
        store.set_raw(plan_json)
        ChatTranscript(storage).append(ChatRole.USER, "hello")

        storage.clear_account()
        store.load()

        assert store.get() is None
        assert store.raw_text is None
        assert len(ChatTranscript(storage)) == 0


class TestChatTranscript:
    """Tests for ChatTranscript."""

    def test_append_in_order(self, storage):
        transcript = ChatTranscript(storage)
        transcript.append(ChatRole.USER, "Can I swap days?")
        transcript.append(ChatRole.ASSISTANT, "Sure.")

        messages = ChatTranscript(storage).messages()

        assert [(m.role, m.content) for m in messages] == [
            (ChatRole.USER, "Can I swap days?"),
            (ChatRole.ASSISTANT, "Sure."),
        ]
