"""Tests for the command-line interface."""

import httpx
import pytest

from gotrain.cli import build_parser, get_intensity_color, main
from gotrain.config import get_settings
from gotrain.db.storage import SessionStorage, StorageKey
from gotrain.integrations.strava import StravaOAuthFlow
from gotrain.services.coach import CoachService
from gotrain.services.token_provider import TokenProvider


@pytest.fixture
def db_path(tmp_path, monkeypatch):
    """Point the CLI at a temporary database with no API keys."""
    path = tmp_path / "cli.db"
    monkeypatch.setenv("GOTRAIN_DB_PATH", str(path))
    monkeypatch.setenv("GOTRAIN_OPENAI_API_KEY", "")
    monkeypatch.setenv("GOTRAIN_HEVY_API_KEY", "")
    get_settings.cache_clear()
    yield path
    get_settings.cache_clear()


class TestIntensityColor:
    """Tests for get_intensity_color."""

    def test_known_values(self):
        assert get_intensity_color("Easy") == "green"
        assert get_intensity_color("Moderate") == "blue"
        assert get_intensity_color("Hard") == "dark_orange"
        assert get_intensity_color("Max") == "red"

    def test_unknown_value_is_neutral(self):
        assert get_intensity_color("Recovery") == "white"


class TestParser:
    """Tests for argument parsing."""

    def test_plan_defaults_to_show(self):
        args = build_parser().parse_args(["plan"])
        assert args.action == "show"

    def test_days_range(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["goals", "--days", "8"])


class TestGoalsCommand:
    """Tests for the goals command."""

    def test_set_and_toggle(self, db_path):
        main(["goals", "--goal", "Sub-50 10K", "--days", "4", "--activities", "running,yoga"])
        main(["goals", "--toggle", "yoga"])

        stored = SessionStorage(db_path).get_json(StorageKey.USER_GOALS)
        assert stored["mainGoal"] == "Sub-50 10K"
        assert stored["daysPerWeek"] == 4
        assert stored["preferredActivities"] == ["running"]

    def test_reset(self, db_path):
        main(["goals", "--goal", "Marathon"])
        main(["goals", "--reset"])

        assert SessionStorage(db_path).get_json(StorageKey.USER_GOALS) is None


class TestErrors:
    """Tests for error reporting."""

    def test_generate_without_goals_exits_1(self, db_path, capsys):
        with pytest.raises(SystemExit) as exc_info:
            main(["plan", "generate"])

        assert exc_info.value.code == 1
        assert "Please save your training goals first." in capsys.readouterr().out

    def test_authorize_offline_exits_1(self, db_path, monkeypatch, capsys):
        """A network failure while exchanging the code is a clean error, not a traceback."""
        def offline(request):
            raise httpx.ConnectError("offline", request=request)

        storage = SessionStorage(db_path)
        flow = StravaOAuthFlow("id", "secret", "http://localhost", transport=httpx.MockTransport(offline))
        service = CoachService(storage, TokenProvider(storage, flow))
        monkeypatch.setattr(CoachService, "from_settings", classmethod(lambda cls, settings: service))

        with pytest.raises(SystemExit) as exc_info:
            main(["authorize", "abc"])

        assert exc_info.value.code == 1
        assert "Failed to exchange token: offline" in capsys.readouterr().out
        assert SessionStorage(db_path).get_json(StorageKey.STRAVA_CREDENTIALS) is None
