"""Tests for custom exceptions."""

from gotrain.exceptions import (
    ConfigurationError,
    DataFetchError,
    ErrorCode,
    GoTrainError,
    LLMRateLimitError,
    NotConnectedError,
    OperationInProgressError,
)


class TestGoTrainError:
    """Tests for the base error."""

    def test_to_dict(self):
        error = GoTrainError("boom", details={"x": 1})
        assert error.to_dict() == {
            "error": {"code": "INTERNAL_ERROR", "message": "boom", "details": {"x": 1}},
        }

    def test_to_dict_without_details(self):
        assert "details" not in GoTrainError("boom").to_dict()["error"]


class TestSpecificErrors:
    """Tests for subclasses."""

    def test_not_connected_message(self):
        error = NotConnectedError()
        assert str(error) == "Please connect to Strava first."
        assert error.code == ErrorCode.NOT_CONNECTED

    def test_configuration_error(self):
        error = ConfigurationError("openai_api_key")
        assert error.message == "Missing configuration: openai_api_key"
        assert error.details == {"setting": "openai_api_key"}

    def test_operation_in_progress(self):
        error = OperationInProgressError("generate_plan")
        assert error.operation == "generate_plan"
        assert error.code == ErrorCode.OPERATION_IN_PROGRESS

    def test_data_fetch_error(self):
        error = DataFetchError("Failed to refresh activities: boom", source="strava")
        assert error.details["source"] == "strava"
        assert isinstance(error, GoTrainError)

    def test_rate_limit_retry_after(self):
        error = LLMRateLimitError(retry_after=30)
        assert error.details["retry_after_seconds"] == 30
        assert error.code == ErrorCode.LLM_RATE_LIMITED
