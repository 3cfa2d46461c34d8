"""Tests for integration base classes."""

import httpx

from gotrain.integrations.base import (
    AuthenticationError,
    IntegrationError,
    OAuthCredentials,
    RateLimitError,
    error_message,
)


class TestIntegrationErrors:
    """Tests for the integration error types."""

    def test_basic_error(self):
        """Test basic error creation."""
        error = IntegrationError("Something went wrong")

        assert str(error) == "Something went wrong"
        assert error.provider == ""
        assert error.code is None

    def test_rate_limit_error(self):
        """Test rate limit error."""
        error = RateLimitError("Rate limit exceeded", provider="strava", retry_after=900)

        assert error.provider == "strava"
        assert error.code == "rate_limit"
        assert error.retry_after == 900

    def test_auth_error_is_integration_error(self):
        error = AuthenticationError("Token expired", "strava")
        assert isinstance(error, IntegrationError)
        assert "Token expired" in str(error)


class TestOAuthCredentials:
    """Tests for OAuthCredentials."""

    def test_expires_within(self):
        """A token is due for refresh inside the margin."""
        creds = OAuthCredentials("a", "r", expires_at=1_000)

        assert creds.expires_within(60, now=900) is False
        assert creds.expires_within(60, now=940) is True
        assert creds.expires_within(60, now=2_000) is True

    def test_serialization_round_trip(self):
        creds = OAuthCredentials("a", "r", 1_700_000_000, athlete_id="42", athlete_name="Ana Ruiz")
        assert OAuthCredentials.from_dict(creds.to_dict()) == creds

    def test_from_token_response(self):
        """Athlete details are read from the token payload."""
        creds = OAuthCredentials.from_token_response({
            "access_token": "access",
            "refresh_token": "refresh",
            "expires_at": 1_700_000_000,
            "athlete": {"id": 42, "firstname": "Ana", "lastname": "Ruiz"},
        })

        assert creds.access_token == "access"
        assert creds.expires_at == 1_700_000_000
        assert creds.athlete_id == "42"
        assert creds.athlete_name == "Ana Ruiz"

    def test_from_token_response_without_athlete(self):
        creds = OAuthCredentials.from_token_response({
            "access_token": "access",
            "refresh_token": "refresh",
            "expires_at": "1700000000",
        })
        assert creds.athlete_id is None
        assert creds.athlete_name is None
        assert creds.expires_at == 1_700_000_000


class TestErrorMessage:
    """Tests for error_message."""

    def test_json_message(self):
        response = httpx.Response(400, json={"message": "Bad Request", "errors": []})
        assert error_message(response) == "Bad Request"

    def test_plain_text(self):
        response = httpx.Response(502, text="upstream down")
        assert error_message(response) == "upstream down"
