"""
Base classes for external integrations.

Provides the shared error types, OAuth credential record and the
httpx client lifecycle used by the Strava and Hevy clients.
"""

import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Dict, Optional

import httpx


DEFAULT_TIMEOUT = 30.0


class IntegrationError(Exception):
    """Base exception for integration errors."""

    def __init__(self, message: str, provider: str = "", code: Optional[str] = None):
        self.provider = provider
        self.code = code
        super().__init__(message)


class RateLimitError(IntegrationError):
    """Rate limit exceeded."""

    def __init__(
        self,
        message: str,
        provider: str,
        retry_after: Optional[int] = None,
    ):
        self.retry_after = retry_after
        super().__init__(message, provider, "rate_limit")


class AuthenticationError(IntegrationError):
    """Authentication failed or expired."""
    pass


@dataclass
class OAuthCredentials:
    """
    OAuth credential triple for the activity provider.

    ``expires_at`` is epoch seconds, as returned by Strava.
    """
    access_token: str
    refresh_token: str
    expires_at: int
    athlete_id: Optional[str] = None
    athlete_name: Optional[str] = None

    def expires_within(self, seconds: int, now: Optional[float] = None) -> bool:
        """True when the token expires in less than ``seconds``."""
        current = time.time() if now is None else now
        return current >= self.expires_at - seconds

    def to_dict(self) -> dict:
        """Serialize to dictionary."""
        return {
            "access_token": self.access_token,
            "refresh_token": self.refresh_token,
            "expires_at": self.expires_at,
            "athlete_id": self.athlete_id,
            "athlete_name": self.athlete_name,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "OAuthCredentials":
        """Deserialize from dictionary."""
        return cls(
            access_token=data["access_token"],
            refresh_token=data["refresh_token"],
            expires_at=int(data["expires_at"]),
            athlete_id=data.get("athlete_id"),
            athlete_name=data.get("athlete_name"),
        )

    @classmethod
    def from_token_response(cls, data: dict) -> "OAuthCredentials":
        """Build from a Strava token endpoint response."""
        athlete = data.get("athlete") or {}
        firstname = athlete.get("firstname", "")
        lastname = athlete.get("lastname", "")
        athlete_name = f"{firstname} {lastname}".strip() or None

        return cls(
            access_token=data["access_token"],
            refresh_token=data["refresh_token"],
            expires_at=int(data["expires_at"]),
            athlete_id=str(athlete["id"]) if athlete.get("id") else None,
            athlete_name=athlete_name,
        )


class IntegrationClient(ABC):
    """
    Abstract base class for integration API clients.

    Owns a lazily created ``httpx.AsyncClient``. Tests pass a
    ``transport`` (e.g. ``httpx.MockTransport``) to avoid the network.
    """

    provider: str = "base"
    base_url: str = ""

    def __init__(self, transport: Optional[httpx.AsyncBaseTransport] = None):
        self._transport = transport
        self._http_client: Optional[httpx.AsyncClient] = None

    @abstractmethod
    def get_auth_headers(self) -> Dict[str, str]:
        """Get authorization headers for API requests."""
        pass

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._http_client is None or self._http_client.is_closed:
            self._http_client = httpx.AsyncClient(
                timeout=DEFAULT_TIMEOUT,
                transport=self._transport,
            )
        return self._http_client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._http_client is not None and not self._http_client.is_closed:
            await self._http_client.aclose()
            self._http_client = None

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()


def error_message(response: httpx.Response) -> str:
    """Best-effort provider error message from a failed response."""
    try:
        data = response.json()
    except ValueError:
        return response.text or response.reason_phrase or f"HTTP {response.status_code}"
    if isinstance(data, dict):
        return str(data.get("message") or data.get("error") or data)
    return str(data)
