"""
Strava integration for the recent-activity feed.

Implements:
- OAuth 2.0 flow for Strava (authorize URL, code exchange, refresh)
- Listing the athlete's activities from the last week
"""

import logging
import time
import urllib.parse
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, List, Optional

import httpx

from .base import (
    DEFAULT_TIMEOUT,
    AuthenticationError,
    IntegrationClient,
    IntegrationError,
    OAuthCredentials,
    RateLimitError,
    error_message,
)


logger = logging.getLogger(__name__)

RECENT_WINDOW_DAYS = 7


@dataclass(frozen=True)
class StravaActivity:
    """A recorded endurance activity."""
    id: int
    name: str
    type: str
    start_date: datetime
    distance_m: float
    moving_time_sec: int
    total_elevation_gain_m: float = 0.0

    @property
    def moving_time_min(self) -> float:
        return self.moving_time_sec / 60

    def to_dict(self) -> dict:
        """Serialize using Strava's field names."""
        return {
            "id": self.id,
            "name": self.name,
            "type": self.type,
            "start_date": self.start_date.isoformat(),
            "distance": self.distance_m,
            "moving_time": self.moving_time_sec,
            "total_elevation_gain": self.total_elevation_gain_m,
        }

    @classmethod
    def from_api_response(cls, data: dict) -> "StravaActivity":
        """Parse from Strava API response (or a stored ``to_dict``)."""
        return cls(
            id=data["id"],
            name=data["name"],
            type=data.get("type") or data.get("sport_type") or "Workout",
            start_date=datetime.fromisoformat(data["start_date"].replace("Z", "+00:00")),
            distance_m=data.get("distance", 0) or 0,
            moving_time_sec=data.get("moving_time", 0) or 0,
            total_elevation_gain_m=data.get("total_elevation_gain", 0) or 0,
        )


class StravaOAuthFlow:
    """
    OAuth 2.0 flow for Strava.

    Usage:
        oauth = StravaOAuthFlow(client_id, client_secret, "http://localhost:8080")
        auth_url = oauth.get_authorization_url()
        # After the user authorizes, exchange the code from the redirect:
        credentials = await oauth.exchange_code(code)
    """

    provider = "strava"
    authorize_url = "https://www.strava.com/oauth/authorize"
    token_url = "https://www.strava.com/oauth/token"

    DEFAULT_SCOPE = "read,activity:read_all"

    def __init__(
        self,
        client_id: str,
        client_secret: str,
        redirect_uri: str,
        scope: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.client_id = client_id
        self.client_secret = client_secret
        self.redirect_uri = redirect_uri
        self.scope = scope or self.DEFAULT_SCOPE
        self._transport = transport

    def get_authorization_url(self) -> str:
        """
        Get the Strava authorization URL.

        Returns:
            Full authorization URL to send the user to.
        """
        params = {
            "client_id": self.client_id,
            "redirect_uri": self.redirect_uri,
            "response_type": "code",
            "scope": self.scope,
            "approval_prompt": "auto",
        }

        query = urllib.parse.urlencode(params)
        return f"{self.authorize_url}?{query}"

    async def _post_token(self, data: Dict[str, str], action: str) -> dict:
        try:
            async with httpx.AsyncClient(timeout=DEFAULT_TIMEOUT, transport=self._transport) as client:
                response = await client.post(self.token_url, data=data)
        except httpx.HTTPError as e:
            raise AuthenticationError(f"Failed to {action}: {e}", self.provider)

        if response.status_code != 200:
            raise AuthenticationError(
                f"Failed to {action}: {error_message(response)}",
                self.provider,
            )
        try:
            return response.json()
        except ValueError:
            raise AuthenticationError(f"Failed to {action}: unreadable token response", self.provider)

    async def exchange_code(self, code: str) -> OAuthCredentials:
        """
        Exchange authorization code for access token.

        Raises:
            AuthenticationError: If code exchange fails
        """
        data = await self._post_token(
            {
                "client_id": self.client_id,
                "client_secret": self.client_secret,
                "code": code,
                "grant_type": "authorization_code",
            },
            "exchange token",
        )
        return OAuthCredentials.from_token_response(data)

    async def refresh_token(self, credentials: OAuthCredentials) -> OAuthCredentials:
        """
        Refresh an expired access token.

        Raises:
            AuthenticationError: If refresh fails
        """
        data = await self._post_token(
            {
                "client_id": self.client_id,
                "client_secret": self.client_secret,
                "refresh_token": credentials.refresh_token,
                "grant_type": "refresh_token",
            },
            "refresh token",
        )
        data.setdefault("refresh_token", credentials.refresh_token)

        refreshed = OAuthCredentials.from_token_response(data)
        refreshed.athlete_id = refreshed.athlete_id or credentials.athlete_id
        refreshed.athlete_name = refreshed.athlete_name or credentials.athlete_name
        return refreshed


class StravaClient(IntegrationClient):
    """
    Client for the Strava API v3 activity list.

    Usage:
        async with StravaClient(access_token) as client:
            activities = await client.get_recent_activities()
    """

    provider = "strava"
    base_url = "https://www.strava.com/api/v3"

    def __init__(
        self,
        access_token: str,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        super().__init__(transport=transport)
        self.access_token = access_token

    def get_auth_headers(self) -> Dict[str, str]:
        return {"Authorization": f"Bearer {self.access_token}"}

    async def _request(
        self,
        method: str,
        endpoint: str,
        params: Optional[Dict[str, Any]] = None,
    ) -> Any:
        """
        Make an API request.

        Raises:
            AuthenticationError: If token is expired or invalid
            RateLimitError: If the rate limit is exceeded
            IntegrationError: For other API errors
        """
        client = await self._get_client()
        response = await client.request(
            method,
            f"{self.base_url}{endpoint}",
            headers=self.get_auth_headers(),
            params=params,
        )

        if response.status_code == 200:
            try:
                return response.json()
            except ValueError:
                raise IntegrationError(
                    "Failed to fetch activities: Strava returned an unreadable response",
                    self.provider,
                    "invalid_body",
                )

        if response.status_code == 401:
            raise AuthenticationError(
                "Token expired or invalid. Please re-authenticate.",
                self.provider,
            )

        if response.status_code == 429:
            retry_after = response.headers.get("Retry-After")
            raise RateLimitError(
                "Strava rate limit exceeded. Please wait before retrying.",
                self.provider,
                int(retry_after) if retry_after else None,
            )

        raise IntegrationError(
            f"Failed to fetch activities: {error_message(response)}",
            self.provider,
            str(response.status_code),
        )

    async def get_recent_activities(
        self,
        days: int = RECENT_WINDOW_DAYS,
        now: Optional[float] = None,
        per_page: int = 100,
    ) -> List[StravaActivity]:
        """
        Get the athlete's activities from the last ``days`` days.

        Args:
            days: Size of the look-back window
            now: Epoch seconds to count back from (defaults to now)
            per_page: Page size requested from Strava (max 200)

        Returns:
            Activities as returned by Strava, most recent first
        """
        current = int(time.time() if now is None else now)
        after = current - days * 24 * 60 * 60

        response = await self._request(
            "GET",
            "/athlete/activities",
            params={"after": after, "per_page": min(per_page, 200)},
        )

        activities = []
        if isinstance(response, list):
            for data in response:
                try:
                    activities.append(StravaActivity.from_api_response(data))
                except (KeyError, TypeError, ValueError, AttributeError) as e:
                    logger.warning(f"Skipping malformed Strava activity: {e}")
                    continue

        logger.info(f"Fetched {len(activities)} Strava activities from the last {days} days")
        return activities
