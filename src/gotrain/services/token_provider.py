"""Valid-token capability for the Strava connection."""

import logging
from typing import Callable, Optional

import httpx

from ..db.storage import SessionStorage, StorageKey
from ..integrations.base import IntegrationError, OAuthCredentials
from ..integrations.strava import StravaOAuthFlow


logger = logging.getLogger(__name__)

# Refresh when the token has less than this many seconds left
REFRESH_MARGIN_SECONDS = 60


class TokenProvider:
    """
    Hands out a usable Strava access token.

    ``get_valid_token`` never raises for credential problems: a failed
    refresh disconnects the account and returns None so the caller can ask
    the user to reconnect.
    """

    def __init__(
        self,
        storage: SessionStorage,
        oauth_flow: StravaOAuthFlow,
        on_disconnect: Optional[Callable[[], None]] = None,
    ):
        self._storage = storage
        self._oauth_flow = oauth_flow
        self.on_disconnect = on_disconnect

    def load_credentials(self) -> Optional[OAuthCredentials]:
        data = self._storage.get_json(StorageKey.STRAVA_CREDENTIALS)
        if not data:
            return None
        try:
            return OAuthCredentials.from_dict(data)
        except (KeyError, TypeError, ValueError):
            logger.warning("Stored Strava credentials are incomplete")
            return None

    def save_credentials(self, credentials: OAuthCredentials) -> None:
        self._storage.set_json(StorageKey.STRAVA_CREDENTIALS, credentials.to_dict())

    @property
    def is_connected(self) -> bool:
        return self.load_credentials() is not None

    def authorization_url(self) -> str:
        return self._oauth_flow.get_authorization_url()

    async def connect(self, code: str) -> OAuthCredentials:
        """Exchange an authorization code and store the credentials."""
        credentials = await self._oauth_flow.exchange_code(code)
        self.save_credentials(credentials)
        logger.info(f"Connected Strava athlete {credentials.athlete_id or '<unknown>'}")
        return credentials

    async def get_valid_token(self, now: Optional[float] = None) -> Optional[str]:
        """
        Return a token valid for at least another minute, refreshing if needed.

        Returns:
            The access token, or None when not connected or refresh failed
        """
        credentials = self.load_credentials()
        if credentials is None:
            return None

        if not credentials.expires_within(REFRESH_MARGIN_SECONDS, now=now):
            return credentials.access_token

        try:
            refreshed = await self._oauth_flow.refresh_token(credentials)
        except (IntegrationError, httpx.HTTPError) as e:
            logger.error(f"Failed to refresh Strava token: {e}")
            self.disconnect()
            return None

        self.save_credentials(refreshed)
        logger.info("Refreshed Strava access token")
        return refreshed.access_token

    def disconnect(self) -> None:
        """Forget the credentials and session data, then run the teardown hook."""
        self._storage.clear_account()
        if self.on_disconnect is not None:
            self.on_disconnect()
        logger.info("Disconnected Strava account")
