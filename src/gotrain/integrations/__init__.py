"""External integrations: Strava activities and Hevy strength history."""

from .base import (
    AuthenticationError,
    IntegrationClient,
    IntegrationError,
    OAuthCredentials,
    RateLimitError,
)
from .hevy import HevyClient, HevyExerciseSet, HevySet, HevyWorkout
from .strava import StravaActivity, StravaClient, StravaOAuthFlow

__all__ = [
    "AuthenticationError",
    "IntegrationClient",
    "IntegrationError",
    "OAuthCredentials",
    "RateLimitError",
    "HevyClient",
    "HevyExerciseSet",
    "HevySet",
    "HevyWorkout",
    "StravaActivity",
    "StravaClient",
    "StravaOAuthFlow",
]
