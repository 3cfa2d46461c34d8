"""Application services: token handling and the coach session."""

from .coach import CoachService, OperationKind
from .token_provider import REFRESH_MARGIN_SECONDS, TokenProvider

__all__ = [
    "CoachService",
    "OperationKind",
    "REFRESH_MARGIN_SECONDS",
    "TokenProvider",
]
