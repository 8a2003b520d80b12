"""Strava API integration."""

from .client import StravaAPIClient
from .oauth import StravaOAuthClient
from .token_manager import (
    FileTokenStore,
    SecretsManagerTokenStore,
    StravaCredentials,
    TokenManager,
    TokenRefreshError,
)

__all__ = [
    "StravaOAuthClient",
    "StravaAPIClient",
    "StravaCredentials",
    "TokenManager",
    "TokenRefreshError",
    "FileTokenStore",
    "SecretsManagerTokenStore",
]
