"""Strava OAuth credential storage and single-flight token refresh."""

import json
import logging
import threading
import time
from collections.abc import Callable
from pathlib import Path
from typing import Any, Protocol

import boto3
from botocore.exceptions import ClientError
from pydantic import BaseModel

from .oauth import StravaOAuthClient

logger = logging.getLogger(__name__)

# Refresh when the token has less than this many seconds left
EXPIRY_BUFFER_SECONDS = 300


class TokenRefreshError(RuntimeError):
    """Raised when stored credentials are missing or cannot be refreshed."""


class StravaCredentials(BaseModel):
    """OAuth credentials for one athlete."""

    access_token: str
    refresh_token: str
    expires_at: int  # Unix time
    athlete_id: int | None = None

    def is_expired(self, now: float, buffer: int = EXPIRY_BUFFER_SECONDS) -> bool:
        """True when the access token expires within buffer seconds."""
        return self.expires_at <= now + buffer

    @classmethod
    def from_token_response(
        cls, token_data: dict[str, Any], previous: "StravaCredentials | None" = None
    ) -> "StravaCredentials":
        """Build credentials from a Strava token endpoint response."""
        athlete = token_data.get("athlete") or {}
        return cls(
            access_token=token_data["access_token"],
            refresh_token=token_data.get(
                "refresh_token", previous.refresh_token if previous else ""
            ),
            expires_at=int(token_data["expires_at"]),
            athlete_id=athlete.get("id", previous.athlete_id if previous else None),
        )


class TokenStore(Protocol):
    """Persistence for StravaCredentials."""

    def load(self) -> StravaCredentials | None: ...

    def save(self, credentials: StravaCredentials) -> None: ...

    def clear(self) -> None: ...


class FileTokenStore:
    """Stores credentials as JSON on the local filesystem (CLI use)."""

    def __init__(self, path: Path) -> None:
        self.path = path

    def load(self) -> StravaCredentials | None:
        if not self.path.exists():
            return None
        try:
            with open(self.path) as f:
                return StravaCredentials(**json.load(f))
        except (json.JSONDecodeError, OSError, ValueError) as e:
            logger.warning(f"Ignoring unreadable token file {self.path}: {e}")
            return None

    def save(self, credentials: StravaCredentials) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "w") as f:
            json.dump(credentials.model_dump(), f, indent=2)

    def clear(self) -> None:
        if self.path.exists():
            self.path.unlink()


class SecretsManagerTokenStore:
    """Stores credentials in AWS Secrets Manager (Lambda use)."""

    def __init__(self, secret_name: str, region_name: str = "us-east-2") -> None:
        """
        Initialize the store.

        Args:
            secret_name: AWS Secrets Manager secret name
            region_name: AWS region for Secrets Manager
        """
        self.secret_name = secret_name
        self._secrets_client = boto3.client("secretsmanager", region_name=region_name)

    def load(self) -> StravaCredentials | None:
        logger.info(f"Retrieving tokens from secret: {self.secret_name}")
        try:
            response = self._secrets_client.get_secret_value(SecretId=self.secret_name)
        except self._secrets_client.exceptions.ResourceNotFoundException:
            logger.warning(f"Secret {self.secret_name} does not exist")
            return None
        except ClientError as e:
            logger.error(f"Failed to retrieve tokens: {e}")
            raise

        secret_data = json.loads(response["SecretString"])
        if not secret_data.get("access_token"):
            return None
        return StravaCredentials(**secret_data)

    def save(self, credentials: StravaCredentials) -> None:
        logger.info(f"Updating tokens in secret: {self.secret_name}")
        secret_string = credentials.model_dump_json()
        try:
            self._secrets_client.put_secret_value(
                SecretId=self.secret_name,
                SecretString=secret_string,
            )
        except self._secrets_client.exceptions.ResourceNotFoundException:
            logger.info("Secret does not exist, creating it")
            self._secrets_client.create_secret(
                Name=self.secret_name,
                Description="Strava OAuth tokens for Year in Sport",
                SecretString=secret_string,
            )
        except ClientError as e:
            logger.error(f"Failed to update tokens: {e}")
            raise

    def clear(self) -> None:
        logger.info(f"Clearing tokens in secret: {self.secret_name}")
        self._secrets_client.put_secret_value(
            SecretId=self.secret_name,
            SecretString=json.dumps({}),
        )


class TokenManager:
    """
    Hands out valid Strava access tokens, refreshing them when they expire.

    Refreshes are serialized with a lock: when several threads find the token
    expired at once, the first refreshes it and the others reuse the result,
    so at most one refresh request is in flight.
    """

    def __init__(
        self,
        store: TokenStore,
        oauth_client: StravaOAuthClient,
        clock: Callable[[], float] = time.time,
    ) -> None:
        """
        Initialize token manager.

        Args:
            store: Where credentials are loaded from and saved to
            oauth_client: OAuth client for token refresh
            clock: Unix time source (injectable for tests)
        """
        self.store = store
        self.oauth_client = oauth_client
        self._clock = clock
        self._refresh_lock = threading.Lock()

    def save_initial(self, token_data: dict[str, Any]) -> StravaCredentials:
        """Store credentials from an authorization code exchange."""
        credentials = StravaCredentials.from_token_response(token_data)
        self.store.save(credentials)
        logger.info(f"Stored credentials for athlete {credentials.athlete_id}")
        return credentials

    def get_valid_access_token(self) -> str:
        """Get a valid access token, refreshing if necessary."""
        return self.get_valid_credentials().access_token

    def get_valid_credentials(self) -> StravaCredentials:
        """
        Load stored credentials, refreshing them first if the token expires soon.

        The store is read once per call unless a refresh is needed.

        Returns:
            Credentials whose access token is valid for at least
            EXPIRY_BUFFER_SECONDS

        Raises:
            TokenRefreshError: If no credentials are stored or refresh fails
                (stored credentials are cleared in the latter case)
        """
        credentials = self.store.load()
        if credentials is None:
            raise TokenRefreshError("No stored Strava credentials")

        if not credentials.is_expired(self._clock()):
            return credentials

        with self._refresh_lock:
            # Another thread may have refreshed while we waited for the lock
            credentials = self.store.load()
            if credentials is None:
                raise TokenRefreshError("No stored Strava credentials")
            if not credentials.is_expired(self._clock()):
                logger.info("Using token refreshed by a concurrent request")
                return credentials

            return self._refresh_and_update(credentials)

    def _refresh_and_update(self, credentials: StravaCredentials) -> StravaCredentials:
        logger.info("Token expired or expiring soon, refreshing...")
        try:
            token_data = self.oauth_client.refresh_access_token(credentials.refresh_token)
            refreshed = StravaCredentials.from_token_response(token_data, previous=credentials)
        except Exception as e:
            logger.error(f"Failed to refresh token: {e}")
            self.store.clear()
            raise TokenRefreshError("Strava token refresh failed") from e

        self.store.save(refreshed)
        logger.info("Successfully refreshed and updated tokens")
        return refreshed
