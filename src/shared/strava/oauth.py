"""Strava OAuth 2.0 authorization code flow."""

import logging
from typing import Any
from urllib.parse import urlencode

import httpx

logger = logging.getLogger(__name__)


class StravaOAuthClient:
    """
    OAuth 2.0 client for a Strava API application.

    Strava access tokens live six hours; the refresh token returned with
    each response replaces the previous one.
    """

    AUTHORIZATION_ENDPOINT = "https://www.strava.com/oauth/authorize"
    TOKEN_ENDPOINT = "https://www.strava.com/oauth/token"

    # Profile plus all activities, private ones included
    DEFAULT_SCOPE = "read,activity:read_all"

    def __init__(
        self,
        client_id: str,
        client_secret: str,
        redirect_uri: str,
        scope: str = DEFAULT_SCOPE,
    ) -> None:
        """
        Args:
            client_id: Strava API application ID
            client_secret: Strava API application secret
            redirect_uri: Where Strava sends the athlete back with ?code=
            scope: Comma-separated Strava scopes
        """
        self.client_id = client_id
        self.client_secret = client_secret
        self.redirect_uri = redirect_uri
        self.scope = scope

    def get_authorization_url(self, state: str | None = None) -> str:
        """
        Build the Strava consent page URL.

        approval_prompt=auto skips the consent screen for athletes who
        already authorized the application.

        Args:
            state: Opaque value echoed back on the redirect

        Returns:
            URL to send the athlete to
        """
        query = {
            "client_id": self.client_id,
            "redirect_uri": self.redirect_uri,
            "response_type": "code",
            "approval_prompt": "auto",
            "scope": self.scope,
        }
        if state:
            query["state"] = state

        logger.info(f"Built Strava authorization URL (scope {self.scope})")
        return f"{self.AUTHORIZATION_ENDPOINT}?{urlencode(query)}"

    def _post_token(self, grant: dict[str, str]) -> dict[str, Any]:
        """POST a grant to the token endpoint with the app credentials."""
        form = {
            "client_id": self.client_id,
            "client_secret": self.client_secret,
            **grant,
        }
        with httpx.Client() as http:
            response = http.post(
                self.TOKEN_ENDPOINT,
                data=form,
                headers={"Accept": "application/json"},
            )
            response.raise_for_status()
            payload: dict[str, Any] = response.json()
        return payload

    def exchange_code_for_token(self, authorization_code: str) -> dict[str, Any]:
        """
        Trade the ?code= from the redirect for tokens.

        Returns:
            Token response: access_token, refresh_token, expires_at (epoch
            seconds) and the summary athlete

        Raises:
            httpx.HTTPStatusError: If Strava rejects the code
        """
        logger.info("Exchanging Strava authorization code")
        payload = self._post_token({"grant_type": "authorization_code", "code": authorization_code})
        logger.info(f"Authorized athlete {(payload.get('athlete') or {}).get('id')}")
        return payload

    def refresh_access_token(self, refresh_token: str) -> dict[str, Any]:
        """
        Get a new access token with the latest refresh token.

        Returns:
            Token response without the athlete object

        Raises:
            httpx.HTTPStatusError: If the refresh token was revoked or is stale
        """
        logger.info("Refreshing Strava access token")
        payload = self._post_token({"grant_type": "refresh_token", "refresh_token": refresh_token})
        logger.info(f"Strava access token valid until {payload.get('expires_at')}")
        return payload
