#!/usr/bin/env python3
"""
Setup script for Strava OAuth tokens.

Completes the OAuth flow by hand and stores the tokens in AWS Secrets Manager
for the year stats Lambda to use.

Usage:
    python scripts/setup_strava_tokens.py
"""

import logging

import httpx

from src.shared.config import get_settings
from src.shared.strava import SecretsManagerTokenStore, StravaOAuthClient, TokenManager

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def main() -> None:
    """Run OAuth flow and store tokens in Secrets Manager."""
    print("=" * 60)
    print("Year in Sport - Strava OAuth Setup")
    print("=" * 60)
    print()

    settings = get_settings()

    oauth_client = StravaOAuthClient(
        client_id=settings.strava_client_id,
        client_secret=settings.strava_client_secret,
        redirect_uri=settings.strava_redirect_uri,
    )

    # Step 1: Generate authorization URL
    print("Step 1: Authorize Application")
    print("-" * 60)
    auth_url = oauth_client.get_authorization_url(state="setup_script")
    print(f"\nVisit this URL to authorize:\n{auth_url}\n")
    print("After authorizing, you'll be redirected to:")
    print(f"{settings.strava_redirect_uri}?code=AUTH_CODE&state=setup_script")
    print()

    # Step 2: Get authorization code
    print("Step 2: Enter Authorization Code")
    print("-" * 60)
    auth_code = input("Paste the authorization code from the URL: ").strip()

    if not auth_code:
        print("Error: No authorization code provided")
        return

    # Step 3: Exchange code for tokens
    print("\nStep 3: Exchange Code for Tokens")
    print("-" * 60)
    try:
        token_data = oauth_client.exchange_code_for_token(auth_code)
    except httpx.HTTPError as e:
        print(f"✗ Failed to exchange code: {e}")
        return

    athlete = token_data.get("athlete") or {}
    print(f"✓ Authorized athlete {athlete.get('id')} ({athlete.get('firstname', '')})")
    print(f"  Scope granted: {oauth_client.scope}")

    # Step 4: Store in AWS Secrets Manager
    print("\nStep 4: Store Tokens in AWS Secrets Manager")
    print("-" * 60)

    confirm = (
        input(
            f"\nThis will write secret '{settings.strava_token_secret_name}' "
            f"in {settings.aws_region}.\nContinue? [y/N]: "
        )
        .strip()
        .lower()
    )
    if confirm != "y":
        print("Aborted. Tokens were not stored.")
        return

    store = SecretsManagerTokenStore(
        secret_name=settings.strava_token_secret_name,
        region_name=settings.aws_region,
    )
    TokenManager(store, oauth_client).save_initial(token_data)

    print("✓ Successfully stored tokens in AWS Secrets Manager")
    print("\nThe Lambda can now serve GET /stats and refresh tokens on its own.")


if __name__ == "__main__":
    try:
        main()
    except KeyboardInterrupt:
        print("\n\nAborted by user.")
    except Exception as e:
        logger.exception(f"Setup failed: {e}")
