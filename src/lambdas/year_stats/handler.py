"""Lambda function handler serving year statistics as JSON."""

import json
from datetime import date
from typing import Any

import httpx
from aws_lambda_powertools import Logger, Metrics
from aws_lambda_powertools.event_handler import APIGatewayRestResolver, Response, content_types
from aws_lambda_powertools.metrics import MetricUnit
from aws_lambda_powertools.utilities.typing import LambdaContext

from src.shared.config import get_settings
from src.shared.models import Athlete, YearStats
from src.shared.stats import StatsCache, compute_year_stats
from src.shared.strava import (
    SecretsManagerTokenStore,
    StravaAPIClient,
    StravaOAuthClient,
    TokenManager,
    TokenRefreshError,
)
from src.shared.strava_export import (
    get_available_years,
    parse_strava_export,
    validate_activities_csv,
    validate_reactions_csv,
)

# Initialize Lambda Powertools
logger = Logger(service="yearinsport-stats")
metrics = Metrics(namespace="YearInSport", service="yearinsport-stats")

# API Gateway event handler
app = APIGatewayRestResolver()

# Reused across warm invocations
_token_manager: TokenManager | None = None
_stats_cache: StatsCache | None = None


def get_oauth_client() -> StravaOAuthClient:
    """Build the Strava OAuth client from settings."""
    settings = get_settings()
    return StravaOAuthClient(
        client_id=settings.strava_client_id,
        client_secret=settings.strava_client_secret,
        redirect_uri=settings.strava_redirect_uri,
    )


def get_token_manager() -> TokenManager:
    """Token manager backed by Secrets Manager (one per container)."""
    global _token_manager
    if _token_manager is None:
        settings = get_settings()
        store = SecretsManagerTokenStore(
            secret_name=settings.strava_token_secret_name,
            region_name=settings.aws_region,
        )
        _token_manager = TokenManager(store, get_oauth_client())
    return _token_manager


def get_stats_cache() -> StatsCache:
    """Year stats cache (one per container)."""
    global _stats_cache
    if _stats_cache is None:
        _stats_cache = StatsCache(ttl_seconds=get_settings().stats_cache_ttl_seconds)
    return _stats_cache


def _json_response(status_code: int, body: dict[str, Any]) -> Response:
    return Response(
        status_code=status_code,
        content_type=content_types.APPLICATION_JSON,
        body=json.dumps(body),
    )


def _stats_body(stats: YearStats) -> dict[str, Any]:
    return stats.model_dump(mode="json", by_alias=True)


def _parse_json_body() -> dict[str, Any]:
    """Decode the JSON request body."""
    if not app.current_event.body:
        raise ValueError("Request body is required")
    try:
        body: dict[str, Any] = json.loads(app.current_event.body)
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON in request body: {e}") from e
    return body


def _parse_year(raw: Any) -> int:
    if raw in (None, ""):
        return date.today().year
    try:
        return int(raw)
    except (TypeError, ValueError) as e:
        raise ValueError(f"Invalid year: {raw}") from e


@app.get("/stats")
def get_year_stats() -> dict[str, Any] | Response:
    """
    Compute statistics for the authenticated athlete from the Strava API.

    Query Parameters:
        year (optional): Calendar year (default: current year)

    Returns:
        YearStats JSON
    """
    year = _parse_year(app.current_event.get_query_string_value("year", ""))
    settings = get_settings()

    try:
        credentials = get_token_manager().get_valid_credentials()
    except TokenRefreshError as e:
        logger.warning(f"No valid Strava token: {e}")
        return _json_response(401, {"error": "Not authenticated"})

    cache = get_stats_cache()
    if credentials.athlete_id is not None:
        cached = cache.get(credentials.athlete_id, year)
        if cached is not None:
            logger.info(f"Serving cached {year} stats for athlete {credentials.athlete_id}")
            metrics.add_metric(name="StatsCacheHit", unit=MetricUnit.Count, value=1)
            return _stats_body(cached)

    api_client = StravaAPIClient(credentials.access_token, page_delay=settings.page_delay_seconds)
    try:
        with api_client as client:
            athlete, activities = client.fetch_year(year, per_page=settings.activities_page_size)
    except httpx.HTTPStatusError as e:
        logger.exception(f"Strava API request failed: {e}")
        return _json_response(502, {"error": "Failed to fetch statistics"})

    stats = compute_year_stats(activities, athlete, year)
    cache.set(stats)

    logger.info(f"Computed {year} stats for athlete {athlete.id}: {len(activities)} activities")
    metrics.add_metric(name="ActivitiesProcessed", unit=MetricUnit.Count, value=len(activities))

    return _stats_body(stats)


@app.post("/stats/import")
def import_export() -> dict[str, Any] | Response:
    """
    Compute statistics from an uploaded Strava data export.

    Body (JSON):
        activities_csv: Contents of activities.csv (required)
        reactions_csv (optional): Contents of reactions.csv
        year (optional): Calendar year (default: current year)

    Returns:
        YearStats JSON plus availableYears and validation warnings
    """
    body = _parse_json_body()
    activities_csv = body.get("activities_csv") or ""
    reactions_csv = body.get("reactions_csv") or None
    year = _parse_year(body.get("year"))

    validation = validate_activities_csv(activities_csv)
    warnings = list(validation.warnings)
    if not validation.is_valid:
        logger.warning(f"Rejected activities.csv: {validation.errors}")
        return _json_response(400, validation.model_dump(by_alias=True))

    if reactions_csv:
        reactions_validation = validate_reactions_csv(reactions_csv)
        if not reactions_validation.is_valid:
            logger.warning(f"Rejected reactions.csv: {reactions_validation.errors}")
            return _json_response(400, reactions_validation.model_dump(by_alias=True))

    parsed = parse_strava_export(activities_csv, reactions_csv, year)
    athlete = Athlete(id=0, firstname=parsed.athlete_name)
    stats = compute_year_stats(parsed.activities, athlete, parsed.year)

    metrics.add_metric(
        name="ImportedActivities", unit=MetricUnit.Count, value=len(parsed.activities)
    )

    return {
        **_stats_body(stats),
        "availableYears": get_available_years(activities_csv),
        "warnings": warnings,
    }


@app.post("/stats/years")
def list_export_years() -> dict[str, Any] | Response:
    """
    List the years present in an uploaded activities.csv.

    Body (JSON):
        activities_csv: Contents of activities.csv (required)
    """
    body = _parse_json_body()
    activities_csv = body.get("activities_csv") or ""

    validation = validate_activities_csv(activities_csv)
    if not validation.is_valid:
        return _json_response(400, validation.model_dump(by_alias=True))

    return {"years": get_available_years(activities_csv)}


@app.get("/auth/login-url")
def get_login_url() -> dict[str, Any]:
    """
    Get the Strava OAuth authorization URL.

    Returns:
        Authorization URL to redirect the athlete to
    """
    auth_url = get_oauth_client().get_authorization_url(state="yis")
    return {"auth_url": auth_url}


@app.post("/auth/callback")
def handle_auth_callback() -> dict[str, Any]:
    """
    Exchange an authorization code for tokens and store them.

    Body (JSON):
        code: Authorization code from Strava (required)
    """
    body = _parse_json_body()
    code = body.get("code")
    if not code:
        raise ValueError("code is required")

    token_data = get_oauth_client().exchange_code_for_token(code)
    credentials = get_token_manager().save_initial(token_data)

    athlete = token_data.get("athlete") or {}
    if credentials.athlete_id is not None:
        get_stats_cache().invalidate(credentials.athlete_id)

    return {
        "athlete_id": credentials.athlete_id,
        "firstname": athlete.get("firstname", ""),
    }


@app.post("/auth/logout")
def handle_logout() -> dict[str, Any]:
    """Forget stored Strava credentials and any stats cached for the athlete."""
    manager = get_token_manager()
    credentials = manager.store.load()
    manager.store.clear()

    if credentials and credentials.athlete_id is not None:
        get_stats_cache().invalidate(credentials.athlete_id)
        logger.info(f"Logged out athlete {credentials.athlete_id}")

    return {"logged_out": True}


@logger.inject_lambda_context
@metrics.log_metrics(capture_cold_start_metric=True)
def lambda_handler(event: dict[str, Any], context: LambdaContext) -> dict[str, Any]:
    """
    Lambda handler for the year statistics API.

    Uses Lambda Powertools API Gateway resolver to handle routing.
    """
    logger.setLevel(get_settings().log_level)

    try:
        return app.resolve(event, context)
    except ValueError as e:
        logger.warning(f"Validation error: {e}")
        return {
            "statusCode": 400,
            "headers": {"Content-Type": "application/json"},
            "body": json.dumps({"error": "Bad request", "message": str(e)}),
        }
    except Exception as e:
        logger.exception(f"Request failed: {e}")
        return {
            "statusCode": 500,
            "headers": {"Content-Type": "application/json"},
            "body": json.dumps({"error": "Internal server error", "message": str(e)}),
        }
