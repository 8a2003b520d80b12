"""Stats commands for yis CLI."""

import json
from datetime import date
from pathlib import Path

import httpx
import typer

from src.cli import display
from src.shared.config import get_settings
from src.shared.models import Athlete, YearStats
from src.shared.stats import (
    calculate_achievements,
    compare_years,
    compute_year_stats,
    generate_fun_facts,
)
from src.shared.strava import (
    FileTokenStore,
    StravaAPIClient,
    StravaOAuthClient,
    TokenManager,
    TokenRefreshError,
)
from src.shared.strava_export import (
    ValidationResult,
    get_available_years,
    parse_strava_export,
    validate_activities_csv,
    validate_reactions_csv,
)


def _read_file(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8-sig")
    except OSError as e:
        display.display_error(f"Cannot read {path}: {e}")
        raise typer.Exit(1) from None


def _check(result: ValidationResult, path: Path) -> None:
    """Print validation problems and exit when the file is unusable."""
    for warning in result.warnings:
        display.display_warning(warning)
    if not result.is_valid:
        for error in result.errors:
            display.display_error(f"{path.name}: {error}")
        raise typer.Exit(1)


def _show(stats: YearStats, previous: YearStats | None, highlights: bool) -> None:
    display.display_year_summary(stats)
    display.display_sport_breakdown(stats)
    display.display_monthly(stats)
    display.display_insights(stats)
    if highlights:
        display.display_achievements(calculate_achievements(stats))
        display.display_fun_facts(generate_fun_facts(stats))
    display.display_comparison(stats.year, compare_years(stats, previous))


def import_export(
    activities: Path = typer.Argument(..., help="Path to activities.csv"),
    reactions: Path | None = typer.Option(
        None, "--reactions", "-r", help="Path to reactions.csv"
    ),
    year: int | None = typer.Option(None, "--year", "-y", help="Year (default: current)"),
    highlights: bool = typer.Option(
        False, "--highlights", "-h", help="Show achievements and fun facts"
    ),
    json_output: bool = typer.Option(False, "--json", "-j", help="Output raw JSON"),
) -> None:
    """
    Compute year statistics from a Strava data export.

    Examples:
        yis import activities.csv
        yis import activities.csv -r reactions.csv --year 2024 --highlights
    """
    activities_csv = _read_file(activities)
    _check(validate_activities_csv(activities_csv), activities)

    reactions_csv = None
    if reactions is not None:
        reactions_csv = _read_file(reactions)
        _check(validate_reactions_csv(reactions_csv), reactions)

    target_year = year or date.today().year
    parsed = parse_strava_export(activities_csv, reactions_csv, target_year)
    athlete = Athlete(id=0, firstname=parsed.athlete_name)
    stats = compute_year_stats(parsed.activities, athlete, parsed.year)

    if json_output:
        print(stats.to_json())
        return

    previous = None
    if target_year - 1 in get_available_years(activities_csv):
        prior = parse_strava_export(activities_csv, reactions_csv, target_year - 1)
        previous = compute_year_stats(prior.activities, athlete, prior.year)

    _show(stats, previous, highlights)


def years(
    activities: Path = typer.Argument(..., help="Path to activities.csv"),
    json_output: bool = typer.Option(False, "--json", "-j", help="Output raw JSON"),
) -> None:
    """List the years present in a Strava activities export."""
    activities_csv = _read_file(activities)
    _check(validate_activities_csv(activities_csv), activities)

    available = get_available_years(activities_csv)
    if json_output:
        print(json.dumps({"years": available}))
    else:
        display.display_years(available)


def live(
    year: int | None = typer.Option(None, "--year", "-y", help="Year (default: current)"),
    highlights: bool = typer.Option(
        False, "--highlights", "-h", help="Show achievements and fun facts"
    ),
    json_output: bool = typer.Option(False, "--json", "-j", help="Output raw JSON"),
) -> None:
    """Fetch a year of activities from Strava and show statistics."""
    settings = get_settings()
    target_year = year or date.today().year

    oauth = StravaOAuthClient(
        client_id=settings.strava_client_id,
        client_secret=settings.strava_client_secret,
        redirect_uri=settings.strava_redirect_uri,
    )
    manager = TokenManager(FileTokenStore(settings.tokens_file), oauth)

    try:
        access_token = manager.get_valid_access_token()
    except TokenRefreshError as e:
        display.display_error(f"{e}. Run 'yis auth login' first.")
        raise typer.Exit(1) from None

    display.display_progress(f"Fetching {target_year} activities from Strava...")
    try:
        with StravaAPIClient(access_token, page_delay=settings.page_delay_seconds) as client:
            athlete, activities = client.fetch_year(
                target_year, per_page=settings.activities_page_size
            )
    except httpx.HTTPError as e:
        display.display_error(f"Strava request failed: {e}")
        raise typer.Exit(1) from None

    display.display_progress(f"Fetched {len(activities)} activities", done=True)
    stats = compute_year_stats(activities, athlete, target_year)

    if json_output:
        print(stats.to_json())
    else:
        _show(stats, None, highlights)
