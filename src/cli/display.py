"""Display utilities for yis CLI with Rich formatting."""

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from src.shared.models import (
    YearStats,
    format_distance,
    format_duration,
    format_pace,
    format_sport_type,
)
from src.shared.stats import Achievement, FunFact, YearComparison

console = Console()


def display_year_summary(stats: YearStats) -> None:
    """Display the headline totals for a year."""
    name = stats.athlete.full_name
    if stats.total_activities == 0:
        console.print(
            Panel(
                f"[dim]No activities recorded in {stats.year}.[/dim]",
                title=f"[bold cyan]{name} · {stats.year}[/bold cyan]",
                border_style="cyan",
            )
        )
        return

    table = Table(title=f"{name} · {stats.year}", show_header=True, border_style="cyan")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", style="green", justify="right")

    table.add_row("Activities", f"{stats.total_activities:,}")
    table.add_row("Distance", format_distance(stats.total_distance))
    table.add_row("Moving Time", format_duration(stats.total_time))
    table.add_row("Elevation", f"{stats.total_elevation:,.0f} m")
    table.add_row("Primary Sport", format_sport_type(stats.primary_sport))
    table.add_row("Days Active", str(stats.days_active))
    table.add_row("Longest Streak", f"{stats.longest_streak} days")
    table.add_row("Per Week", f"{stats.avg_weekly_activities}")
    table.add_row("Most Active Day", stats.most_active_day)
    table.add_row("Most Active Month", stats.most_active_month)
    table.add_row(
        "Biggest Week",
        f"Week {stats.biggest_week.week} · {format_distance(stats.biggest_week.distance)}",
    )
    table.add_row(
        "Biggest Month",
        f"{stats.biggest_month.month} · {format_distance(stats.biggest_month.distance)}",
    )
    table.add_row("Preferred Time", stats.preferred_time)
    table.add_row("Kudos", f"{stats.total_kudos:,}")
    table.add_row("PRs", str(stats.total_prs))

    console.print(table)


def display_sport_breakdown(stats: YearStats) -> None:
    """Display per-sport totals."""
    if not stats.sport_stats:
        return

    table = Table(title="Sports", show_header=True, border_style="cyan")
    table.add_column("Sport", style="cyan")
    table.add_column("Count", justify="right", style="green")
    table.add_column("Distance", justify="right")
    table.add_column("Time", justify="right")
    table.add_column("Longest", justify="right")
    table.add_column("Best Speed", justify="right", style="yellow")

    for sport in stats.sport_stats:
        is_run = "run" in sport.sport.lower()
        best = format_pace(sport.fastest_pace, is_run) if sport.fastest_pace else "-"
        table.add_row(
            format_sport_type(sport.sport),
            str(sport.activity_count),
            format_distance(sport.total_distance),
            format_duration(sport.total_time),
            format_distance(sport.longest_activity),
            best,
        )

    console.print(table)


def display_monthly(stats: YearStats) -> None:
    """Display the monthly series as a simple bar chart."""
    most = max((m.distance for m in stats.monthly_data), default=0.0)

    table = Table(title="Monthly Distance", show_header=False, border_style="dim")
    table.add_column("Month", style="cyan")
    table.add_column("Bar")
    table.add_column("Distance", justify="right", style="green")

    for month in stats.monthly_data:
        width = int(month.distance / most * 30) if most > 0 else 0
        table.add_row(
            month.month[:3],
            "[orange1]" + "█" * width + "[/orange1]",
            format_distance(month.distance),
        )

    console.print(table)


def display_insights(stats: YearStats) -> None:
    """Display generated insights."""
    for insight in stats.insights:
        console.print(f"{insight.icon}  {insight.message}")


def display_achievements(achievements: list[Achievement]) -> None:
    """Display achievement badges with progress."""
    table = Table(title="Achievements", show_header=True, border_style="cyan")
    table.add_column("", justify="center")
    table.add_column("Badge", style="cyan")
    table.add_column("Goal")
    table.add_column("Progress", justify="right")

    for badge in achievements:
        status = "[bold green]✓[/bold green]" if badge.unlocked else f"{badge.progress:.0f}%"
        table.add_row(badge.icon, badge.name, badge.description, status)

    console.print(table)


def display_fun_facts(facts: list[FunFact]) -> None:
    """Display fun-fact comparisons."""
    for fact in facts:
        console.print(f"{fact.icon}  {fact.fact}")


def display_comparison(year: int, comparisons: list[YearComparison]) -> None:
    """Display year-over-year changes."""
    if not comparisons:
        return

    table = Table(title=f"{year} vs {year - 1}", show_header=True, border_style="cyan")
    table.add_column("Metric", style="cyan")
    table.add_column(str(year), justify="right")
    table.add_column(str(year - 1), justify="right", style="dim")
    table.add_column("Change", justify="right")

    for item in comparisons:
        color = "green" if item.positive else "red"
        table.add_row(
            f"{item.icon} {item.label}",
            item.current_display,
            item.previous_display,
            f"[{color}]{item.change}[/{color}]",
        )

    console.print(table)


def display_years(years: list[int]) -> None:
    """Display years available in an export."""
    if not years:
        display_warning("No activities found in the export")
        return
    console.print("[bold]Available years:[/bold] " + ", ".join(str(y) for y in years))


def display_progress(message: str, done: bool = False) -> None:
    """Display progress message."""
    if done:
        console.print(f"[green]✓[/green] {message}")
    else:
        console.print(f"[cyan]→[/cyan] {message}")


def display_error(message: str) -> None:
    """Display error message."""
    console.print(f"[red]✗[/red] {message}")


def display_warning(message: str) -> None:
    """Display warning message."""
    console.print(f"[yellow]![/yellow] {message}")


def display_info(message: str) -> None:
    """Display info message."""
    console.print(f"[dim]ℹ[/dim] {message}")
