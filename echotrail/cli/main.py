"""CLI Entry Point - Main command interface.

This module provides the developer CLI for trying the context analyzer and
the adaptive content engine against a JSON story file.
"""

import asyncio
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel

from echotrail.cli.ui.display import (
    display_adapted_content,
    display_context,
    display_insights,
    display_metrics,
    display_recommendations,
)
from echotrail.modules.adaptation.interface import UserContentPreferences
from echotrail.modules.context.interface import GeoSample, MovementAnalysis
from echotrail.modules.library.schemas import load_stories
from echotrail.modules.library.service import InMemoryStoryLibrary
from echotrail.shared.exceptions import EchoTrailError
from echotrail.shared.log_config import setup_logging
from echotrail.shared.models import MovementMode, SpeedTrend
from echotrail.shared.service_registry import ServiceRegistry, create_service_registry

app = typer.Typer(
    name="echotrail",
    help="EchoTrail - Stories that adapt to where you are and what you are doing",
    no_args_is_help=True,
    pretty_exceptions_enable=True,
)
console = Console()


def run_async(coro):
    """Helper to run async functions in sync context."""
    loop = asyncio.new_event_loop()
    try:
        return loop.run_until_complete(coro)
    finally:
        loop.close()


# =============================================================================
# Shared options
# =============================================================================

LAT_OPTION = typer.Option(59.9139, "--lat", help="Latitude in degrees")
LON_OPTION = typer.Option(10.7522, "--lon", help="Longitude in degrees")
ALTITUDE_OPTION = typer.Option(None, "--altitude", help="Altitude in meters")
MODE_OPTION = typer.Option(
    MovementMode.WALKING, "--mode", "-m", case_sensitive=False, help="Movement mode"
)
SPEED_OPTION = typer.Option(4.5, "--speed", "-s", help="Average speed in km/h")
TREND_OPTION = typer.Option(
    SpeedTrend.STABLE, "--trend", case_sensitive=False, help="Speed trend"
)
CONFIDENCE_OPTION = typer.Option(
    0.8, "--movement-confidence", min=0.0, max=1.0, help="Motion detector confidence"
)
STATIONARY_OPTION = typer.Option(
    0.0, "--stationary", help="Minutes spent at the current location"
)
STORIES_ARGUMENT = typer.Argument(
    ..., exists=True, dir_okay=False, readable=True, help="JSON file with stories"
)


def _build_movement(
    mode: MovementMode,
    speed: float,
    trend: SpeedTrend,
    confidence: float,
    stationary: float,
) -> MovementAnalysis:
    return MovementAnalysis(
        movement_mode=mode,
        average_speed=speed,
        trend=trend,
        confidence=confidence,
        stationary_duration=stationary,
        current_speed=speed,
    )


def _registry_for(stories_file: Path) -> ServiceRegistry:
    """Create a registry whose library holds the stories in a file."""
    try:
        stories = load_stories(stories_file)
    except EchoTrailError as e:
        console.print(f"[red]Could not load stories: {escape(e.message)}[/red]")
        raise typer.Exit(1)

    return create_service_registry(library=InMemoryStoryLibrary(stories))


@app.callback()
def main_callback(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    """Configure logging for every command."""
    setup_logging(verbose=verbose)


# =============================================================================
# Commands
# =============================================================================

@app.command("analyze")
def analyze(
    lat: float = LAT_OPTION,
    lon: float = LON_OPTION,
    altitude: Optional[float] = ALTITUDE_OPTION,
    mode: MovementMode = MODE_OPTION,
    speed: float = SPEED_OPTION,
    trend: SpeedTrend = TREND_OPTION,
    confidence: float = CONFIDENCE_OPTION,
    stationary: float = STATIONARY_OPTION,
) -> None:
    """Analyze the context for a location and movement."""
    analyzer = create_service_registry().get_context_analyzer()
    movement = _build_movement(mode, speed, trend, confidence, stationary)

    context = run_async(analyzer.analyze_context(GeoSample(lat, lon, altitude), movement))
    insights = analyzer.generate_insights(context)

    display_context(context)
    display_insights(insights)


@app.command("adapt")
def adapt(
    stories_file: Path = STORIES_ARGUMENT,
    story_id: str = typer.Argument(..., help="Id of the story to adapt"),
    lat: float = LAT_OPTION,
    lon: float = LON_OPTION,
    altitude: Optional[float] = ALTITUDE_OPTION,
    mode: MovementMode = MODE_OPTION,
    speed: float = SPEED_OPTION,
    trend: SpeedTrend = TREND_OPTION,
    confidence: float = CONFIDENCE_OPTION,
    stationary: float = STATIONARY_OPTION,
    brief: bool = typer.Option(False, "--brief", help="Prefer brief content"),
    detailed: bool = typer.Option(False, "--detailed", help="Prefer detailed content"),
    interactive: bool = typer.Option(False, "--interactive", help="Prefer interaction"),
) -> None:
    """Adapt one story to the current context."""
    registry = _registry_for(stories_file)
    analyzer = registry.get_context_analyzer()
    engine = registry.get_content_engine()
    movement = _build_movement(mode, speed, trend, confidence, stationary)

    preferences = None
    if brief or detailed or interactive:
        preferences = UserContentPreferences(
            prefers_brief_content=brief,
            prefers_detailed_content=detailed,
            prefers_interactive=interactive,
        )

    context = run_async(analyzer.analyze_context(GeoSample(lat, lon, altitude), movement))
    insights = analyzer.generate_insights(context)
    adapted = run_async(engine.adapt_content(story_id, context, insights, preferences))

    if adapted is None:
        console.print(f"[red]Story not found: {story_id}[/red]")
        raise typer.Exit(1)

    display_context(context)
    display_adapted_content(adapted, title=story_id)
    display_metrics(engine.get_metrics())


@app.command("recommend")
def recommend(
    stories_file: Path = STORIES_ARGUMENT,
    lat: float = LAT_OPTION,
    lon: float = LON_OPTION,
    altitude: Optional[float] = ALTITUDE_OPTION,
    mode: MovementMode = MODE_OPTION,
    speed: float = SPEED_OPTION,
    trend: SpeedTrend = TREND_OPTION,
    confidence: float = CONFIDENCE_OPTION,
    stationary: float = STATIONARY_OPTION,
    max_results: int = typer.Option(5, "--max", "-n", min=1, help="Maximum recommendations"),
) -> None:
    """Rank the stories in a file for the current context."""
    registry = _registry_for(stories_file)
    analyzer = registry.get_context_analyzer()
    engine = registry.get_content_engine()
    movement = _build_movement(mode, speed, trend, confidence, stationary)

    context = run_async(analyzer.analyze_context(GeoSample(lat, lon, altitude), movement))
    insights = analyzer.generate_insights(context)
    recommendations = engine.get_content_recommendations(context, insights, max_results)

    console.print(Panel.fit(
        f"[bold cyan]Recommendations[/bold cyan]\n{insights.primary_context}",
        border_style="cyan",
    ))
    display_recommendations(recommendations)


def main() -> None:
    """Main entry point."""
    app()


if __name__ == "__main__":
    main()
