"""Display Utilities - Rich output formatting."""

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from echotrail.modules.adaptation.interface import (
    AdaptationMetrics,
    AdaptedContent,
    ContentRecommendation,
)
from echotrail.modules.context.interface import ContextualEnvironment, ContextualInsights

console = Console()

_PRIORITY_STYLES = {
    "URGENT": "bold red",
    "HIGH": "yellow",
    "MEDIUM": "cyan",
    "LOW": "dim",
}


def _label(value) -> str:
    return value.value.replace("_", " ").title()


def display_context(context: ContextualEnvironment) -> None:
    """Display a situational snapshot as a two-column table."""
    table = Table(show_header=False, box=None)
    table.add_column("Field", style="bold")
    table.add_column("Value")

    movement = context.movement
    table.add_row("Time", f"{_label(context.time_of_day)} ({_label(context.season)})")
    table.add_row(
        "Movement",
        f"{_label(movement.movement_mode)} at {movement.average_speed:.1f} km/h "
        f"({_label(movement.trend)})",
    )
    table.add_row("Environment", _label(context.location.environment_type))
    if context.location.nearby_pois:
        pois = ", ".join(f"{p.name} ({p.distance:.0f} m)" for p in context.location.nearby_pois)
        table.add_row("Nearby", pois)

    if context.weather is not None:
        weather = context.weather
        source = " [dim](fallback)[/dim]" if weather.is_fallback else ""
        table.add_row("Weather", f"{_label(weather.condition)}, {weather.temperature:.0f}°C{source}")

    table.add_row("Activity", _label(context.activity_context))
    table.add_row("Available time", _label(context.available_time))
    table.add_row("Attention", _label(context.attention_level))
    table.add_row("Preference", _label(context.content_preference))

    console.print(Panel(table, title="[bold cyan]Context[/bold cyan]", border_style="cyan"))


def display_insights(insights: ContextualInsights) -> None:
    """Display insights: summary, suggestions, factors and recommendations."""
    console.print(f"\n[bold]{insights.primary_context}[/bold]")
    console.print(f"[dim]Confidence: {insights.confidence:.0%}[/dim]")

    if insights.content_suggestions:
        table = Table(show_header=True, header_style="bold magenta")
        table.add_column("Type")
        table.add_column("Priority", width=8)
        table.add_column("Time", width=6)
        table.add_column("Reason", min_width=30)
        for suggestion in insights.content_suggestions:
            table.add_row(
                _label(suggestion.type),
                f"[{_PRIORITY_STYLES[suggestion.priority.value]}]{suggestion.priority.value}[/]",
                f"{suggestion.time_required} min",
                suggestion.reason,
            )
        console.print(table)

    if insights.environmental_factors:
        console.print("\n[bold]Environmental factors:[/bold]")
        for factor in insights.environmental_factors:
            console.print(f"  [yellow]![/yellow] {factor}")

    if insights.adaptation_recommendations:
        console.print("\n[bold]Adjustments:[/bold]")
        for rec in insights.adaptation_recommendations:
            console.print(
                f"  {_label(rec.aspect)}: {rec.adjustment.value.lower()} "
                f"[dim]({rec.reason})[/dim]"
            )


def display_adapted_content(adapted: AdaptedContent, title: str = "Adapted Story") -> None:
    """Display an adapted story and its properties."""
    console.print(Panel(
        escape(adapted.text),
        title=f"[bold green]{title}[/bold green]",
        subtitle=(
            f"{adapted.format.value} | {adapted.length.value} | "
            f"{adapted.complexity.value} | {adapted.duration}s"
        ),
        border_style="green",
    ))

    if adapted.audio_script:
        console.print(Panel(escape(adapted.audio_script), title="Audio script", border_style="blue"))

    if adapted.interaction_points:
        table = Table(show_header=True, header_style="bold magenta")
        table.add_column("At", width=6)
        table.add_column("Type", width=10)
        table.add_column("Prompt", min_width=30)
        for point in adapted.interaction_points:
            prompt = point.content
            if point.options:
                prompt += f" [dim]({' / '.join(point.options)})[/dim]"
            table.add_row(f"{point.timestamp:.0f}s", _label(point.type), prompt)
        console.print(table)

    console.print(f"[dim]Confidence: {adapted.confidence:.0%}[/dim]")


def display_recommendations(recommendations: list[ContentRecommendation]) -> None:
    """Display ranked recommendations in a table."""
    if not recommendations:
        console.print("[yellow]No stories are relevant right now.[/yellow]")
        return

    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("#", style="dim", width=3)
    table.add_column("Story", min_width=20)
    table.add_column("Relevance", width=9)
    table.add_column("Priority", width=8)
    table.add_column("Timing", width=13)
    table.add_column("Format", width=11)
    table.add_column("Reason", min_width=25)

    for i, rec in enumerate(recommendations, 1):
        priority = rec.priority.value
        table.add_row(
            str(i),
            rec.content.title,
            f"{rec.relevance_score:.2f}",
            f"[{_PRIORITY_STYLES[priority]}]{priority}[/]",
            _label(rec.delivery_timing),
            _label(rec.adapted_version.format),
            rec.reason,
        )

    console.print(table)


def display_metrics(metrics: AdaptationMetrics) -> None:
    """Display adaptation metrics summary."""
    console.print(
        f"\n[dim]Adaptations: {metrics.total_adaptations} "
        f"({metrics.successful_adaptations} successful) | "
        f"Avg confidence: {metrics.average_confidence:.2f} | "
        f"Cache hit rate: {metrics.cache_hit_rate:.0%} | "
        f"Avg latency: {metrics.adaptation_latency:.1f} ms[/dim]"
    )
