"""Adaptation Module - Turning stories into context-tailored versions."""

from dataclasses import dataclass, field
from typing import Protocol

from echotrail.modules.context.interface import ContextualEnvironment, ContextualInsights
from echotrail.modules.library.interface import StoryContent
from echotrail.shared.models import (
    ActivityContext,
    ContentComplexity,
    ContentFormat,
    ContentLength,
    DeliveryTiming,
    InteractionFrequency,
    InteractionType,
    Priority,
)


@dataclass(frozen=True)
class AdaptationStrategy:
    """Parameters controlling how a story is shortened, simplified and made interactive."""

    context_hash: str
    length_reduction: float  # 0-1, fraction of sentences removed
    complexity_adjustment: int  # -2 (simplest) to +2
    interaction_level: float  # 0-1
    delivery_speed: float  # multiplier, 1.0 = normal speech rate
    format_preference: tuple[ContentFormat, ...]
    focus_areas: tuple[str, ...] = ()
    avoid_areas: tuple[str, ...] = ()


@dataclass(frozen=True)
class InteractionPoint:
    """A moment in adapted content where the user is invited to engage."""

    timestamp: float  # seconds from start
    type: InteractionType
    content: str
    options: tuple[str, ...] | None = None
    expected_duration: int = 3  # seconds
    optional: bool = True


@dataclass(frozen=True)
class AdaptedContent:
    """A story rendered for one context. Immutable once produced."""

    text: str
    duration: int  # seconds
    format: ContentFormat
    length: ContentLength
    complexity: ContentComplexity
    adaptation_context: str  # context hash, or "quick_adaptation" for previews
    confidence: float  # 0-1
    interaction_points: tuple[InteractionPoint, ...] = ()
    audio_script: str | None = None


@dataclass(frozen=True)
class UserContentPreferences:
    """Explicit listener preferences layered on top of the situational rules."""

    prefers_brief_content: bool = False
    prefers_detailed_content: bool = False
    prefers_interactive: bool = False
    preferred_formats: tuple[ContentFormat, ...] = ()
    interaction_frequency: InteractionFrequency = InteractionFrequency.MODERATE


@dataclass
class ContentRecommendation:
    """A story worth delivering now, with the version to deliver."""

    content: StoryContent
    adapted_version: AdaptedContent
    relevance_score: float  # 0-1
    delivery_timing: DeliveryTiming
    priority: Priority
    reason: str
    estimated_engagement: float  # 0-1


@dataclass
class AdaptationMetrics:
    """Running counters over every adaptation call."""

    total_adaptations: int = 0
    successful_adaptations: int = 0
    average_confidence: float = 0.0
    adaptation_latency: float = 0.0  # ms, running average
    cache_hit_rate: float = 0.0
    context_counts: dict[ActivityContext, int] = field(default_factory=dict)


class IAdaptationEngine(Protocol):
    """Interface for the adaptive content engine.

    Adapts library stories to a context and ranks which ones to deliver.
    """

    async def adapt_content(
        self,
        content_id: str,
        context: ContextualEnvironment,
        insights: ContextualInsights,
        user_preferences: UserContentPreferences | None = None,
    ) -> AdaptedContent | None:
        """Adapt a story to the given context.

        Args:
            content_id: Library id of the story
            context: Snapshot from the context analyzer
            insights: Insights derived from the snapshot
            user_preferences: Optional listener preferences

        Returns:
            AdaptedContent, or None if the story is not in the library
        """
        ...

    def get_content_recommendations(
        self,
        context: ContextualEnvironment,
        insights: ContextualInsights,
        max_recommendations: int = 5,
    ) -> list[ContentRecommendation]:
        """Rank library stories for the given context.

        Args:
            context: Snapshot from the context analyzer
            insights: Insights derived from the snapshot
            max_recommendations: Maximum number of results

        Returns:
            Recommendations, most important first
        """
        ...

    def get_metrics(self) -> AdaptationMetrics:
        """Get a snapshot of the adaptation metrics."""
        ...
